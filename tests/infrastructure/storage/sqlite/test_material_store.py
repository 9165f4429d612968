"""Tests for SQLite material, unit and supplier repositories."""

import aiosqlite
import pytest

from procurement.core.entities import Material, Supplier
from procurement.core.exceptions import TransactionConflictError

TENANT = "tenant-a"


class TestMaterialRepository:
    async def test_add_and_get(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            material = await tx.materials.add(
                Material(tenant_id=TENANT, name="Cement", unit="bag", category="aggregates")
            )

        async with unit_of_work.reader(TENANT) as tx:
            stored = await tx.materials.get(material.id)

        assert stored is not None
        assert stored.name == "Cement"
        assert stored.stock == 0
        assert stored.version == 0

    async def test_get_is_tenant_scoped(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            material = await tx.materials.add(Material(tenant_id=TENANT, name="Cement"))

        async with unit_of_work.reader("tenant-b") as tx:
            assert await tx.materials.get(material.id) is None
            assert await tx.materials.find_by_name("Cement") is None

    async def test_find_by_name_skips_archived(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.materials.add(Material(tenant_id=TENANT, name="Cement", archived=True))
            active = await tx.materials.add(Material(tenant_id=TENANT, name="Cement"))

        async with unit_of_work.reader(TENANT) as tx:
            found = await tx.materials.find_by_name("Cement")

        assert found is not None
        assert found.id == active.id

    async def test_save_stock_bumps_version(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            material = await tx.materials.add(Material(tenant_id=TENANT, name="Cement"))
            await tx.materials.save_stock(material, 40)

        assert material.stock == 40
        assert material.version == 1
        async with unit_of_work.reader(TENANT) as tx:
            stored = await tx.materials.get(material.id)
        assert stored.stock == 40
        assert stored.version == 1

    async def test_save_stock_with_stale_version_conflicts(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            material = await tx.materials.add(Material(tenant_id=TENANT, name="Cement"))

        stale = material.model_copy()
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.materials.save_stock(material, 10)

        with pytest.raises(TransactionConflictError):
            async with unit_of_work.transaction(TENANT) as tx:
                await tx.materials.save_stock(stale, 99)

        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(material.id)).stock == 10

    async def test_negative_stock_rejected_by_schema(self, pool):
        async with pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO materials (id, tenant_id, name, created_at, updated_at) "
                "VALUES ('m1', 't1', 'Cement', '2026-01-01', '2026-01-01')"
            )

        with pytest.raises(aiosqlite.IntegrityError):
            async with pool.transaction() as conn:
                await conn.execute("UPDATE materials SET stock = -1 WHERE id = 'm1'")

    async def test_list_filters_by_category(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.materials.add(Material(tenant_id=TENANT, name="Cement", category="aggregates"))
            await tx.materials.add(Material(tenant_id=TENANT, name="Cable", category="electrical"))

        async with unit_of_work.reader(TENANT) as tx:
            electrical = await tx.materials.list(category="electrical")
            everything = await tx.materials.list()

        assert [m.name for m in electrical] == ["Cable"]
        assert len(everything) == 2


class TestUnitRepository:
    async def test_ensure_is_idempotent(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            first = await tx.units.ensure("bag")
            second = await tx.units.ensure("bag")

        async with unit_of_work.reader(TENANT) as tx:
            units = await tx.units.list()

        assert first is True
        assert second is False
        assert [u.name for u in units] == ["bag"]

    async def test_units_are_per_tenant(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.units.ensure("bag")
        async with unit_of_work.transaction("tenant-b") as tx:
            assert await tx.units.ensure("bag") is True


class TestSupplierRepository:
    async def test_categories_round_trip(self, unit_of_work):
        async with unit_of_work.transaction(TENANT) as tx:
            supplier = await tx.suppliers.add(
                Supplier(tenant_id=TENANT, name="Holcim", categories=["aggregates", "cement"])
            )

        async with unit_of_work.reader(TENANT) as tx:
            stored = await tx.suppliers.get(supplier.id)
            listed = await tx.suppliers.list()

        assert stored.categories == ["aggregates", "cement"]
        assert [s.id for s in listed] == [supplier.id]
