"""Tests for the append-only stock ledger repository."""

import aiosqlite
import pytest

from procurement.core.entities import Material, MovementType, StockMovement

TENANT = "tenant-a"


def movement(material: Material, change: float, resulting: float, **overrides) -> StockMovement:
    fields = {
        "tenant_id": TENANT,
        "material_id": material.id,
        "material_name": material.name,
        "quantity_change": change,
        "resulting_stock": resulting,
        "type": MovementType.MANUAL_ENTRY,
        "justification": "count",
        "actor_id": "alice",
    }
    fields.update(overrides)
    return StockMovement(**fields)


@pytest.fixture
async def material(unit_of_work) -> Material:
    async with unit_of_work.transaction(TENANT) as tx:
        return await tx.materials.add(Material(tenant_id=TENANT, name="Cement"))


class TestStockLedgerRepository:
    async def test_list_newest_first(self, unit_of_work, material):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.ledger.append(movement(material, 50, 50, type=MovementType.INITIAL))
            await tx.ledger.append(movement(material, -20, 30))

        async with unit_of_work.reader(TENANT) as tx:
            entries = await tx.ledger.list_for_material(material.id)

        assert [e.quantity_change for e in entries] == [-20, 50]
        assert entries[1].type == MovementType.INITIAL

    async def test_summarize(self, unit_of_work, material):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.ledger.append(movement(material, 50, 50))
            await tx.ledger.append(movement(material, -20, 30))

        async with unit_of_work.reader(TENANT) as tx:
            total, count, last = await tx.ledger.summarize(material.id)

        assert (total, count, last) == (30.0, 2, 30.0)

    async def test_summarize_empty(self, unit_of_work, material):
        async with unit_of_work.reader(TENANT) as tx:
            assert await tx.ledger.summarize(material.id) == (0.0, 0, None)

    async def test_list_for_request(self, unit_of_work, material):
        async with unit_of_work.transaction(TENANT) as tx:
            await tx.ledger.append(movement(material, 10, 10, related_request_id="pr-1"))
            await tx.ledger.append(movement(material, 5, 15))

        async with unit_of_work.reader(TENANT) as tx:
            entries = await tx.ledger.list_for_request("pr-1")

        assert len(entries) == 1
        assert entries[0].related_request_id == "pr-1"

    async def test_entries_cannot_be_updated(self, unit_of_work, pool, material):
        async with unit_of_work.transaction(TENANT) as tx:
            entry = await tx.ledger.append(movement(material, 10, 10))

        with pytest.raises(aiosqlite.DatabaseError):
            async with pool.transaction() as conn:
                await conn.execute(
                    "UPDATE stock_movements SET quantity_change = 99 WHERE id = ?", (entry.id,)
                )

    async def test_entries_cannot_be_deleted(self, unit_of_work, pool, material):
        async with unit_of_work.transaction(TENANT) as tx:
            entry = await tx.ledger.append(movement(material, 10, 10))

        with pytest.raises(aiosqlite.DatabaseError):
            async with pool.transaction() as conn:
                await conn.execute("DELETE FROM stock_movements WHERE id = ?", (entry.id,))

        async with unit_of_work.reader(TENANT) as tx:
            assert len(await tx.ledger.list_for_material(material.id)) == 1
