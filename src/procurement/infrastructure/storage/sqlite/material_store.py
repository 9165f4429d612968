"""SQLite implementation of materials, units and suppliers."""

from datetime import UTC, datetime

import aiosqlite

from procurement.config import get_logger
from procurement.core.entities import Material, Supplier, Unit, new_id
from procurement.core.exceptions import TransactionConflictError
from procurement.core.interfaces import (
    IMaterialRepository,
    ISupplierRepository,
    IUnitRepository,
)
from procurement.infrastructure.storage.sqlite.base import (
    SQLiteRepository,
    dump_json,
    from_iso_or_now,
    load_json,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteMaterialRepository(SQLiteRepository, IMaterialRepository):
    """SQLite implementation of material storage."""

    async def add(self, material: Material) -> Material:
        """Insert a new material."""
        material.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO materials (
                id, tenant_id, name, unit, category, stock,
                preferred_supplier_id, archived, version, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                material.id,
                self.tenant_id,
                material.name,
                material.unit,
                material.category,
                material.stock,
                material.preferred_supplier_id,
                int(material.archived),
                material.version,
                to_iso(material.created_at),
                to_iso(material.updated_at),
            ),
        )
        logger.info("material_created", material_id=material.id, name=material.name)
        return material

    async def get(self, material_id: str) -> Material | None:
        """Get material by ID."""
        row = await self._fetch_one(
            "SELECT * FROM materials WHERE id = ? AND tenant_id = ?",
            (material_id, self.tenant_id),
        )
        return self._row_to_material(row) if row else None

    async def find_by_name(self, name: str) -> Material | None:
        """Find an active material by exact name."""
        row = await self._fetch_one(
            """
            SELECT * FROM materials
            WHERE tenant_id = ? AND name = ? AND archived = 0
            ORDER BY created_at
            LIMIT 1
            """,
            (self.tenant_id, name),
        )
        return self._row_to_material(row) if row else None

    async def save_stock(self, material: Material, new_stock: float) -> Material:
        """Compare-and-set the stock on the material's version."""
        now = datetime.now(UTC)
        cursor = await self.conn.execute(
            """
            UPDATE materials SET
                stock = ?,
                version = version + 1,
                updated_at = ?
            WHERE id = ? AND tenant_id = ? AND version = ?
            """,
            (new_stock, to_iso(now), material.id, self.tenant_id, material.version),
        )
        if cursor.rowcount == 0:
            logger.warning(
                "material_version_conflict",
                material_id=material.id,
                expected_version=material.version,
            )
            raise TransactionConflictError("material version changed", entity_id=material.id)

        material.stock = new_stock
        material.version += 1
        material.updated_at = now
        return material

    async def list(
        self,
        limit: int = 100,
        offset: int = 0,
        category: str | None = None,
    ) -> list[Material]:
        """List materials with pagination and optional category filter."""
        if category:
            rows = await self._fetch_all(
                """
                SELECT * FROM materials
                WHERE tenant_id = ? AND category = ?
                ORDER BY name LIMIT ? OFFSET ?
                """,
                (self.tenant_id, category, limit, offset),
            )
        else:
            rows = await self._fetch_all(
                """
                SELECT * FROM materials
                WHERE tenant_id = ?
                ORDER BY name LIMIT ? OFFSET ?
                """,
                (self.tenant_id, limit, offset),
            )
        return [self._row_to_material(row) for row in rows]

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        return Material(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            unit=row["unit"],
            category=row["category"],
            stock=float(row["stock"]),
            preferred_supplier_id=row["preferred_supplier_id"],
            archived=bool(row["archived"]),
            version=row["version"],
            created_at=from_iso_or_now(row["created_at"]),
            updated_at=from_iso_or_now(row["updated_at"]),
        )


class SQLiteUnitRepository(SQLiteRepository, IUnitRepository):
    """SQLite implementation of units of measure."""

    async def ensure(self, name: str) -> bool:
        """Idempotent upsert keyed on (tenant_id, name)."""
        cursor = await self.conn.execute(
            """
            INSERT INTO units (id, tenant_id, name) VALUES (?, ?, ?)
            ON CONFLICT(tenant_id, name) DO NOTHING
            """,
            (new_id(), self.tenant_id, name),
        )
        created = cursor.rowcount == 1
        if created:
            logger.info("unit_created", name=name)
        return created

    async def list(self) -> list[Unit]:
        rows = await self._fetch_all(
            "SELECT * FROM units WHERE tenant_id = ? ORDER BY name",
            (self.tenant_id,),
        )
        return [Unit(id=r["id"], tenant_id=r["tenant_id"], name=r["name"]) for r in rows]


class SQLiteSupplierRepository(SQLiteRepository, ISupplierRepository):
    """SQLite implementation of supplier storage."""

    async def add(self, supplier: Supplier) -> Supplier:
        supplier.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO suppliers (id, tenant_id, name, categories, tax_id, email, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                supplier.id,
                self.tenant_id,
                supplier.name,
                dump_json(supplier.categories),
                supplier.tax_id,
                supplier.email,
                to_iso(supplier.created_at),
            ),
        )
        logger.info("supplier_created", supplier_id=supplier.id, name=supplier.name)
        return supplier

    async def get(self, supplier_id: str) -> Supplier | None:
        row = await self._fetch_one(
            "SELECT * FROM suppliers WHERE id = ? AND tenant_id = ?",
            (supplier_id, self.tenant_id),
        )
        return self._row_to_supplier(row) if row else None

    async def list(self, limit: int = 100, offset: int = 0) -> list[Supplier]:
        rows = await self._fetch_all(
            "SELECT * FROM suppliers WHERE tenant_id = ? ORDER BY name LIMIT ? OFFSET ?",
            (self.tenant_id, limit, offset),
        )
        return [self._row_to_supplier(row) for row in rows]

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            categories=load_json(row["categories"], []),
            tax_id=row["tax_id"],
            email=row["email"],
            created_at=from_iso_or_now(row["created_at"]),
        )
