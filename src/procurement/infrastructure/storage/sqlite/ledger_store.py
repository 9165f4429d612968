"""SQLite implementation of the append-only stock ledger."""

import aiosqlite

from procurement.config import get_logger
from procurement.core.entities import MovementType, StockMovement
from procurement.core.interfaces import IStockLedgerRepository
from procurement.infrastructure.storage.sqlite.base import (
    SQLiteRepository,
    from_iso_or_now,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteStockLedgerRepository(SQLiteRepository, IStockLedgerRepository):
    """
    Stock movements table.

    Only INSERT and SELECT are issued here; triggers in the schema abort any
    UPDATE or DELETE against ledger rows. Insertion order (rowid) is the
    ledger order.
    """

    async def append(self, movement: StockMovement) -> StockMovement:
        await self.conn.execute(
            """
            INSERT INTO stock_movements (
                id, tenant_id, material_id, material_name, quantity_change,
                resulting_stock, type, justification, actor_id, actor_name,
                timestamp, related_request_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.id,
                self.tenant_id,
                movement.material_id,
                movement.material_name,
                movement.quantity_change,
                movement.resulting_stock,
                movement.type.value,
                movement.justification,
                movement.actor_id,
                movement.actor_name,
                to_iso(movement.timestamp),
                movement.related_request_id,
            ),
        )
        logger.debug("stock_movement_appended", movement_id=movement.id)
        return movement

    async def list_for_material(
        self, material_id: str, limit: int = 100, offset: int = 0
    ) -> list[StockMovement]:
        rows = await self._fetch_all(
            """
            SELECT * FROM stock_movements
            WHERE tenant_id = ? AND material_id = ?
            ORDER BY rowid DESC
            LIMIT ? OFFSET ?
            """,
            (self.tenant_id, material_id, limit, offset),
        )
        return [self._row_to_movement(row) for row in rows]

    async def list_for_request(self, request_id: str) -> list[StockMovement]:
        rows = await self._fetch_all(
            """
            SELECT * FROM stock_movements
            WHERE tenant_id = ? AND related_request_id = ?
            ORDER BY rowid
            """,
            (self.tenant_id, request_id),
        )
        return [self._row_to_movement(row) for row in rows]

    async def summarize(self, material_id: str) -> tuple[float, int, float | None]:
        row = await self._fetch_one(
            """
            SELECT COALESCE(SUM(quantity_change), 0) AS total, COUNT(*) AS movements
            FROM stock_movements
            WHERE tenant_id = ? AND material_id = ?
            """,
            (self.tenant_id, material_id),
        )
        last = await self._fetch_one(
            """
            SELECT resulting_stock FROM stock_movements
            WHERE tenant_id = ? AND material_id = ?
            ORDER BY rowid DESC
            LIMIT 1
            """,
            (self.tenant_id, material_id),
        )
        return (
            float(row["total"]),
            int(row["movements"]),
            float(last["resulting_stock"]) if last else None,
        )

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            tenant_id=row["tenant_id"],
            material_id=row["material_id"],
            material_name=row["material_name"],
            quantity_change=float(row["quantity_change"]),
            resulting_stock=float(row["resulting_stock"]),
            type=MovementType(row["type"]),
            justification=row["justification"],
            actor_id=row["actor_id"],
            actor_name=row["actor_name"],
            timestamp=from_iso_or_now(row["timestamp"]),
            related_request_id=row["related_request_id"],
        )
