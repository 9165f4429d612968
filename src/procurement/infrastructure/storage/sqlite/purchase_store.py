"""SQLite implementation of purchase requests, lots and orders."""

import aiosqlite

from procurement.config import get_logger
from procurement.core.entities import (
    LotStatus,
    OrderItem,
    OrderStatus,
    PurchaseLot,
    PurchaseOrder,
    PurchaseRequest,
    PurchaseRequestStatus,
)
from procurement.core.exceptions import LotNotFoundError
from procurement.core.interfaces import (
    IPurchaseLotRepository,
    IPurchaseOrderRepository,
    IPurchaseRequestRepository,
)
from procurement.infrastructure.storage.sqlite.base import (
    SQLiteRepository,
    dump_json,
    from_iso,
    from_iso_or_now,
    load_json,
    to_iso,
)

logger = get_logger(__name__)


class SQLitePurchaseRequestRepository(SQLiteRepository, IPurchaseRequestRepository):
    """SQLite implementation of purchase request storage."""

    async def add(self, request: PurchaseRequest) -> PurchaseRequest:
        """Insert a new request."""
        request.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO purchase_requests (
                id, tenant_id, material_name, quantity, original_quantity,
                unit, category, justification, area, requester_id, requester_name,
                status, lot_id, purchase_order_id, derived_from_request_id, notes,
                approver_id, approver_name, approved_at, received_at, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                request.id,
                self.tenant_id,
                request.material_name,
                request.quantity,
                request.original_quantity,
                request.unit,
                request.category,
                request.justification,
                request.area,
                request.requester_id,
                request.requester_name,
                request.status.value,
                request.lot_id,
                request.purchase_order_id,
                request.derived_from_request_id,
                request.notes,
                request.approver_id,
                request.approver_name,
                to_iso(request.approved_at),
                to_iso(request.received_at),
                to_iso(request.created_at),
            ),
        )
        logger.info(
            "purchase_request_stored",
            request_id=request.id,
            material=request.material_name,
            status=request.status.value,
        )
        return request

    async def get(self, request_id: str) -> PurchaseRequest | None:
        """Get request by ID."""
        row = await self._fetch_one(
            "SELECT * FROM purchase_requests WHERE id = ? AND tenant_id = ?",
            (request_id, self.tenant_id),
        )
        return self._row_to_request(row) if row else None

    async def save(self, request: PurchaseRequest) -> PurchaseRequest:
        """Persist all mutable fields."""
        await self.conn.execute(
            """
            UPDATE purchase_requests SET
                material_name = ?,
                quantity = ?,
                original_quantity = ?,
                unit = ?,
                category = ?,
                justification = ?,
                status = ?,
                lot_id = ?,
                purchase_order_id = ?,
                notes = ?,
                approver_id = ?,
                approver_name = ?,
                approved_at = ?,
                received_at = ?
            WHERE id = ? AND tenant_id = ?
            """,
            (
                request.material_name,
                request.quantity,
                request.original_quantity,
                request.unit,
                request.category,
                request.justification,
                request.status.value,
                request.lot_id,
                request.purchase_order_id,
                request.notes,
                request.approver_id,
                request.approver_name,
                to_iso(request.approved_at),
                to_iso(request.received_at),
                request.id,
                self.tenant_id,
            ),
        )
        logger.debug("purchase_request_saved", request_id=request.id, status=request.status.value)
        return request

    async def delete(self, request_id: str) -> bool:
        cursor = await self.conn.execute(
            "DELETE FROM purchase_requests WHERE id = ? AND tenant_id = ?",
            (request_id, self.tenant_id),
        )
        return cursor.rowcount > 0

    async def list_by_lot(self, lot_id: str) -> list[PurchaseRequest]:
        rows = await self._fetch_all(
            """
            SELECT * FROM purchase_requests
            WHERE tenant_id = ? AND lot_id = ?
            ORDER BY created_at, rowid
            """,
            (self.tenant_id, lot_id),
        )
        return [self._row_to_request(row) for row in rows]

    async def list_by_order(self, order_id: str) -> list[PurchaseRequest]:
        rows = await self._fetch_all(
            """
            SELECT * FROM purchase_requests
            WHERE tenant_id = ? AND purchase_order_id = ?
            ORDER BY created_at, rowid
            """,
            (self.tenant_id, order_id),
        )
        return [self._row_to_request(row) for row in rows]

    @staticmethod
    def _row_to_request(row: aiosqlite.Row) -> PurchaseRequest:
        return PurchaseRequest(
            id=row["id"],
            tenant_id=row["tenant_id"],
            material_name=row["material_name"],
            quantity=float(row["quantity"]),
            original_quantity=(
                float(row["original_quantity"]) if row["original_quantity"] is not None else None
            ),
            unit=row["unit"],
            category=row["category"],
            justification=row["justification"],
            area=row["area"],
            requester_id=row["requester_id"],
            requester_name=row["requester_name"],
            status=PurchaseRequestStatus(row["status"]),
            lot_id=row["lot_id"],
            purchase_order_id=row["purchase_order_id"],
            derived_from_request_id=row["derived_from_request_id"],
            notes=row["notes"],
            approver_id=row["approver_id"],
            approver_name=row["approver_name"],
            approved_at=from_iso(row["approved_at"]),
            received_at=from_iso(row["received_at"]),
            created_at=from_iso_or_now(row["created_at"]),
        )

    async def list(
        self,
        status: PurchaseRequestStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[PurchaseRequest]:
        """List requests, newest first."""
        if status:
            rows = await self._fetch_all(
                """
                SELECT * FROM purchase_requests
                WHERE tenant_id = ? AND status = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                (self.tenant_id, status.value, limit, offset),
            )
        else:
            rows = await self._fetch_all(
                """
                SELECT * FROM purchase_requests
                WHERE tenant_id = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                (self.tenant_id, limit, offset),
            )
        return [self._row_to_request(row) for row in rows]


class SQLitePurchaseLotRepository(SQLiteRepository, IPurchaseLotRepository):
    """SQLite implementation of purchase lot storage."""

    async def add(self, lot: PurchaseLot) -> PurchaseLot:
        lot.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO purchase_lots (id, tenant_id, name, status, supplier_id, created_by, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                lot.id,
                self.tenant_id,
                lot.name,
                lot.status.value,
                lot.supplier_id,
                lot.created_by,
                to_iso(lot.created_at),
            ),
        )
        logger.info("purchase_lot_created", lot_id=lot.id, name=lot.name)
        return lot

    async def ensure(self, lot: PurchaseLot) -> tuple[PurchaseLot, bool]:
        """Upsert shared by explicit and on-the-fly lot creation."""
        cursor = await self.conn.execute(
            """
            INSERT INTO purchase_lots (id, tenant_id, name, status, supplier_id, created_by, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(tenant_id, id) DO NOTHING
            """,
            (
                lot.id,
                self.tenant_id,
                lot.name,
                lot.status.value,
                lot.supplier_id,
                lot.created_by,
                to_iso(lot.created_at),
            ),
        )
        created = cursor.rowcount == 1
        stored = await self.get(lot.id)
        if stored is None:
            raise LotNotFoundError(lot.id)
        if created:
            logger.info("purchase_lot_created", lot_id=lot.id, name=lot.name, implicit=True)
        return stored, created

    async def get(self, lot_id: str) -> PurchaseLot | None:
        row = await self._fetch_one(
            "SELECT * FROM purchase_lots WHERE id = ? AND tenant_id = ?",
            (lot_id, self.tenant_id),
        )
        return self._row_to_lot(row) if row else None

    async def save(self, lot: PurchaseLot) -> PurchaseLot:
        await self.conn.execute(
            """
            UPDATE purchase_lots SET name = ?, status = ?, supplier_id = ?
            WHERE id = ? AND tenant_id = ?
            """,
            (lot.name, lot.status.value, lot.supplier_id, lot.id, self.tenant_id),
        )
        return lot

    async def delete(self, lot_id: str) -> bool:
        cursor = await self.conn.execute(
            "DELETE FROM purchase_lots WHERE id = ? AND tenant_id = ?",
            (lot_id, self.tenant_id),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_lot(row: aiosqlite.Row) -> PurchaseLot:
        return PurchaseLot(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            status=LotStatus(row["status"]),
            supplier_id=row["supplier_id"],
            created_by=row["created_by"],
            created_at=from_iso_or_now(row["created_at"]),
        )

    async def list(self, status: LotStatus | None = None) -> list[PurchaseLot]:
        if status:
            rows = await self._fetch_all(
                "SELECT * FROM purchase_lots WHERE tenant_id = ? AND status = ? ORDER BY name",
                (self.tenant_id, status.value),
            )
        else:
            rows = await self._fetch_all(
                "SELECT * FROM purchase_lots WHERE tenant_id = ? ORDER BY name",
                (self.tenant_id,),
            )
        return [self._row_to_lot(row) for row in rows]


class SQLitePurchaseOrderRepository(SQLiteRepository, IPurchaseOrderRepository):
    """SQLite implementation of purchase order storage."""

    async def add(self, order: PurchaseOrder) -> PurchaseOrder:
        order.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO purchase_orders (
                id, tenant_id, lot_id, supplier_id, items, total_amount, status,
                official_order_number, request_ids, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                order.id,
                self.tenant_id,
                order.lot_id,
                order.supplier_id,
                dump_json([item.model_dump() for item in order.items]),
                order.total_amount,
                order.status.value,
                order.official_order_number,
                dump_json(order.request_ids),
                order.created_by,
                to_iso(order.created_at),
            ),
        )
        logger.info(
            "purchase_order_stored",
            order_id=order.id,
            lot_id=order.lot_id,
            status=order.status.value,
            items=len(order.items),
        )
        return order

    async def get(self, order_id: str) -> PurchaseOrder | None:
        row = await self._fetch_one(
            "SELECT * FROM purchase_orders WHERE id = ? AND tenant_id = ?",
            (order_id, self.tenant_id),
        )
        return self._row_to_order(row) if row else None

    async def save(self, order: PurchaseOrder) -> PurchaseOrder:
        await self.conn.execute(
            "UPDATE purchase_orders SET status = ? WHERE id = ? AND tenant_id = ?",
            (order.status.value, order.id, self.tenant_id),
        )
        return order

    async def delete(self, order_id: str) -> bool:
        cursor = await self.conn.execute(
            "DELETE FROM purchase_orders WHERE id = ? AND tenant_id = ?",
            (order_id, self.tenant_id),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_order(row: aiosqlite.Row) -> PurchaseOrder:
        return PurchaseOrder(
            id=row["id"],
            tenant_id=row["tenant_id"],
            lot_id=row["lot_id"],
            supplier_id=row["supplier_id"],
            items=[OrderItem(**item) for item in load_json(row["items"], [])],
            total_amount=float(row["total_amount"]),
            status=OrderStatus(row["status"]),
            official_order_number=row["official_order_number"],
            request_ids=load_json(row["request_ids"], []),
            created_by=row["created_by"],
            created_at=from_iso_or_now(row["created_at"]),
        )

    async def list(
        self,
        lot_id: str | None = None,
        status: OrderStatus | None = None,
    ) -> list[PurchaseOrder]:
        sql = "SELECT * FROM purchase_orders WHERE tenant_id = ?"
        params: list = [self.tenant_id]
        if lot_id:
            sql += " AND lot_id = ?"
            params.append(lot_id)
        if status:
            sql += " AND status = ?"
            params.append(status.value)
        sql += " ORDER BY created_at DESC, rowid DESC"
        rows = await self._fetch_all(sql, tuple(params))
        return [self._row_to_order(row) for row in rows]
