"""SQLite implementation of warehouse material and return requests."""

import aiosqlite

from procurement.config import get_logger
from procurement.core.entities import (
    MaterialRequest,
    MaterialRequestItem,
    MaterialRequestStatus,
    ReturnRequest,
    ReturnRequestStatus,
)
from procurement.core.interfaces import IMaterialRequestRepository, IReturnRequestRepository
from procurement.infrastructure.storage.sqlite.base import (
    SQLiteRepository,
    dump_json,
    from_iso,
    from_iso_or_now,
    load_json,
    to_iso,
)

logger = get_logger(__name__)


class SQLiteMaterialRequestRepository(SQLiteRepository, IMaterialRequestRepository):
    """SQLite implementation of material request storage."""

    async def add(self, request: MaterialRequest) -> MaterialRequest:
        request.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO material_requests (
                id, tenant_id, items, area, requester_id, requester_name,
                status, notes, approver_id, approver_name, decided_at, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                request.id,
                self.tenant_id,
                dump_json([item.model_dump() for item in request.items]),
                request.area,
                request.requester_id,
                request.requester_name,
                request.status.value,
                request.notes,
                request.approver_id,
                request.approver_name,
                to_iso(request.decided_at),
                to_iso(request.created_at),
            ),
        )
        logger.info("material_request_stored", request_id=request.id, items=len(request.items))
        return request

    async def get(self, request_id: str) -> MaterialRequest | None:
        row = await self._fetch_one(
            "SELECT * FROM material_requests WHERE id = ? AND tenant_id = ?",
            (request_id, self.tenant_id),
        )
        return self._row_to_request(row) if row else None

    async def save(self, request: MaterialRequest) -> MaterialRequest:
        await self.conn.execute(
            """
            UPDATE material_requests SET
                status = ?, notes = ?, approver_id = ?, approver_name = ?, decided_at = ?
            WHERE id = ? AND tenant_id = ?
            """,
            (
                request.status.value,
                request.notes,
                request.approver_id,
                request.approver_name,
                to_iso(request.decided_at),
                request.id,
                self.tenant_id,
            ),
        )
        return request

    @staticmethod
    def _row_to_request(row: aiosqlite.Row) -> MaterialRequest:
        return MaterialRequest(
            id=row["id"],
            tenant_id=row["tenant_id"],
            items=[MaterialRequestItem(**item) for item in load_json(row["items"], [])],
            area=row["area"],
            requester_id=row["requester_id"],
            requester_name=row["requester_name"],
            status=MaterialRequestStatus(row["status"]),
            notes=row["notes"],
            approver_id=row["approver_id"],
            approver_name=row["approver_name"],
            decided_at=from_iso(row["decided_at"]),
            created_at=from_iso_or_now(row["created_at"]),
        )

    async def list(
        self, status: MaterialRequestStatus | None = None, limit: int = 100
    ) -> list[MaterialRequest]:
        if status:
            rows = await self._fetch_all(
                """
                SELECT * FROM material_requests WHERE tenant_id = ? AND status = ?
                ORDER BY created_at DESC, rowid DESC LIMIT ?
                """,
                (self.tenant_id, status.value, limit),
            )
        else:
            rows = await self._fetch_all(
                """
                SELECT * FROM material_requests WHERE tenant_id = ?
                ORDER BY created_at DESC, rowid DESC LIMIT ?
                """,
                (self.tenant_id, limit),
            )
        return [self._row_to_request(row) for row in rows]


class SQLiteReturnRequestRepository(SQLiteRepository, IReturnRequestRepository):
    """SQLite implementation of return request storage."""

    async def add(self, request: ReturnRequest) -> ReturnRequest:
        request.tenant_id = self.tenant_id
        await self.conn.execute(
            """
            INSERT INTO return_requests (
                id, tenant_id, material_id, material_name, quantity, unit,
                requester_id, requester_name, status, notes,
                handler_id, handler_name, completed_at, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                request.id,
                self.tenant_id,
                request.material_id,
                request.material_name,
                request.quantity,
                request.unit,
                request.requester_id,
                request.requester_name,
                request.status.value,
                request.notes,
                request.handler_id,
                request.handler_name,
                to_iso(request.completed_at),
                to_iso(request.created_at),
            ),
        )
        logger.info(
            "return_request_stored",
            request_id=request.id,
            material_id=request.material_id,
            quantity=request.quantity,
        )
        return request

    async def get(self, request_id: str) -> ReturnRequest | None:
        row = await self._fetch_one(
            "SELECT * FROM return_requests WHERE id = ? AND tenant_id = ?",
            (request_id, self.tenant_id),
        )
        return self._row_to_request(row) if row else None

    async def save(self, request: ReturnRequest) -> ReturnRequest:
        await self.conn.execute(
            """
            UPDATE return_requests SET
                status = ?, notes = ?, handler_id = ?, handler_name = ?, completed_at = ?
            WHERE id = ? AND tenant_id = ?
            """,
            (
                request.status.value,
                request.notes,
                request.handler_id,
                request.handler_name,
                to_iso(request.completed_at),
                request.id,
                self.tenant_id,
            ),
        )
        return request

    @staticmethod
    def _row_to_request(row: aiosqlite.Row) -> ReturnRequest:
        return ReturnRequest(
            id=row["id"],
            tenant_id=row["tenant_id"],
            material_id=row["material_id"],
            material_name=row["material_name"],
            quantity=float(row["quantity"]),
            unit=row["unit"],
            requester_id=row["requester_id"],
            requester_name=row["requester_name"],
            status=ReturnRequestStatus(row["status"]),
            notes=row["notes"],
            handler_id=row["handler_id"],
            handler_name=row["handler_name"],
            completed_at=from_iso(row["completed_at"]),
            created_at=from_iso_or_now(row["created_at"]),
        )

    async def list(
        self, status: ReturnRequestStatus | None = None, limit: int = 100
    ) -> list[ReturnRequest]:
        if status:
            rows = await self._fetch_all(
                """
                SELECT * FROM return_requests WHERE tenant_id = ? AND status = ?
                ORDER BY created_at DESC, rowid DESC LIMIT ?
                """,
                (self.tenant_id, status.value, limit),
            )
        else:
            rows = await self._fetch_all(
                """
                SELECT * FROM return_requests WHERE tenant_id = ?
                ORDER BY created_at DESC, rowid DESC LIMIT ?
                """,
                (self.tenant_id, limit),
            )
        return [self._row_to_request(row) for row in rows]
