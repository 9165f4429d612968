"""
SQLite unit of work.

Binds every repository to one pooled connection and one tenant. Write
sessions run inside BEGIN IMMEDIATE; read sessions use a plain pooled
connection.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from procurement.core.interfaces import ITransaction, IUnitOfWork
from procurement.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from procurement.infrastructure.storage.sqlite.ledger_store import SQLiteStockLedgerRepository
from procurement.infrastructure.storage.sqlite.material_store import (
    SQLiteMaterialRepository,
    SQLiteSupplierRepository,
    SQLiteUnitRepository,
)
from procurement.infrastructure.storage.sqlite.purchase_store import (
    SQLitePurchaseLotRepository,
    SQLitePurchaseOrderRepository,
    SQLitePurchaseRequestRepository,
)
from procurement.infrastructure.storage.sqlite.warehouse_store import (
    SQLiteMaterialRequestRepository,
    SQLiteReturnRequestRepository,
)


class SQLiteTransaction(ITransaction):
    """All repositories over a single connection."""

    def __init__(self, conn: aiosqlite.Connection, tenant_id: str):
        self.conn = conn
        self.tenant_id = tenant_id
        self.materials = SQLiteMaterialRepository(conn, tenant_id)
        self.units = SQLiteUnitRepository(conn, tenant_id)
        self.suppliers = SQLiteSupplierRepository(conn, tenant_id)
        self.purchase_requests = SQLitePurchaseRequestRepository(conn, tenant_id)
        self.lots = SQLitePurchaseLotRepository(conn, tenant_id)
        self.orders = SQLitePurchaseOrderRepository(conn, tenant_id)
        self.ledger = SQLiteStockLedgerRepository(conn, tenant_id)
        self.material_requests = SQLiteMaterialRequestRepository(conn, tenant_id)
        self.return_requests = SQLiteReturnRequestRepository(conn, tenant_id)


class SQLiteUnitOfWork(IUnitOfWork):
    """Unit of work over a connection pool (the global one by default)."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = await get_pool()
        return self._pool

    @asynccontextmanager
    async def transaction(self, tenant_id: str) -> AsyncIterator[SQLiteTransaction]:
        pool = await self._get_pool()
        async with pool.transaction() as conn:
            yield SQLiteTransaction(conn, tenant_id)

    @asynccontextmanager
    async def reader(self, tenant_id: str) -> AsyncIterator[SQLiteTransaction]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            yield SQLiteTransaction(conn, tenant_id)
