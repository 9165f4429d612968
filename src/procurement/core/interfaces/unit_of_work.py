"""
Abstract unit of work.

A transaction groups every repository over one connection so that a
material's stock, its ledger entry and the affected requests commit or roll
back together.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from procurement.core.interfaces.repositories import (
    IMaterialRepository,
    IMaterialRequestRepository,
    IPurchaseLotRepository,
    IPurchaseOrderRepository,
    IPurchaseRequestRepository,
    IReturnRequestRepository,
    IStockLedgerRepository,
    ISupplierRepository,
    IUnitRepository,
)


class ITransaction(ABC):
    """Repositories sharing one connection and one tenant."""

    tenant_id: str
    materials: IMaterialRepository
    units: IUnitRepository
    suppliers: ISupplierRepository
    purchase_requests: IPurchaseRequestRepository
    lots: IPurchaseLotRepository
    orders: IPurchaseOrderRepository
    ledger: IStockLedgerRepository
    material_requests: IMaterialRequestRepository
    return_requests: IReturnRequestRepository


class IUnitOfWork(ABC):
    """Factory for transactional and read-only repository sessions."""

    @abstractmethod
    def transaction(self, tenant_id: str) -> AbstractAsyncContextManager[ITransaction]:
        """
        Open a serializable write transaction.

        Commits when the block exits normally, rolls back on any exception.
        """

    @abstractmethod
    def reader(self, tenant_id: str) -> AbstractAsyncContextManager[ITransaction]:
        """Open a read-only session (no transaction held)."""
