"""Core interfaces (ports) for dependency injection."""

from procurement.core.interfaces.collaborators import (
    Capability,
    IAuthorizationChecker,
    IIdentityLookup,
    INotificationSink,
    NotificationLevel,
)
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
from procurement.core.interfaces.unit_of_work import ITransaction, IUnitOfWork

__all__ = [
    # Collaborators
    "Capability",
    "IAuthorizationChecker",
    "IIdentityLookup",
    "INotificationSink",
    "NotificationLevel",
    # Repositories
    "IMaterialRepository",
    "IUnitRepository",
    "ISupplierRepository",
    "IPurchaseRequestRepository",
    "IPurchaseLotRepository",
    "IPurchaseOrderRepository",
    "IStockLedgerRepository",
    "IMaterialRequestRepository",
    "IReturnRequestRepository",
    # Unit of work
    "ITransaction",
    "IUnitOfWork",
]
