"""
Dependency injection container for FastAPI.

Provides scoped use case instances to route handlers. Collaborators are
separate dependencies so tests can swap them through
``app.dependency_overrides``.
"""

from collections.abc import Callable
from typing import TypeVar

from fastapi import Depends, Header

from procurement.application.use_cases import (
    AddToLotUseCase,
    ApproveMaterialRequestUseCase,
    AuditLedgerUseCase,
    CancelOrderUseCase,
    CompleteReturnRequestUseCase,
    CreateLotUseCase,
    CreateMaterialUseCase,
    CreatePurchaseRequestUseCase,
    CreateSupplierUseCase,
    DecidePurchaseRequestUseCase,
    DeleteLotUseCase,
    DeletePurchaseRequestUseCase,
    GenerateQuoteRequestUseCase,
    IssueOrderUseCase,
    ManualStockEntryUseCase,
    ProcurementQueries,
    ReceivePurchaseRequestUseCase,
    RejectMaterialRequestUseCase,
    RejectReturnRequestUseCase,
    RemoveFromLotUseCase,
    SubmitMaterialRequestUseCase,
    SubmitReturnRequestUseCase,
    UseCase,
)
from procurement.core.entities import Scope
from procurement.core.exceptions import ValidationError
from procurement.core.interfaces import (
    IAuthorizationChecker,
    IIdentityLookup,
    INotificationSink,
    IUnitOfWork,
)
from procurement.infrastructure.auth import get_policy
from procurement.infrastructure.notifications import LogNotificationSink
from procurement.infrastructure.storage.sqlite import ConnectionPool, get_pool
from procurement.infrastructure.storage.sqlite import get_unit_of_work as get_sqlite_unit_of_work

U = TypeVar("U", bound=UseCase)


async def get_scope(
    x_tenant_id: str | None = Header(default=None),
    x_actor_id: str | None = Header(default=None),
) -> Scope:
    """Build the caller scope from the X-Tenant-ID and X-Actor-ID headers."""
    if not x_tenant_id or not x_tenant_id.strip():
        raise ValidationError("X-Tenant-ID", "header is required")
    if not x_actor_id or not x_actor_id.strip():
        raise ValidationError("X-Actor-ID", "header is required")
    return Scope(tenant_id=x_tenant_id.strip(), actor_id=x_actor_id.strip())


# Collaborators
def get_unit_of_work() -> IUnitOfWork:
    """Get the SQLite unit of work."""
    return get_sqlite_unit_of_work()


def get_authorizer() -> IAuthorizationChecker:
    """Get the capability checker."""
    return get_policy()


def get_identity() -> IIdentityLookup:
    """Get the display-name lookup."""
    return get_policy()


def get_notifier() -> INotificationSink:
    """Get the notification sink."""
    return LogNotificationSink()


async def get_connection_pool() -> ConnectionPool:
    """Get the global connection pool."""
    return await get_pool()


def use_case_factory(use_case_cls: type[U]) -> Callable[..., U]:
    """Build a dependency that constructs `use_case_cls` for the caller."""

    def factory(
        scope: Scope = Depends(get_scope),
        unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
        authorizer: IAuthorizationChecker = Depends(get_authorizer),
        identity: IIdentityLookup = Depends(get_identity),
        notifier: INotificationSink = Depends(get_notifier),
    ) -> U:
        return use_case_cls(
            scope,
            unit_of_work=unit_of_work,
            authorizer=authorizer,
            identity=identity,
            notifier=notifier,
        )

    factory.__name__ = f"get_{use_case_cls.__name__}"
    return factory


# Purchase requests
get_create_purchase_request_use_case = use_case_factory(CreatePurchaseRequestUseCase)
get_decide_purchase_request_use_case = use_case_factory(DecidePurchaseRequestUseCase)
get_delete_purchase_request_use_case = use_case_factory(DeletePurchaseRequestUseCase)
get_receive_purchase_request_use_case = use_case_factory(ReceivePurchaseRequestUseCase)

# Lots
get_create_lot_use_case = use_case_factory(CreateLotUseCase)
get_add_to_lot_use_case = use_case_factory(AddToLotUseCase)
get_remove_from_lot_use_case = use_case_factory(RemoveFromLotUseCase)
get_delete_lot_use_case = use_case_factory(DeleteLotUseCase)

# Orders
get_generate_quote_request_use_case = use_case_factory(GenerateQuoteRequestUseCase)
get_issue_order_use_case = use_case_factory(IssueOrderUseCase)
get_cancel_order_use_case = use_case_factory(CancelOrderUseCase)

# Materials and stock
get_create_material_use_case = use_case_factory(CreateMaterialUseCase)
get_manual_stock_entry_use_case = use_case_factory(ManualStockEntryUseCase)
get_audit_ledger_use_case = use_case_factory(AuditLedgerUseCase)

# Warehouse
get_submit_material_request_use_case = use_case_factory(SubmitMaterialRequestUseCase)
get_approve_material_request_use_case = use_case_factory(ApproveMaterialRequestUseCase)
get_reject_material_request_use_case = use_case_factory(RejectMaterialRequestUseCase)
get_submit_return_request_use_case = use_case_factory(SubmitReturnRequestUseCase)
get_complete_return_request_use_case = use_case_factory(CompleteReturnRequestUseCase)
get_reject_return_request_use_case = use_case_factory(RejectReturnRequestUseCase)

# Reference data
get_create_supplier_use_case = use_case_factory(CreateSupplierUseCase)

# Reads
get_queries = use_case_factory(ProcurementQueries)
