"""Core domain entities."""

from procurement.core.entities.inventory import (
    LedgerAudit,
    MovementType,
    StockMovement,
    quantize_quantity,
)
from procurement.core.entities.material import (
    Material,
    Supplier,
    Unit,
    new_id,
)
from procurement.core.entities.purchase import (
    LOT_BOUND_STATUSES,
    LotStatus,
    OrderItem,
    OrderStatus,
    PurchaseLot,
    PurchaseOrder,
    PurchaseRequest,
    PurchaseRequestStatus,
)
from procurement.core.entities.scope import Scope
from procurement.core.entities.warehouse import (
    MaterialRequest,
    MaterialRequestItem,
    MaterialRequestStatus,
    ReturnRequest,
    ReturnRequestStatus,
)

__all__ = [
    # Material entities
    "Material",
    "Unit",
    "Supplier",
    "new_id",
    # Ledger entities
    "StockMovement",
    "MovementType",
    "LedgerAudit",
    "quantize_quantity",
    # Purchasing entities
    "PurchaseRequest",
    "PurchaseRequestStatus",
    "LOT_BOUND_STATUSES",
    "PurchaseLot",
    "LotStatus",
    "PurchaseOrder",
    "OrderItem",
    "OrderStatus",
    # Warehouse entities
    "MaterialRequest",
    "MaterialRequestItem",
    "MaterialRequestStatus",
    "ReturnRequest",
    "ReturnRequestStatus",
    # Scope
    "Scope",
]
