"""Response DTOs for API endpoints.

Pydantic v2 models for API responses. Entity-shaped responses read
straight from domain entities via from_attributes.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from procurement.core.entities import (
    LotStatus,
    MaterialRequestStatus,
    MovementType,
    OrderStatus,
    PurchaseRequestStatus,
    ReturnRequestStatus,
)


class EntityResponse(BaseModel):
    """Base for responses built from domain entities."""

    model_config = ConfigDict(from_attributes=True)


# --- Purchase requests ---


class PurchaseRequestResponse(EntityResponse):
    """Purchase request in response."""

    id: str
    material_name: str
    quantity: float
    original_quantity: float | None = None
    unit: str
    category: str
    justification: str
    area: str
    requester_id: str
    requester_name: str = ""
    status: PurchaseRequestStatus
    lot_id: str | None = None
    purchase_order_id: str | None = None
    derived_from_request_id: str | None = None
    notes: str | None = None
    approver_id: str | None = None
    approver_name: str | None = None
    approved_at: datetime | None = None
    received_at: datetime | None = None
    created_at: datetime


class PurchaseRequestListResponse(BaseModel):
    """List of purchase requests."""

    requests: list[PurchaseRequestResponse]
    total: int


class DeletedResponse(BaseModel):
    """Acknowledges a hard delete."""

    id: str
    deleted: bool = True


# --- Materials and ledger ---


class MaterialResponse(EntityResponse):
    """Material with quantity on hand."""

    id: str
    name: str
    unit: str = ""
    category: str = ""
    stock: float
    preferred_supplier_id: str | None = None
    archived: bool = False
    version: int
    created_at: datetime
    updated_at: datetime


class MaterialListResponse(BaseModel):
    """List of materials."""

    materials: list[MaterialResponse]
    total: int


class StockMovementResponse(EntityResponse):
    """Ledger entry."""

    id: str
    material_id: str
    material_name: str
    quantity_change: float
    resulting_stock: float
    type: MovementType
    justification: str = ""
    actor_id: str
    actor_name: str = ""
    timestamp: datetime
    related_request_id: str | None = None


class MovementListResponse(BaseModel):
    """Ledger entries of one material, newest first."""

    material_id: str
    movements: list[StockMovementResponse]
    total: int


class LedgerAuditResponse(EntityResponse):
    """Stock versus ledger replay."""

    material_id: str
    stock: float
    ledger_total: float
    movement_count: int
    last_resulting_stock: float | None = None
    balanced: bool


class StockChangeResponse(BaseModel):
    """Material after a single stock change, with the entry that recorded it."""

    material: MaterialResponse
    movement: StockMovementResponse | None = None


class ReceiveResponse(BaseModel):
    """Outcome of a goods receipt."""

    received_request: PurchaseRequestResponse
    remainder_request: PurchaseRequestResponse | None = Field(
        default=None,
        description="Original request carrying the undelivered quantity on partial receipt",
    )
    material: MaterialResponse
    movement: StockMovementResponse
    material_created: bool = False


# --- Lots and orders ---


class LotResponse(EntityResponse):
    """Purchase lot with its member requests."""

    id: str
    name: str
    status: LotStatus
    supplier_id: str | None = None
    created_by: str
    created_at: datetime
    requests: list[PurchaseRequestResponse] = Field(default_factory=list)


class LotListResponse(BaseModel):
    """List of lots."""

    lots: list[LotResponse]
    total: int


class DeleteLotResponse(BaseModel):
    """Outcome of deleting a lot."""

    lot_id: str
    reverted_request_ids: list[str]
    deleted_order_ids: list[str]


class OrderItemResponse(EntityResponse):
    """Aggregated order line."""

    material_name: str
    unit: str = ""
    category: str = ""
    quantity: float
    unit_price: float
    line_total: float


class PurchaseOrderResponse(EntityResponse):
    """Quote request or binding purchase order."""

    id: str
    lot_id: str
    supplier_id: str
    items: list[OrderItemResponse]
    total_amount: float
    status: OrderStatus
    official_order_number: str | None = None
    request_ids: list[str]
    created_by: str
    created_at: datetime


class OrderListResponse(BaseModel):
    """List of orders."""

    orders: list[PurchaseOrderResponse]
    total: int


class CancelOrderResponse(BaseModel):
    """Outcome of cancelling an order."""

    order_id: str
    lot_id: str
    reverted_request_ids: list[str]


# --- Warehouse requests ---


class MaterialRequestItemResponse(EntityResponse):
    material_id: str
    quantity: float


class MaterialRequestResponse(EntityResponse):
    """Warehouse material request."""

    id: str
    items: list[MaterialRequestItemResponse]
    area: str
    requester_id: str
    requester_name: str = ""
    status: MaterialRequestStatus
    notes: str | None = None
    approver_id: str | None = None
    approver_name: str | None = None
    decided_at: datetime | None = None
    created_at: datetime


class MaterialRequestDecisionResponse(BaseModel):
    """Material request after a decision, with any deliveries posted."""

    request: MaterialRequestResponse
    movements: list[StockMovementResponse] = Field(default_factory=list)


class ReturnRequestResponse(EntityResponse):
    """Warehouse return request."""

    id: str
    material_id: str
    material_name: str
    quantity: float
    unit: str = ""
    requester_id: str
    requester_name: str = ""
    status: ReturnRequestStatus
    notes: str | None = None
    handler_id: str | None = None
    handler_name: str | None = None
    completed_at: datetime | None = None
    created_at: datetime


class ReturnRequestDecisionResponse(BaseModel):
    """Return request after a decision, with the re-entry posted on completion."""

    request: ReturnRequestResponse
    movement: StockMovementResponse | None = None


# --- Suppliers ---


class SupplierResponse(EntityResponse):
    """Supplier."""

    id: str
    name: str
    categories: list[str] = Field(default_factory=list)
    tax_id: str | None = None
    email: str | None = None
    created_at: datetime


class SupplierListResponse(BaseModel):
    """List of suppliers."""

    suppliers: list[SupplierResponse]
    total: int


class UnitResponse(EntityResponse):
    id: str
    name: str


# --- System ---


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PURCHASE_REQUEST_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
