"""
Purchasing domain entities.

Purchase requests move through a small state machine; lots stage approved
requests for one supplier; orders are either non-binding quote requests or
binding issued purchase orders.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from procurement.core.entities.material import new_id
from procurement.core.exceptions import InvalidStateError


class PurchaseRequestStatus(str, Enum):
    """Lifecycle states of a purchase request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    BATCHED = "batched"
    ORDERED = "ordered"
    RECEIVED = "received"


# States in which a request may carry a lot_id
LOT_BOUND_STATUSES = frozenset({PurchaseRequestStatus.BATCHED, PurchaseRequestStatus.ORDERED})


class PurchaseRequest(BaseModel):
    """A single requested line item: material, quantity, justification."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    material_name: str
    quantity: float
    original_quantity: float | None = None
    unit: str
    category: str
    justification: str
    area: str
    requester_id: str
    requester_name: str = ""
    status: PurchaseRequestStatus = PurchaseRequestStatus.PENDING
    lot_id: str | None = None
    purchase_order_id: str | None = None
    derived_from_request_id: str | None = None
    notes: str | None = None
    approver_id: str | None = None
    approver_name: str | None = None
    approved_at: datetime | None = None
    received_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def require_status(self, *allowed: PurchaseRequestStatus, action: str) -> None:
        """Raise InvalidStateError unless the request is in one of `allowed`."""
        if self.status not in allowed:
            raise InvalidStateError(
                "purchase request", self.id, self.status.value, action
            )

    def set_quantity(self, quantity: float) -> None:
        """Change quantity, recording the first deviation in original_quantity."""
        if quantity != self.quantity and self.original_quantity is None:
            self.original_quantity = self.quantity
        self.quantity = quantity

    def move_to(
        self,
        status: PurchaseRequestStatus,
        lot_id: str | None = None,
        purchase_order_id: str | None = None,
    ) -> None:
        """Set status together with the lot/order back-references it allows."""
        if status in LOT_BOUND_STATUSES:
            self.lot_id = lot_id
        else:
            self.lot_id = None
        if status == PurchaseRequestStatus.ORDERED or status == PurchaseRequestStatus.RECEIVED:
            self.purchase_order_id = purchase_order_id
        else:
            self.purchase_order_id = None
        self.status = status


class LotStatus(str, Enum):
    """Lifecycle states of a purchase lot."""

    OPEN = "open"
    ORDERED = "ordered"


class PurchaseLot(BaseModel):
    """A staging batch of approved requests destined for one supplier."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    name: str
    status: LotStatus = LotStatus.OPEN
    supplier_id: str | None = None
    created_by: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class OrderStatus(str, Enum):
    """Purchase order states."""

    GENERATED = "generated"  # quote request, not binding
    ISSUED = "issued"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    """Denormalized order line, aggregated by material name."""

    material_name: str
    unit: str = ""
    category: str = ""
    quantity: float
    unit_price: float = 0.0

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


class PurchaseOrder(BaseModel):
    """A quote request or binding purchase order against a lot."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    lot_id: str
    supplier_id: str
    items: list[OrderItem] = Field(default_factory=list)
    total_amount: float = 0.0
    status: OrderStatus = OrderStatus.GENERATED
    official_order_number: str | None = None
    request_ids: list[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
