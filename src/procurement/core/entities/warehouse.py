"""Internal warehouse movements: material requests and returns."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from procurement.core.entities.material import new_id


class MaterialRequestStatus(str, Enum):
    """States of a request to take material out of the warehouse."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MaterialRequestItem(BaseModel):
    """One line of a material request."""

    material_id: str
    quantity: float


class MaterialRequest(BaseModel):
    """A supervisor's request for stocked material; approval delivers it."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    items: list[MaterialRequestItem]
    area: str
    requester_id: str
    requester_name: str = ""
    status: MaterialRequestStatus = MaterialRequestStatus.PENDING
    notes: str | None = None
    approver_id: str | None = None
    approver_name: str | None = None
    decided_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ReturnRequestStatus(str, Enum):
    """States of a request to put excess material back into stock."""

    PENDING = "pending"
    COMPLETED = "completed"
    REJECTED = "rejected"


class ReturnRequest(BaseModel):
    """Excess material going back to the warehouse."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    material_id: str
    material_name: str
    quantity: float
    unit: str = ""
    requester_id: str
    requester_name: str = ""
    status: ReturnRequestStatus = ReturnRequestStatus.PENDING
    notes: str | None = None
    handler_id: str | None = None
    handler_name: str | None = None
    completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
