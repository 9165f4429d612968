"""Stock ledger entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from procurement.core.entities.material import new_id

QUANTITY_DECIMALS = 6


def quantize_quantity(value: float) -> float:
    """Round a quantity to the fixed scale used for all stock arithmetic."""
    # Adding 0.0 turns -0.0 into 0.0
    return round(value, QUANTITY_DECIMALS) + 0.0


class MovementType(str, Enum):
    """Why a material's stock changed."""

    INITIAL = "initial"
    MANUAL_ENTRY = "manual-entry"
    REQUEST_DELIVERY = "request-delivery"
    RETURN_REENTRY = "return-reentry"
    RECEIVING = "receiving"


class StockMovement(BaseModel):
    """
    One immutable ledger entry.

    `quantity_change` is signed; `resulting_stock` is the material's stock
    right after the change was applied.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    tenant_id: str
    material_id: str
    material_name: str
    quantity_change: float
    resulting_stock: float = Field(ge=0)
    type: MovementType
    justification: str = ""
    actor_id: str
    actor_name: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    related_request_id: str | None = None


class LedgerAudit(BaseModel):
    """Outcome of replaying a material's ledger against its stock."""

    material_id: str
    stock: float
    ledger_total: float
    movement_count: int
    last_resulting_stock: float | None = None

    @property
    def balanced(self) -> bool:
        stock = quantize_quantity(self.stock)
        return stock == quantize_quantity(self.ledger_total) and (
            self.last_resulting_stock is None
            or stock == quantize_quantity(self.last_resulting_stock)
        )
