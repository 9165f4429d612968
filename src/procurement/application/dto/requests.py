"""Request DTOs for API endpoints.

Pydantic v2 models for API request shape. Business rules (positive
quantities, non-blank text, legal transitions) are enforced by the use
cases so that every caller gets the same domain errors.
"""

from pydantic import BaseModel, Field

# --- Purchase requests ---


class CreatePurchaseRequestRequest(BaseModel):
    """Request to submit a new purchase request."""

    material_name: str = Field(..., description="Material being requested", examples=["Cement"])
    quantity: float = Field(..., description="Requested quantity", examples=[100])
    unit: str = Field(..., description="Unit of measure", examples=["bag"])
    category: str = Field(..., description="Material category", examples=["aggregates"])
    justification: str = Field(..., description="Why the material is needed")
    area: str = Field(..., description="Site area or cost center", examples=["Tower B"])


class DecidePurchaseRequestRequest(BaseModel):
    """Approve or reject a pending purchase request, optionally editing it."""

    decision: str = Field(..., description="'approved' or 'rejected'", examples=["approved"])
    quantity: float | None = Field(default=None, description="Edited quantity")
    material_name: str | None = Field(default=None, description="Edited material name")
    unit: str | None = Field(default=None, description="Edited unit")
    category: str | None = Field(default=None, description="Edited category")
    justification: str | None = Field(default=None, description="Edited justification")
    notes: str | None = Field(default=None, description="Reviewer notes")


class ReceivePurchaseRequestRequest(BaseModel):
    """Goods receipt against one purchase request."""

    received_quantity: float = Field(..., description="Quantity physically received")
    target_material_id: str | None = Field(
        default=None,
        description="Material to credit; matched by name or created when omitted",
    )


# --- Lots ---


class CreateLotRequest(BaseModel):
    """Request to create an empty lot."""

    name: str = Field(..., description="Lot name", examples=["Week 14 aggregates"])


class AddToLotRequest(BaseModel):
    """Attach an approved request to a lot (created if missing)."""

    request_id: str = Field(..., description="Approved purchase request ID")
    lot_name: str | None = Field(
        default=None,
        description="Name used if the lot has to be created",
    )


# --- Orders ---


class GenerateQuoteRequestRequest(BaseModel):
    """Quote request for batched requests of one lot."""

    request_ids: list[str] = Field(..., description="Batched request IDs, all in one lot")
    supplier_id: str = Field(..., description="Supplier asked to quote")


class PricedItemRequest(BaseModel):
    """Supplier-confirmed line."""

    material_name: str = Field(..., description="Material name as aggregated in the lot")
    quantity: float = Field(..., description="Final quantity to order")
    unit_price: float = Field(..., description="Agreed unit price")


class IssueOrderRequest(BaseModel):
    """Issue a binding purchase order for a lot."""

    lot_id: str = Field(..., description="Lot to order")
    official_order_number: str = Field(..., description="Official order number", examples=["OC-001"])
    items: list[PricedItemRequest] = Field(..., description="One priced line per material")


# --- Materials and stock ---


class CreateMaterialRequest(BaseModel):
    """Register a stocked material."""

    name: str = Field(..., description="Material name")
    unit: str = Field(default="", description="Unit of measure")
    category: str = Field(default="", description="Category")
    initial_stock: float = Field(default=0.0, description="Opening quantity on hand")
    preferred_supplier_id: str | None = Field(default=None, description="Preferred supplier")


class ManualStockEntryRequest(BaseModel):
    """Signed manual correction of stock."""

    quantity_change: float = Field(..., description="Signed, non-zero quantity change")
    justification: str = Field(..., description="Reason for the correction")


# --- Warehouse requests ---


class MaterialRequestItemRequest(BaseModel):
    """One line of a material request."""

    material_id: str
    quantity: float


class SubmitMaterialRequestRequest(BaseModel):
    """Request to take stocked material out of the warehouse."""

    items: list[MaterialRequestItemRequest] = Field(..., description="Requested lines")
    area: str = Field(..., description="Destination area")
    notes: str | None = None


class SubmitReturnRequestRequest(BaseModel):
    """Request to bring excess material back into stock, one return per line."""

    items: list[MaterialRequestItemRequest] = Field(..., description="Returned lines")
    notes: str | None = None


class RejectRequest(BaseModel):
    """Rejection with an optional reason."""

    notes: str | None = Field(default=None, description="Reason for rejection")


# --- Suppliers ---


class CreateSupplierRequest(BaseModel):
    """Register a supplier."""

    name: str = Field(..., description="Supplier name")
    categories: list[str] = Field(default_factory=list, description="Categories supplied")
    tax_id: str | None = Field(default=None, description="Tax identifier")
    email: str | None = Field(default=None, description="Contact e-mail")
