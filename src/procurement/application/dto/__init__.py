"""Data transfer objects between the API and use cases."""

from procurement.application.dto.requests import (
    AddToLotRequest,
    CreateLotRequest,
    CreateMaterialRequest,
    CreatePurchaseRequestRequest,
    CreateSupplierRequest,
    DecidePurchaseRequestRequest,
    GenerateQuoteRequestRequest,
    IssueOrderRequest,
    ManualStockEntryRequest,
    MaterialRequestItemRequest,
    PricedItemRequest,
    ReceivePurchaseRequestRequest,
    RejectRequest,
    SubmitMaterialRequestRequest,
    SubmitReturnRequestRequest,
)
from procurement.application.dto.responses import (
    CancelOrderResponse,
    ComponentHealthResponse,
    DeletedResponse,
    DeleteLotResponse,
    ErrorResponse,
    HealthResponse,
    LedgerAuditResponse,
    LotListResponse,
    LotResponse,
    MaterialListResponse,
    MaterialRequestDecisionResponse,
    MaterialRequestResponse,
    MaterialResponse,
    MovementListResponse,
    OrderListResponse,
    PurchaseOrderResponse,
    PurchaseRequestListResponse,
    PurchaseRequestResponse,
    ReceiveResponse,
    ReturnRequestDecisionResponse,
    ReturnRequestResponse,
    StockChangeResponse,
    StockMovementResponse,
    SupplierListResponse,
    SupplierResponse,
    UnitResponse,
)

__all__ = [
    # Requests
    "CreatePurchaseRequestRequest",
    "DecidePurchaseRequestRequest",
    "ReceivePurchaseRequestRequest",
    "CreateLotRequest",
    "AddToLotRequest",
    "GenerateQuoteRequestRequest",
    "PricedItemRequest",
    "IssueOrderRequest",
    "CreateMaterialRequest",
    "ManualStockEntryRequest",
    "MaterialRequestItemRequest",
    "SubmitMaterialRequestRequest",
    "SubmitReturnRequestRequest",
    "RejectRequest",
    "CreateSupplierRequest",
    # Responses
    "PurchaseRequestResponse",
    "PurchaseRequestListResponse",
    "DeletedResponse",
    "ReceiveResponse",
    "MaterialResponse",
    "MaterialListResponse",
    "StockMovementResponse",
    "MovementListResponse",
    "LedgerAuditResponse",
    "StockChangeResponse",
    "LotResponse",
    "LotListResponse",
    "DeleteLotResponse",
    "PurchaseOrderResponse",
    "OrderListResponse",
    "CancelOrderResponse",
    "MaterialRequestResponse",
    "MaterialRequestDecisionResponse",
    "ReturnRequestResponse",
    "ReturnRequestDecisionResponse",
    "SupplierResponse",
    "SupplierListResponse",
    "UnitResponse",
    "ComponentHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
