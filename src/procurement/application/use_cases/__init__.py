"""Application use cases."""

from procurement.application.use_cases.base import UseCase
from procurement.application.use_cases.lots import (
    AddToLotResult,
    AddToLotUseCase,
    CreateLotUseCase,
    DeleteLotResult,
    DeleteLotUseCase,
    RemoveFromLotUseCase,
)
from procurement.application.use_cases.purchase_orders import (
    CancelOrderResult,
    CancelOrderUseCase,
    GenerateQuoteRequestUseCase,
    IssueOrderUseCase,
)
from procurement.application.use_cases.purchase_requests import (
    CreatePurchaseRequestUseCase,
    DecidePurchaseRequestUseCase,
    DeletePurchaseRequestUseCase,
)
from procurement.application.use_cases.queries import ProcurementQueries
from procurement.application.use_cases.receive_purchase import (
    ReceivePurchaseRequestUseCase,
    ReceiveResult,
)
from procurement.application.use_cases.stock_movements import (
    AuditLedgerUseCase,
    CreateMaterialUseCase,
    ManualStockEntryUseCase,
    StockChangeResult,
)
from procurement.application.use_cases.suppliers import CreateSupplierUseCase
from procurement.application.use_cases.warehouse_requests import (
    ApproveMaterialRequestUseCase,
    CompleteReturnRequestUseCase,
    MaterialRequestDecision,
    RejectMaterialRequestUseCase,
    RejectReturnRequestUseCase,
    ReturnRequestDecision,
    SubmitMaterialRequestUseCase,
    SubmitReturnRequestUseCase,
)

__all__ = [
    "UseCase",
    # Purchase requests
    "CreatePurchaseRequestUseCase",
    "DecidePurchaseRequestUseCase",
    "DeletePurchaseRequestUseCase",
    # Lots
    "CreateLotUseCase",
    "AddToLotUseCase",
    "AddToLotResult",
    "RemoveFromLotUseCase",
    "DeleteLotUseCase",
    "DeleteLotResult",
    # Orders
    "GenerateQuoteRequestUseCase",
    "IssueOrderUseCase",
    "CancelOrderUseCase",
    "CancelOrderResult",
    # Receiving
    "ReceivePurchaseRequestUseCase",
    "ReceiveResult",
    # Stock
    "CreateMaterialUseCase",
    "ManualStockEntryUseCase",
    "AuditLedgerUseCase",
    "StockChangeResult",
    # Warehouse
    "SubmitMaterialRequestUseCase",
    "ApproveMaterialRequestUseCase",
    "RejectMaterialRequestUseCase",
    "MaterialRequestDecision",
    "SubmitReturnRequestUseCase",
    "CompleteReturnRequestUseCase",
    "RejectReturnRequestUseCase",
    "ReturnRequestDecision",
    # Reference data
    "CreateSupplierUseCase",
    # Reads
    "ProcurementQueries",
]
