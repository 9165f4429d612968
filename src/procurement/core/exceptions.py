"""
Domain exceptions for the procurement engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ProcurementError(Exception):
    """Base exception for all procurement errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(ProcurementError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Lookup Exceptions
class NotFoundError(ProcurementError):
    """Referenced entity does not exist in the caller's tenant."""

    def __init__(self, entity: str, entity_id: str, code: str | None = None):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "entity_id": entity_id},
        )


class PurchaseRequestNotFoundError(NotFoundError):
    """Purchase request not found."""

    def __init__(self, request_id: str):
        super().__init__("Purchase request", request_id, code="PURCHASE_REQUEST_NOT_FOUND")


class MaterialNotFoundError(NotFoundError):
    """Material not found."""

    def __init__(self, material_id: str):
        super().__init__("Material", material_id, code="MATERIAL_NOT_FOUND")


class LotNotFoundError(NotFoundError):
    """Purchase lot not found."""

    def __init__(self, lot_id: str):
        super().__init__("Lot", lot_id, code="LOT_NOT_FOUND")


class OrderNotFoundError(NotFoundError):
    """Purchase order not found."""

    def __init__(self, order_id: str):
        super().__init__("Purchase order", order_id, code="ORDER_NOT_FOUND")


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""

    def __init__(self, supplier_id: str):
        super().__init__("Supplier", supplier_id, code="SUPPLIER_NOT_FOUND")


class MaterialRequestNotFoundError(NotFoundError):
    """Warehouse material request not found."""

    def __init__(self, request_id: str):
        super().__init__("Material request", request_id, code="MATERIAL_REQUEST_NOT_FOUND")


class ReturnRequestNotFoundError(NotFoundError):
    """Return request not found."""

    def __init__(self, request_id: str):
        super().__init__("Return request", request_id, code="RETURN_REQUEST_NOT_FOUND")


# State Exceptions
class InvalidStateError(ProcurementError):
    """Operation is not legal in the entity's current status."""

    def __init__(self, entity: str, entity_id: str, status: str, action: str):
        super().__init__(
            f"Cannot {action} {entity} {entity_id} in status '{status}'",
            code="INVALID_STATE",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "status": status,
                "action": action,
            },
        )


class PreconditionError(ProcurementError):
    """A required relationship is missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="PRECONDITION_FAILED", details=details)


class InsufficientStockError(ProcurementError):
    """Stock-sufficiency check failed."""

    def __init__(
        self,
        material_id: str,
        requested: float,
        available: float,
        material_name: str | None = None,
    ):
        label = material_name or material_id
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "material_name": material_name,
                "requested": requested,
                "available": available,
            },
        )


class PermissionDeniedError(ProcurementError):
    """Actor lacks the capability required by the operation."""

    def __init__(self, actor_id: str, capability: str):
        super().__init__(
            f"Actor '{actor_id}' lacks capability '{capability}'",
            code="PERMISSION_DENIED",
            details={"actor_id": actor_id, "capability": capability},
        )


class ConcurrencyError(ProcurementError):
    """Transaction kept conflicting past the retry budget."""

    def __init__(self, operation: str, attempts: int):
        super().__init__(
            f"{operation} aborted after {attempts} conflicting attempts",
            code="CONCURRENCY_CONFLICT",
            details={"operation": operation, "attempts": attempts},
        )


# Storage Exceptions
class StorageError(ProcurementError):
    """Base exception for storage operations."""

    pass


class TransactionConflictError(StorageError):
    """Write lock or optimistic version check lost to a concurrent writer."""

    def __init__(self, reason: str, entity_id: str | None = None):
        super().__init__(
            f"Transaction conflict: {reason}",
            code="TRANSACTION_CONFLICT",
            details={"reason": reason, "entity_id": entity_id},
        )


class ConfigurationError(ProcurementError):
    """Configuration error."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
