"""Unit tests for domain exceptions."""

from procurement.core.exceptions import (
    ConcurrencyError,
    ConfigurationError,
    InsufficientStockError,
    InvalidStateError,
    LotNotFoundError,
    MaterialNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionError,
    ProcurementError,
    StorageError,
    TransactionConflictError,
    ValidationError,
)


class TestProcurementError:
    """Tests for base ProcurementError exception."""

    def test_basic_initialization(self):
        error = ProcurementError("Something broke")

        assert str(error) == "Something broke"
        assert error.message == "Something broke"
        assert error.code == "ProcurementError"
        assert error.details == {}

    def test_to_dict(self):
        error = ProcurementError("Failed", code="X", details={"a": 1})

        assert error.to_dict() == {"error": "X", "message": "Failed", "details": {"a": 1}}


class TestDomainErrors:
    def test_validation_error_truncates_value(self):
        error = ValidationError("name", "too long", "x" * 500)

        assert error.code == "VALIDATION_ERROR"
        assert error.details["field"] == "name"
        assert len(error.details["value"]) == 100

    def test_not_found_subclasses_carry_entity_codes(self):
        material = MaterialNotFoundError("m-1")
        lot = LotNotFoundError("L1")

        assert isinstance(material, NotFoundError)
        assert material.code == "MATERIAL_NOT_FOUND"
        assert material.details == {"entity": "Material", "entity_id": "m-1"}
        assert lot.code == "LOT_NOT_FOUND"

    def test_invalid_state_names_the_transition(self):
        error = InvalidStateError("purchase request", "pr-1", "received", "delete")

        assert error.code == "INVALID_STATE"
        assert "Cannot delete purchase request pr-1" in error.message
        assert error.details["status"] == "received"
        assert error.details["action"] == "delete"

    def test_insufficient_stock_details(self):
        error = InsufficientStockError("m-1", requested=50, available=30, material_name="Cement")

        assert error.code == "INSUFFICIENT_STOCK"
        assert "Cement" in error.message
        assert error.details["requested"] == 50
        assert error.details["available"] == 30

    def test_permission_and_precondition_codes(self):
        assert PermissionDeniedError("bob", "lots:create").code == "PERMISSION_DENIED"
        assert PreconditionError("no supplier").code == "PRECONDITION_FAILED"
        assert ConfigurationError("bad policy").code == "CONFIGURATION_ERROR"

    def test_concurrency_error(self):
        error = ConcurrencyError("approve_material_request", 5)

        assert error.code == "CONCURRENCY_CONFLICT"
        assert error.details == {"operation": "approve_material_request", "attempts": 5}

    def test_transaction_conflict_is_storage_error(self):
        error = TransactionConflictError("version mismatch", entity_id="m-1")

        assert isinstance(error, StorageError)
        assert isinstance(error, ProcurementError)
        assert error.code == "TRANSACTION_CONFLICT"
