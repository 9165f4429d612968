"""Tests for CreateSupplierUseCase."""

import pytest

from procurement.application.dto.requests import CreateSupplierRequest
from procurement.application.use_cases import CreateSupplierUseCase
from procurement.core.exceptions import PermissionDeniedError, ValidationError


class TestCreateSupplier:
    async def test_normalizes_fields(self, make_use_case):
        supplier = await make_use_case(CreateSupplierUseCase).execute(
            CreateSupplierRequest(
                name=" Holcim ",
                categories=["aggregates", " ", " cement "],
                email=" sales@holcim.example ",
            )
        )

        assert supplier.name == "Holcim"
        assert supplier.categories == ["aggregates", "cement"]
        assert supplier.email == "sales@holcim.example"

    async def test_invalid_email(self, make_use_case):
        with pytest.raises(ValidationError):
            await make_use_case(CreateSupplierUseCase).execute(
                CreateSupplierRequest(name="Holcim", email="not-an-email")
            )

    async def test_requires_capability(self, make_use_case):
        with pytest.raises(PermissionDeniedError):
            await make_use_case(CreateSupplierUseCase, actor_id="wanda").execute(
                CreateSupplierRequest(name="Holcim")
            )
