"""Create Supplier Use Case."""

from procurement.application.dto.requests import CreateSupplierRequest
from procurement.application.dto.responses import SupplierResponse
from procurement.application.use_cases.base import UseCase, require_text
from procurement.core.entities import Supplier
from procurement.core.exceptions import ValidationError
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel


class CreateSupplierUseCase(UseCase):
    """Register a supplier that lots can be quoted and ordered from."""

    operation = "create_supplier"

    async def execute(self, request: CreateSupplierRequest) -> Supplier:
        await self._authorize(Capability.SUPPLIERS_CREATE)

        name = require_text("name", request.name)
        email = request.email.strip() if request.email else None
        if email and "@" not in email:
            raise ValidationError("email", "must be an e-mail address", email)
        categories = [c.strip() for c in request.categories if c and c.strip()]

        async def work(tx: ITransaction) -> Supplier:
            return await tx.suppliers.add(
                Supplier(
                    tenant_id=self.scope.tenant_id,
                    name=name,
                    categories=categories,
                    tax_id=request.tax_id,
                    email=email,
                )
            )

        supplier = await self._run_transaction(work)
        await self._notify(NotificationLevel.SUCCESS, f"Supplier {name} created")
        return supplier

    def to_response(self, result: Supplier) -> SupplierResponse:
        return SupplierResponse.model_validate(result)
