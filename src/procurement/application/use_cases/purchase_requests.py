"""Purchase request lifecycle: create, decide, delete."""

from datetime import UTC, datetime

from procurement.application.dto.requests import (
    CreatePurchaseRequestRequest,
    DecidePurchaseRequestRequest,
)
from procurement.application.dto.responses import DeletedResponse, PurchaseRequestResponse
from procurement.application.use_cases.base import UseCase, require_positive, require_text
from procurement.config import get_logger
from procurement.core.entities import PurchaseRequest, PurchaseRequestStatus
from procurement.core.exceptions import (
    InvalidStateError,
    PurchaseRequestNotFoundError,
    ValidationError,
)
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel

logger = get_logger(__name__)

DECISIONS = {PurchaseRequestStatus.APPROVED, PurchaseRequestStatus.REJECTED}


async def load_request(tx: ITransaction, request_id: str) -> PurchaseRequest:
    request = await tx.purchase_requests.get(request_id)
    if request is None:
        raise PurchaseRequestNotFoundError(request_id)
    return request


class CreatePurchaseRequestUseCase(UseCase):
    """Submit a new purchase request in `pending`."""

    operation = "create_purchase_request"

    async def execute(self, request: CreatePurchaseRequestRequest) -> PurchaseRequest:
        await self._authorize(Capability.PURCHASE_REQUESTS_CREATE)

        material_name = require_text("material_name", request.material_name)
        unit = require_text("unit", request.unit)
        category = require_text("category", request.category)
        justification = require_text("justification", request.justification)
        area = require_text("area", request.area)
        quantity = require_positive("quantity", request.quantity)
        requester_name = await self._actor_name()

        async def work(tx: ITransaction) -> PurchaseRequest:
            await tx.units.ensure(unit)
            return await tx.purchase_requests.add(
                PurchaseRequest(
                    tenant_id=self.scope.tenant_id,
                    material_name=material_name,
                    quantity=quantity,
                    unit=unit,
                    category=category,
                    justification=justification,
                    area=area,
                    requester_id=self.scope.actor_id,
                    requester_name=requester_name,
                )
            )

        created = await self._run_transaction(work)

        logger.info(
            "purchase_request_created",
            request_id=created.id,
            material=material_name,
            quantity=quantity,
        )
        await self._notify(
            NotificationLevel.SUCCESS,
            f"Purchase request for {quantity:g} {unit} of {material_name} submitted",
        )
        return created

    def to_response(self, result: PurchaseRequest) -> PurchaseRequestResponse:
        return PurchaseRequestResponse.model_validate(result)


class DecidePurchaseRequestUseCase(UseCase):
    """
    Approve or reject a pending request.

    Edits made while deciding are applied before the status change; the
    first quantity edit preserves the submitted quantity in
    original_quantity.
    """

    operation = "decide_purchase_request"

    async def execute(
        self, request_id: str, request: DecidePurchaseRequestRequest
    ) -> PurchaseRequest:
        await self._authorize(Capability.PURCHASE_REQUESTS_APPROVE)

        try:
            decision = PurchaseRequestStatus(request.decision)
        except ValueError:
            decision = None
        if decision not in DECISIONS:
            raise ValidationError("decision", "must be 'approved' or 'rejected'", request.decision)

        if request.quantity is not None:
            require_positive("quantity", request.quantity)
        text_edits = {
            name: require_text(name, value)
            for name, value in (
                ("material_name", request.material_name),
                ("unit", request.unit),
                ("category", request.category),
                ("justification", request.justification),
            )
            if value is not None
        }
        approver_name = await self._actor_name()

        async def work(tx: ITransaction) -> PurchaseRequest:
            pr = await load_request(tx, request_id)
            pr.require_status(PurchaseRequestStatus.PENDING, action="decide")

            if request.quantity is not None:
                pr.set_quantity(request.quantity)
            for name, value in text_edits.items():
                setattr(pr, name, value)
            if "unit" in text_edits:
                await tx.units.ensure(text_edits["unit"])
            if request.notes is not None:
                pr.notes = request.notes

            pr.status = decision
            pr.approver_id = self.scope.actor_id
            pr.approver_name = approver_name
            pr.approved_at = datetime.now(UTC)
            return await tx.purchase_requests.save(pr)

        decided = await self._run_transaction(work)

        logger.info(
            "purchase_request_decided",
            request_id=request_id,
            decision=decided.status.value,
            quantity=decided.quantity,
            original_quantity=decided.original_quantity,
        )
        await self._notify(
            NotificationLevel.SUCCESS,
            f"Purchase request for {decided.material_name} {decided.status.value}",
        )
        return decided

    def to_response(self, result: PurchaseRequest) -> PurchaseRequestResponse:
        return PurchaseRequestResponse.model_validate(result)


class DeletePurchaseRequestUseCase(UseCase):
    """Hard delete a request that has not been received."""

    operation = "delete_purchase_request"

    async def execute(self, request_id: str) -> str:
        await self._authorize(Capability.PURCHASE_REQUESTS_DELETE)

        async def work(tx: ITransaction) -> PurchaseRequest:
            pr = await load_request(tx, request_id)
            if pr.status == PurchaseRequestStatus.RECEIVED:
                raise InvalidStateError("purchase request", pr.id, pr.status.value, "delete")
            await tx.purchase_requests.delete(pr.id)
            return pr

        deleted = await self._run_transaction(work)

        logger.info(
            "purchase_request_deleted",
            request_id=request_id,
            status=deleted.status.value,
            lot_id=deleted.lot_id,
        )
        await self._notify(
            NotificationLevel.SUCCESS, f"Purchase request for {deleted.material_name} deleted"
        )
        return request_id

    def to_response(self, result: str) -> DeletedResponse:
        return DeletedResponse(id=result)
