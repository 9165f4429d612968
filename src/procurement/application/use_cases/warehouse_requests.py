"""
Internal warehouse movements.

Material requests take stock out once approved; return requests put it
back once completed. Both post through the stock ledger.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from procurement.application.dto.requests import (
    RejectRequest,
    SubmitMaterialRequestRequest,
    SubmitReturnRequestRequest,
)
from procurement.application.dto.responses import (
    MaterialRequestDecisionResponse,
    MaterialRequestResponse,
    ReturnRequestDecisionResponse,
    ReturnRequestResponse,
    StockMovementResponse,
)
from procurement.application.use_cases.base import UseCase, require_positive, require_text
from procurement.application.use_cases.stock_movements import load_material
from procurement.config import get_logger
from procurement.core.entities import (
    Material,
    MaterialRequest,
    MaterialRequestItem,
    MaterialRequestStatus,
    MovementType,
    ReturnRequest,
    ReturnRequestStatus,
    StockMovement,
)
from procurement.core.exceptions import (
    InvalidStateError,
    MaterialRequestNotFoundError,
    ReturnRequestNotFoundError,
    ValidationError,
)
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel
from procurement.core.services import StockLedgerService

logger = get_logger(__name__)


async def load_pending_material_request(
    tx: ITransaction, request_id: str, action: str
) -> MaterialRequest:
    request = await tx.material_requests.get(request_id)
    if request is None:
        raise MaterialRequestNotFoundError(request_id)
    if request.status != MaterialRequestStatus.PENDING:
        raise InvalidStateError("material request", request.id, request.status.value, action)
    return request


async def load_pending_return_request(
    tx: ITransaction, request_id: str, action: str
) -> ReturnRequest:
    request = await tx.return_requests.get(request_id)
    if request is None:
        raise ReturnRequestNotFoundError(request_id)
    if request.status != ReturnRequestStatus.PENDING:
        raise InvalidStateError("return request", request.id, request.status.value, action)
    return request


# --- Material requests ---


class SubmitMaterialRequestUseCase(UseCase):
    """Submit a pending request for stocked material."""

    operation = "submit_material_request"

    async def execute(self, request: SubmitMaterialRequestRequest) -> MaterialRequest:
        await self._authorize(Capability.MATERIAL_REQUESTS_CREATE)

        if not request.items:
            raise ValidationError("items", "at least one item is required")
        items = [
            MaterialRequestItem(
                material_id=require_text("material_id", item.material_id),
                quantity=require_positive("quantity", item.quantity),
            )
            for item in request.items
        ]
        area = require_text("area", request.area)
        requester_name = await self._actor_name()

        async def work(tx: ITransaction) -> MaterialRequest:
            for item in items:
                await load_material(tx, item.material_id)
            return await tx.material_requests.add(
                MaterialRequest(
                    tenant_id=self.scope.tenant_id,
                    items=items,
                    area=area,
                    requester_id=self.scope.actor_id,
                    requester_name=requester_name,
                    notes=request.notes,
                )
            )

        created = await self._run_transaction(work)
        logger.info("material_request_submitted", request_id=created.id, items=len(items))
        await self._notify(NotificationLevel.SUCCESS, "Material request submitted")
        return created

    def to_response(self, result: MaterialRequest) -> MaterialRequestResponse:
        return MaterialRequestResponse.model_validate(result)


@dataclass
class MaterialRequestDecision:
    """Material request after a decision."""

    request: MaterialRequest
    movements: list[StockMovement] = field(default_factory=list)

    def to_response(self) -> MaterialRequestDecisionResponse:
        return MaterialRequestDecisionResponse(
            request=MaterialRequestResponse.model_validate(self.request),
            movements=[StockMovementResponse.model_validate(m) for m in self.movements],
        )


class ApproveMaterialRequestUseCase(UseCase):
    """
    Approve a material request and deliver every line.

    Stock is re-read inside the transaction; one short line aborts the
    whole approval and the request stays pending.
    """

    operation = "approve_material_request"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(self, request_id: str) -> MaterialRequestDecision:
        await self._authorize(Capability.MATERIAL_REQUESTS_APPROVE)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> MaterialRequestDecision:
            request = await load_pending_material_request(tx, request_id, "approve")

            materials: dict[str, Material] = {}
            movements = []
            for item in request.items:
                material = materials.get(item.material_id)
                if material is None:
                    material = await load_material(tx, item.material_id)
                    materials[material.id] = material
                movements.append(
                    await self._ledger.post_movement(
                        tx,
                        material,
                        -item.quantity,
                        MovementType.REQUEST_DELIVERY,
                        justification=f"Delivery to {request.area}",
                        actor_id=self.scope.actor_id,
                        actor_name=actor_name,
                        related_request_id=request.id,
                    )
                )

            request.status = MaterialRequestStatus.APPROVED
            request.approver_id = self.scope.actor_id
            request.approver_name = actor_name
            request.decided_at = datetime.now(UTC)
            await tx.material_requests.save(request)
            return MaterialRequestDecision(request=request, movements=movements)

        result = await self._run_transaction(work)
        logger.info(
            "material_request_approved",
            request_id=request_id,
            movements=len(result.movements),
        )
        await self._notify(NotificationLevel.SUCCESS, "Material request approved and delivered")
        return result

    def to_response(self, result: MaterialRequestDecision) -> MaterialRequestDecisionResponse:
        return result.to_response()


class RejectMaterialRequestUseCase(UseCase):
    """Reject a pending material request without touching stock."""

    operation = "reject_material_request"

    async def execute(
        self, request_id: str, request: RejectRequest | None = None
    ) -> MaterialRequestDecision:
        await self._authorize(Capability.MATERIAL_REQUESTS_APPROVE)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> MaterialRequestDecision:
            material_request = await load_pending_material_request(tx, request_id, "reject")
            material_request.status = MaterialRequestStatus.REJECTED
            material_request.approver_id = self.scope.actor_id
            material_request.approver_name = actor_name
            material_request.decided_at = datetime.now(UTC)
            if request and request.notes:
                material_request.notes = request.notes
            await tx.material_requests.save(material_request)
            return MaterialRequestDecision(request=material_request)

        result = await self._run_transaction(work)
        logger.info("material_request_rejected", request_id=request_id)
        await self._notify(NotificationLevel.SUCCESS, "Material request rejected")
        return result

    def to_response(self, result: MaterialRequestDecision) -> MaterialRequestDecisionResponse:
        return result.to_response()


# --- Return requests ---


class SubmitReturnRequestUseCase(UseCase):
    """
    Submit pending returns of excess material.

    Each line becomes its own return request; all of them are written in one
    transaction or none are.
    """

    operation = "submit_return_request"

    async def execute(self, request: SubmitReturnRequestRequest) -> list[ReturnRequest]:
        await self._authorize(Capability.RETURN_REQUESTS_CREATE)

        if not request.items:
            raise ValidationError("items", "at least one item is required")
        lines = [
            (
                require_text("material_id", item.material_id),
                require_positive("quantity", item.quantity),
            )
            for item in request.items
        ]
        requester_name = await self._actor_name()

        async def work(tx: ITransaction) -> list[ReturnRequest]:
            created = []
            for material_id, quantity in lines:
                material = await load_material(tx, material_id)
                created.append(
                    await tx.return_requests.add(
                        ReturnRequest(
                            tenant_id=self.scope.tenant_id,
                            material_id=material.id,
                            material_name=material.name,
                            quantity=quantity,
                            unit=material.unit,
                            requester_id=self.scope.actor_id,
                            requester_name=requester_name,
                            notes=request.notes,
                        )
                    )
                )
            return created

        created = await self._run_transaction(work)
        logger.info("return_requests_submitted", count=len(created))
        summary = ", ".join(f"{r.quantity:g} {r.unit} of {r.material_name}" for r in created)
        await self._notify(NotificationLevel.SUCCESS, f"Return of {summary} submitted")
        return created

    def to_response(self, result: list[ReturnRequest]) -> list[ReturnRequestResponse]:
        return [ReturnRequestResponse.model_validate(r) for r in result]


@dataclass
class ReturnRequestDecision:
    """Return request after a decision."""

    request: ReturnRequest
    movement: StockMovement | None = None

    def to_response(self) -> ReturnRequestDecisionResponse:
        return ReturnRequestDecisionResponse(
            request=ReturnRequestResponse.model_validate(self.request),
            movement=StockMovementResponse.model_validate(self.movement) if self.movement else None,
        )


class CompleteReturnRequestUseCase(UseCase):
    """Accept returned material back into stock."""

    operation = "complete_return_request"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(self, request_id: str) -> ReturnRequestDecision:
        await self._authorize(Capability.RETURN_REQUESTS_APPROVE)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> ReturnRequestDecision:
            request = await load_pending_return_request(tx, request_id, "complete")
            material = await load_material(tx, request.material_id)
            movement = await self._ledger.post_movement(
                tx,
                material,
                request.quantity,
                MovementType.RETURN_REENTRY,
                justification=f"Return from {request.requester_name or request.requester_id}",
                actor_id=self.scope.actor_id,
                actor_name=actor_name,
                related_request_id=request.id,
            )
            request.status = ReturnRequestStatus.COMPLETED
            request.handler_id = self.scope.actor_id
            request.handler_name = actor_name
            request.completed_at = datetime.now(UTC)
            await tx.return_requests.save(request)
            return ReturnRequestDecision(request=request, movement=movement)

        result = await self._run_transaction(work)
        logger.info("return_request_completed", request_id=request_id)
        await self._notify(
            NotificationLevel.SUCCESS,
            f"{result.request.quantity:g} {result.request.unit} of "
            f"{result.request.material_name} returned to stock",
        )
        return result

    def to_response(self, result: ReturnRequestDecision) -> ReturnRequestDecisionResponse:
        return result.to_response()


class RejectReturnRequestUseCase(UseCase):
    """Reject a pending return without touching stock."""

    operation = "reject_return_request"

    async def execute(
        self, request_id: str, request: RejectRequest | None = None
    ) -> ReturnRequestDecision:
        await self._authorize(Capability.RETURN_REQUESTS_APPROVE)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> ReturnRequestDecision:
            return_request = await load_pending_return_request(tx, request_id, "reject")
            return_request.status = ReturnRequestStatus.REJECTED
            return_request.handler_id = self.scope.actor_id
            return_request.handler_name = actor_name
            if request and request.notes:
                return_request.notes = request.notes
            await tx.return_requests.save(return_request)
            return ReturnRequestDecision(request=return_request)

        result = await self._run_transaction(work)
        logger.info("return_request_rejected", request_id=request_id)
        await self._notify(NotificationLevel.SUCCESS, "Return request rejected")
        return result

    def to_response(self, result: ReturnRequestDecision) -> ReturnRequestDecisionResponse:
        return result.to_response()
