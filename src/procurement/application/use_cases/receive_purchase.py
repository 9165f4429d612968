"""Receive Purchase Use Case: goods receipt with split on partial delivery."""

from dataclasses import dataclass
from datetime import UTC, datetime

from procurement.application.dto.requests import ReceivePurchaseRequestRequest
from procurement.application.dto.responses import (
    MaterialResponse,
    PurchaseRequestResponse,
    ReceiveResponse,
    StockMovementResponse,
)
from procurement.application.use_cases.base import UseCase, require_positive
from procurement.application.use_cases.purchase_requests import load_request
from procurement.config import get_logger
from procurement.core.entities import (
    Material,
    MovementType,
    PurchaseRequest,
    PurchaseRequestStatus,
    StockMovement,
    quantize_quantity,
)
from procurement.core.exceptions import InvalidStateError, MaterialNotFoundError
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel
from procurement.core.services import StockLedgerService

logger = get_logger(__name__)

RECEIVABLE_STATUSES = (
    PurchaseRequestStatus.APPROVED,
    PurchaseRequestStatus.BATCHED,
    PurchaseRequestStatus.ORDERED,
)


@dataclass
class ReceiveResult:
    """Result of receiving goods against a purchase request."""

    received_request: PurchaseRequest
    material: Material
    movement: StockMovement
    remainder_request: PurchaseRequest | None = None  # set on partial receipt
    material_created: bool = False


class ReceivePurchaseRequestUseCase(UseCase):
    """
    Reconcile a delivery against one purchase request.

    Exact and over-deliveries close the request. A short delivery splits
    it: the original keeps the undelivered remainder and returns to
    `approved`, a new sibling records what arrived. Either way the target
    material is credited through the ledger in the same transaction.
    """

    operation = "receive_purchase_request"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(
        self, request_id: str, request: ReceivePurchaseRequestRequest
    ) -> ReceiveResult:
        await self._authorize(Capability.STOCK_RECEIVE_ORDER)
        received = require_positive("received_quantity", request.received_quantity)
        actor_name = await self._actor_name()

        logger.info("receive_purchase_started", request_id=request_id, received=received)

        async def work(tx: ITransaction) -> ReceiveResult:
            pr = await load_request(tx, request_id)
            if pr.status not in RECEIVABLE_STATUSES:
                raise InvalidStateError("purchase request", pr.id, pr.status.value, "receive")

            material, material_created = await self._resolve_material(
                tx, pr, request.target_material_id
            )

            now = datetime.now(UTC)
            prior = pr.quantity
            remainder = None
            if received >= prior:
                if pr.original_quantity is None:
                    pr.original_quantity = prior
                pr.quantity = received
                pr.move_to(PurchaseRequestStatus.RECEIVED, purchase_order_id=pr.purchase_order_id)
                pr.received_at = now
                await tx.purchase_requests.save(pr)
                received_request = pr
            else:
                pending = quantize_quantity(prior - received)
                received_request = PurchaseRequest(
                    tenant_id=self.scope.tenant_id,
                    material_name=pr.material_name,
                    quantity=received,
                    original_quantity=prior,
                    unit=pr.unit,
                    category=pr.category,
                    justification=pr.justification,
                    area=pr.area,
                    requester_id=pr.requester_id,
                    requester_name=pr.requester_name,
                    status=PurchaseRequestStatus.RECEIVED,
                    purchase_order_id=pr.purchase_order_id,
                    derived_from_request_id=pr.id,
                    notes=f"Received {received:g} of {prior:g} requested.",
                    approver_id=pr.approver_id,
                    approver_name=pr.approver_name,
                    approved_at=pr.approved_at,
                    received_at=now,
                )

                if pr.original_quantity is None:
                    pr.original_quantity = prior
                pr.quantity = pending
                note = f"Partial receipt of {received:g}. Pending: {pending:g}."
                pr.notes = f"{note} {pr.notes}" if pr.notes else note
                pr.move_to(PurchaseRequestStatus.APPROVED)
                await tx.purchase_requests.save(pr)
                await tx.purchase_requests.add(received_request)
                remainder = pr

            movement = await self._ledger.post_movement(
                tx,
                material,
                received,
                MovementType.RECEIVING,
                justification=f"Receipt against purchase request {pr.id}",
                actor_id=self.scope.actor_id,
                actor_name=actor_name,
                related_request_id=received_request.id,
            )
            return ReceiveResult(
                received_request=received_request,
                material=material,
                movement=movement,
                remainder_request=remainder,
                material_created=material_created,
            )

        result = await self._run_transaction(work)

        logger.info(
            "receive_purchase_complete",
            request_id=request_id,
            material_id=result.material.id,
            received=received,
            split=result.remainder_request is not None,
            new_stock=result.material.stock,
        )
        if result.remainder_request is not None:
            message = (
                f"Received {received:g} {result.material.unit} of {result.material.name}; "
                f"{result.remainder_request.quantity:g} still pending"
            )
        else:
            message = f"Received {received:g} {result.material.unit} of {result.material.name}"
        await self._notify(NotificationLevel.SUCCESS, message)
        return result

    async def _resolve_material(
        self,
        tx: ITransaction,
        pr: PurchaseRequest,
        target_material_id: str | None,
    ) -> tuple[Material, bool]:
        """Explicit target, else exact name match, else a new empty material."""
        if target_material_id:
            material = await tx.materials.get(target_material_id)
            if material is None:
                raise MaterialNotFoundError(target_material_id)
            return material, False

        material = await tx.materials.find_by_name(pr.material_name)
        if material is not None:
            return material, False

        await tx.units.ensure(pr.unit)
        material = await tx.materials.add(
            Material(
                tenant_id=self.scope.tenant_id,
                name=pr.material_name,
                unit=pr.unit,
                category=pr.category,
            )
        )
        return material, True

    def to_response(self, result: ReceiveResult) -> ReceiveResponse:
        """Convert result to API response."""
        return ReceiveResponse(
            received_request=PurchaseRequestResponse.model_validate(result.received_request),
            remainder_request=(
                PurchaseRequestResponse.model_validate(result.remainder_request)
                if result.remainder_request
                else None
            ),
            material=MaterialResponse.model_validate(result.material),
            movement=StockMovementResponse.model_validate(result.movement),
            material_created=result.material_created,
        )
