"""Lot aggregation: create lots, move approved requests in and out, delete lots."""

from dataclasses import dataclass

from procurement.application.dto.requests import AddToLotRequest, CreateLotRequest
from procurement.application.dto.responses import (
    DeleteLotResponse,
    LotResponse,
    PurchaseRequestResponse,
)
from procurement.application.use_cases.base import UseCase, require_text
from procurement.application.use_cases.purchase_requests import load_request
from procurement.config import get_logger
from procurement.core.entities import (
    LotStatus,
    OrderStatus,
    PurchaseLot,
    PurchaseRequest,
    PurchaseRequestStatus,
)
from procurement.core.exceptions import InvalidStateError, LotNotFoundError
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel

logger = get_logger(__name__)


async def load_lot(tx: ITransaction, lot_id: str) -> PurchaseLot:
    lot = await tx.lots.get(lot_id)
    if lot is None:
        raise LotNotFoundError(lot_id)
    return lot


class CreateLotUseCase(UseCase):
    """Create an empty, open lot."""

    operation = "create_lot"

    async def execute(self, request: CreateLotRequest) -> PurchaseLot:
        await self._authorize(Capability.LOTS_CREATE)
        name = require_text("name", request.name)

        async def work(tx: ITransaction) -> PurchaseLot:
            return await tx.lots.add(
                PurchaseLot(tenant_id=self.scope.tenant_id, name=name, created_by=self.scope.actor_id)
            )

        lot = await self._run_transaction(work)
        await self._notify(NotificationLevel.SUCCESS, f"Lot '{name}' created")
        return lot

    def to_response(self, result: PurchaseLot) -> LotResponse:
        return LotResponse.model_validate(result)


@dataclass
class AddToLotResult:
    """Result of adding a request to a lot."""

    request: PurchaseRequest
    lot: PurchaseLot
    lot_created: bool = False


class AddToLotUseCase(UseCase):
    """
    Batch an approved request into a lot.

    The lot is created on the fly when its ID is unknown, through the same
    upsert used for explicit creation.
    """

    operation = "add_to_lot"

    async def execute(self, lot_id: str, request: AddToLotRequest) -> AddToLotResult:
        await self._authorize(Capability.LOTS_ASSIGN)
        lot_id = require_text("lot_id", lot_id)
        lot_name = request.lot_name.strip() if request.lot_name and request.lot_name.strip() else lot_id

        async def work(tx: ITransaction) -> AddToLotResult:
            pr = await load_request(tx, request.request_id)
            pr.require_status(PurchaseRequestStatus.APPROVED, action="add to lot")

            lot, created = await tx.lots.ensure(
                PurchaseLot(
                    id=lot_id,
                    tenant_id=self.scope.tenant_id,
                    name=lot_name,
                    created_by=self.scope.actor_id,
                )
            )
            if lot.status == LotStatus.ORDERED:
                raise InvalidStateError("lot", lot.id, lot.status.value, "add requests to")

            pr.move_to(PurchaseRequestStatus.BATCHED, lot_id=lot.id)
            await tx.purchase_requests.save(pr)
            return AddToLotResult(request=pr, lot=lot, lot_created=created)

        result = await self._run_transaction(work)

        logger.info(
            "request_added_to_lot",
            request_id=result.request.id,
            lot_id=result.lot.id,
            lot_created=result.lot_created,
        )
        await self._notify(
            NotificationLevel.SUCCESS,
            f"{result.request.material_name} added to lot '{result.lot.name}'",
        )
        return result

    def to_response(self, result: AddToLotResult) -> PurchaseRequestResponse:
        return PurchaseRequestResponse.model_validate(result.request)


class RemoveFromLotUseCase(UseCase):
    """Take a batched request back out of its lot."""

    operation = "remove_from_lot"

    async def execute(self, request_id: str) -> PurchaseRequest:
        await self._authorize(Capability.LOTS_ASSIGN)

        async def work(tx: ITransaction) -> PurchaseRequest:
            pr = await load_request(tx, request_id)
            pr.require_status(PurchaseRequestStatus.BATCHED, action="remove from lot")
            previous_lot = pr.lot_id
            pr.move_to(PurchaseRequestStatus.APPROVED)
            await tx.purchase_requests.save(pr)
            logger.info("request_removed_from_lot", request_id=pr.id, lot_id=previous_lot)
            return pr

        pr = await self._run_transaction(work)
        await self._notify(NotificationLevel.SUCCESS, f"{pr.material_name} removed from lot")
        return pr

    def to_response(self, result: PurchaseRequest) -> PurchaseRequestResponse:
        return PurchaseRequestResponse.model_validate(result)


@dataclass
class DeleteLotResult:
    """Result of deleting a lot."""

    lot: PurchaseLot
    reverted_request_ids: list[str]
    deleted_order_ids: list[str]


class DeleteLotUseCase(UseCase):
    """
    Dissolve a lot in one transaction.

    Members go back to `approved`, the lot's non-binding quote orders are
    removed and the lot itself is deleted. A lot with an issued order must
    have that order cancelled first, and a lot whose quotes were already
    received against cannot be deleted.
    """

    operation = "delete_lot"

    async def execute(self, lot_id: str) -> DeleteLotResult:
        await self._authorize(Capability.LOTS_DELETE)

        async def work(tx: ITransaction) -> DeleteLotResult:
            lot = await load_lot(tx, lot_id)
            orders = await tx.orders.list(lot_id=lot.id)
            if any(order.status == OrderStatus.ISSUED for order in orders):
                raise InvalidStateError("lot", lot.id, lot.status.value, "delete")
            for order in orders:
                bound = await tx.purchase_requests.list_by_order(order.id)
                if any(pr.status == PurchaseRequestStatus.RECEIVED for pr in bound):
                    raise InvalidStateError(
                        "lot", lot.id, lot.status.value, "delete with received requests"
                    )

            reverted = []
            for pr in await tx.purchase_requests.list_by_lot(lot.id):
                pr.move_to(PurchaseRequestStatus.APPROVED)
                await tx.purchase_requests.save(pr)
                reverted.append(pr.id)

            deleted_orders = []
            for order in orders:
                await tx.orders.delete(order.id)
                deleted_orders.append(order.id)

            await tx.lots.delete(lot.id)
            return DeleteLotResult(
                lot=lot, reverted_request_ids=reverted, deleted_order_ids=deleted_orders
            )

        result = await self._run_transaction(work)

        logger.info(
            "lot_deleted",
            lot_id=lot_id,
            reverted=len(result.reverted_request_ids),
            deleted_orders=len(result.deleted_order_ids),
        )
        await self._notify(
            NotificationLevel.SUCCESS,
            f"Lot '{result.lot.name}' deleted; {len(result.reverted_request_ids)} requests returned to approved",
        )
        return result

    def to_response(self, result: DeleteLotResult) -> DeleteLotResponse:
        return DeleteLotResponse(
            lot_id=result.lot.id,
            reverted_request_ids=result.reverted_request_ids,
            deleted_order_ids=result.deleted_order_ids,
        )
