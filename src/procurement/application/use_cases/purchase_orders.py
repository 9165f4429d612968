"""Purchase order issuing: quote requests, binding orders, cancellation."""

from dataclasses import dataclass

from procurement.application.dto.requests import GenerateQuoteRequestRequest, IssueOrderRequest
from procurement.application.dto.responses import CancelOrderResponse, PurchaseOrderResponse
from procurement.application.use_cases.base import UseCase, require_text
from procurement.application.use_cases.lots import load_lot
from procurement.application.use_cases.purchase_requests import load_request
from procurement.config import get_logger
from procurement.core.entities import (
    LotStatus,
    OrderStatus,
    PurchaseOrder,
    PurchaseRequestStatus,
)
from procurement.core.exceptions import (
    InvalidStateError,
    OrderNotFoundError,
    PreconditionError,
    SupplierNotFoundError,
    ValidationError,
)
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel
from procurement.core.services import (
    PricedLine,
    aggregate_requests,
    apply_priced_quantities,
    build_order_items,
    order_total,
    validate_priced_lines,
)

logger = get_logger(__name__)


class GenerateQuoteRequestUseCase(UseCase):
    """
    Ask a supplier to quote the batched requests of one lot.

    The quote is a non-binding order with zero prices; its members move to
    `ordered` and the lot remembers the supplier.
    """

    operation = "generate_quote_request"

    async def execute(self, request: GenerateQuoteRequestRequest) -> PurchaseOrder:
        await self._authorize(Capability.ORDERS_CREATE)

        request_ids = list(dict.fromkeys(request.request_ids))
        if not request_ids:
            raise ValidationError("request_ids", "at least one request is required")
        supplier_id = require_text("supplier_id", request.supplier_id)

        async def work(tx: ITransaction) -> PurchaseOrder:
            members = [await load_request(tx, request_id) for request_id in request_ids]
            for pr in members:
                pr.require_status(PurchaseRequestStatus.BATCHED, action="quote")

            lot_ids = {pr.lot_id for pr in members}
            if len(lot_ids) != 1:
                raise PreconditionError(
                    "Requests of a quote must belong to one lot",
                    details={"lot_ids": sorted(str(lot_id) for lot_id in lot_ids)},
                )
            lot = await load_lot(tx, lot_ids.pop())
            if lot.status != LotStatus.OPEN:
                raise InvalidStateError("lot", lot.id, lot.status.value, "quote")

            supplier = await tx.suppliers.get(supplier_id)
            if supplier is None:
                raise SupplierNotFoundError(supplier_id)

            order = await tx.orders.add(
                PurchaseOrder(
                    tenant_id=self.scope.tenant_id,
                    lot_id=lot.id,
                    supplier_id=supplier.id,
                    items=aggregate_requests(members),
                    status=OrderStatus.GENERATED,
                    request_ids=[pr.id for pr in members],
                    created_by=self.scope.actor_id,
                )
            )
            for pr in members:
                pr.move_to(PurchaseRequestStatus.ORDERED, lot_id=lot.id, purchase_order_id=order.id)
                await tx.purchase_requests.save(pr)

            lot.supplier_id = supplier.id
            await tx.lots.save(lot)
            return order

        order = await self._run_transaction(work)

        logger.info(
            "quote_request_generated",
            order_id=order.id,
            lot_id=order.lot_id,
            supplier_id=order.supplier_id,
            items=len(order.items),
        )
        await self._notify(
            NotificationLevel.SUCCESS, f"Quote request generated with {len(order.items)} lines"
        )
        return order

    def to_response(self, result: PurchaseOrder) -> PurchaseOrderResponse:
        return PurchaseOrderResponse.model_validate(result)


class IssueOrderUseCase(UseCase):
    """
    Issue the binding purchase order of a lot.

    Supplier-priced lines finalize quantities on the member requests;
    earlier quote requests of the lot are marked cancelled.
    """

    operation = "issue_order"

    async def execute(self, request: IssueOrderRequest) -> PurchaseOrder:
        await self._authorize(Capability.ORDERS_CREATE)

        lot_id = require_text("lot_id", request.lot_id)
        order_number = require_text("official_order_number", request.official_order_number)
        lines = [
            PricedLine(
                material_name=item.material_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in request.items
        ]

        async def work(tx: ITransaction) -> PurchaseOrder:
            lot = await load_lot(tx, lot_id)
            if lot.status != LotStatus.OPEN:
                raise InvalidStateError("lot", lot.id, lot.status.value, "issue order for")
            if not lot.supplier_id:
                raise PreconditionError(
                    f"Lot {lot.id} has no supplier; generate a quote request first",
                    details={"lot_id": lot.id},
                )

            members = await tx.purchase_requests.list_by_lot(lot.id)
            if not members:
                raise PreconditionError(f"Lot {lot.id} has no requests", details={"lot_id": lot.id})

            validate_priced_lines(members, lines)
            apply_priced_quantities(members, lines)
            items = build_order_items(members, lines)

            order = await tx.orders.add(
                PurchaseOrder(
                    tenant_id=self.scope.tenant_id,
                    lot_id=lot.id,
                    supplier_id=lot.supplier_id,
                    items=items,
                    total_amount=order_total(items),
                    status=OrderStatus.ISSUED,
                    official_order_number=order_number,
                    request_ids=[pr.id for pr in members],
                    created_by=self.scope.actor_id,
                )
            )

            for quote in await tx.orders.list(lot_id=lot.id, status=OrderStatus.GENERATED):
                quote.status = OrderStatus.CANCELLED
                await tx.orders.save(quote)

            for pr in members:
                pr.move_to(PurchaseRequestStatus.ORDERED, lot_id=lot.id, purchase_order_id=order.id)
                await tx.purchase_requests.save(pr)

            lot.status = LotStatus.ORDERED
            await tx.lots.save(lot)
            return order

        order = await self._run_transaction(work)

        logger.info(
            "purchase_order_issued",
            order_id=order.id,
            lot_id=order.lot_id,
            official_order_number=order.official_order_number,
            total_amount=order.total_amount,
        )
        await self._notify(
            NotificationLevel.SUCCESS, f"Purchase order {order.official_order_number} issued"
        )
        return order

    def to_response(self, result: PurchaseOrder) -> PurchaseOrderResponse:
        return PurchaseOrderResponse.model_validate(result)


@dataclass
class CancelOrderResult:
    """Result of cancelling an order."""

    order: PurchaseOrder
    reverted_request_ids: list[str]


class CancelOrderUseCase(UseCase):
    """
    Cancel an order in one transaction.

    Members return to `batched` inside the order's lot, the lot reopens with
    its supplier kept, and the order is deleted.
    """

    operation = "cancel_order"

    async def execute(self, order_id: str) -> CancelOrderResult:
        await self._authorize(Capability.ORDERS_CANCEL)

        async def work(tx: ITransaction) -> CancelOrderResult:
            order = await tx.orders.get(order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            if order.status == OrderStatus.CANCELLED:
                raise InvalidStateError("purchase order", order.id, order.status.value, "cancel")

            members = []
            for request_id in order.request_ids:
                pr = await tx.purchase_requests.get(request_id)
                if pr is None:
                    logger.info("order_member_missing", order_id=order.id, request_id=request_id)
                    continue
                members.append(pr)

            # Split-off receipts keep the order reference without being listed members
            bound = await tx.purchase_requests.list_by_order(order.id)
            for pr in [*members, *bound]:
                if pr.status == PurchaseRequestStatus.RECEIVED:
                    raise InvalidStateError(
                        "purchase order", order.id, order.status.value, "cancel partially received"
                    )

            for pr in members:
                pr.move_to(PurchaseRequestStatus.BATCHED, lot_id=order.lot_id)
                await tx.purchase_requests.save(pr)

            lot = await tx.lots.get(order.lot_id)
            if lot is not None:
                lot.status = LotStatus.OPEN
                await tx.lots.save(lot)

            await tx.orders.delete(order.id)
            return CancelOrderResult(order=order, reverted_request_ids=[pr.id for pr in members])

        result = await self._run_transaction(work)

        logger.info(
            "purchase_order_cancelled",
            order_id=order_id,
            lot_id=result.order.lot_id,
            reverted=len(result.reverted_request_ids),
        )
        await self._notify(
            NotificationLevel.SUCCESS,
            f"Order cancelled; {len(result.reverted_request_ids)} requests returned to the lot",
        )
        return result

    def to_response(self, result: CancelOrderResult) -> CancelOrderResponse:
        return CancelOrderResponse(
            order_id=result.order.id,
            lot_id=result.order.lot_id,
            reverted_request_ids=result.reverted_request_ids,
        )
