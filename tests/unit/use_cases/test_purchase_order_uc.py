"""Tests for quote requests, issued orders and cancellation."""

import aiosqlite
import pytest

from procurement.application.dto.requests import (
    GenerateQuoteRequestRequest,
    ReceivePurchaseRequestRequest,
)
from procurement.application.use_cases import (
    CancelOrderUseCase,
    GenerateQuoteRequestUseCase,
    ReceivePurchaseRequestUseCase,
)
from procurement.core.entities import LotStatus, OrderStatus, PurchaseRequestStatus
from procurement.core.exceptions import (
    InvalidStateError,
    LotNotFoundError,
    OrderNotFoundError,
    PreconditionError,
    SupplierNotFoundError,
    ValidationError,
)
from procurement.infrastructure.storage.sqlite.purchase_store import SQLitePurchaseOrderRepository

TENANT = "tenant-a"


class TestGenerateQuoteRequest:
    async def test_aggregates_lot_members(self, batched_request, quote, create_supplier, unit_of_work):
        first = await batched_request(quantity=40)
        second = await batched_request(quantity=60)
        sand = await batched_request(material_name="Sand", quantity=5)
        supplier = await create_supplier()

        order = await quote([first, second, sand], supplier=supplier)

        assert order.status == OrderStatus.GENERATED
        assert order.supplier_id == supplier.id
        assert order.total_amount == 0
        assert [(i.material_name, i.quantity, i.unit_price) for i in order.items] == [
            ("Cement", 100, 0),
            ("Sand", 5, 0),
        ]
        async with unit_of_work.reader(TENANT) as tx:
            lot = await tx.lots.get("L1")
            members = await tx.purchase_requests.list_by_lot("L1")
        assert lot.supplier_id == supplier.id
        assert lot.status == LotStatus.OPEN
        assert {m.status for m in members} == {PurchaseRequestStatus.ORDERED}
        assert {m.purchase_order_id for m in members} == {order.id}

    async def test_requests_must_share_a_lot(self, batched_request, quote):
        first = await batched_request(lot_id="L1")
        second = await batched_request(lot_id="L2")

        with pytest.raises(PreconditionError):
            await quote([first, second])

    async def test_requests_must_be_batched(self, approved_request, quote):
        pr = await approved_request()
        with pytest.raises(InvalidStateError):
            await quote([pr])

    async def test_unknown_supplier(self, make_use_case, batched_request):
        pr = await batched_request()
        with pytest.raises(SupplierNotFoundError):
            await make_use_case(GenerateQuoteRequestUseCase).execute(
                GenerateQuoteRequestRequest(request_ids=[pr.id], supplier_id="ghost")
            )

    async def test_empty_request_list(self, make_use_case):
        with pytest.raises(ValidationError):
            await make_use_case(GenerateQuoteRequestUseCase).execute(
                GenerateQuoteRequestRequest(request_ids=[], supplier_id="s")
            )


class TestIssueOrder:
    async def test_priced_quantity_lands_on_latest_request(
        self, batched_request, quote, issue_order, unit_of_work
    ):
        early = await batched_request(quantity=40)
        late = await batched_request(quantity=60)
        sand = await batched_request(material_name="Sand", quantity=5)
        generated = await quote([early, late, sand])

        order = await issue_order("L1", [("Cement", 110, 7), ("Sand", 5, 20)])

        assert order.status == OrderStatus.ISSUED
        assert order.official_order_number == "OC-001"
        assert order.total_amount == 110 * 7 + 5 * 20
        async with unit_of_work.reader(TENANT) as tx:
            refreshed_late = await tx.purchase_requests.get(late.id)
            refreshed_early = await tx.purchase_requests.get(early.id)
            old_quote = await tx.orders.get(generated.id)
            lot = await tx.lots.get("L1")
        assert refreshed_late.quantity == 70
        assert refreshed_late.original_quantity == 60
        assert refreshed_early.quantity == 40
        assert refreshed_late.purchase_order_id == order.id
        assert old_quote.status == OrderStatus.CANCELLED
        assert lot.status == LotStatus.ORDERED

    async def test_lot_needs_supplier(self, batched_request, issue_order):
        await batched_request()
        with pytest.raises(PreconditionError):
            await issue_order("L1", [("Cement", 100, 7)])

    async def test_lines_must_cover_lot(self, batched_request, quote, issue_order, unit_of_work):
        pr = await batched_request()
        await quote([pr])

        with pytest.raises(ValidationError):
            await issue_order("L1", [("Gravel", 100, 7)])

        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.lots.get("L1")).status == LotStatus.OPEN

    async def test_cannot_issue_twice(self, batched_request, quote, issue_order):
        pr = await batched_request()
        await quote([pr])
        await issue_order("L1", [("Cement", 100, 7)])

        with pytest.raises(InvalidStateError):
            await issue_order("L1", [("Cement", 100, 7)], number="OC-002")

    async def test_missing_lot(self, issue_order):
        with pytest.raises(LotNotFoundError):
            await issue_order("ghost", [("Cement", 100, 7)])


class TestCancelOrder:
    async def test_cancel_issued_order_reopens_lot(
        self, make_use_case, batched_request, quote, issue_order, unit_of_work
    ):
        members = [
            await batched_request(material_name=name, quantity=qty)
            for name, qty in (("Cement", 100), ("Sand", 5), ("Rebar", 40))
        ]
        generated = await quote(members)
        order = await issue_order("L1", [("Cement", 100, 7), ("Sand", 5, 20), ("Rebar", 40, 3)])

        result = await make_use_case(CancelOrderUseCase).execute(order.id)

        assert set(result.reverted_request_ids) == {m.id for m in members}
        async with unit_of_work.reader(TENANT) as tx:
            assert await tx.orders.get(order.id) is None
            lot = await tx.lots.get("L1")
            for member in members:
                pr = await tx.purchase_requests.get(member.id)
                assert pr.status == PurchaseRequestStatus.BATCHED
                assert pr.lot_id == "L1"
                assert pr.purchase_order_id is None
        assert lot.status == LotStatus.OPEN
        assert lot.supplier_id == generated.supplier_id

    async def test_failure_after_members_saved_reverts_nothing(
        self, make_use_case, batched_request, quote, issue_order, unit_of_work, monkeypatch
    ):
        members = [
            await batched_request(material_name=name, quantity=qty)
            for name, qty in (("Cement", 100), ("Sand", 5), ("Rebar", 40))
        ]
        await quote(members)
        order = await issue_order("L1", [("Cement", 100, 7), ("Sand", 5, 20), ("Rebar", 40, 3)])

        async def broken_delete(self, order_id):
            raise aiosqlite.OperationalError("disk I/O error")

        monkeypatch.setattr(SQLitePurchaseOrderRepository, "delete", broken_delete)

        with pytest.raises(aiosqlite.OperationalError):
            await make_use_case(CancelOrderUseCase).execute(order.id)

        async with unit_of_work.reader(TENANT) as tx:
            stored = await tx.orders.get(order.id)
            lot = await tx.lots.get("L1")
            statuses = [
                (await tx.purchase_requests.get(m.id)).status for m in members
            ]
        assert stored.status == OrderStatus.ISSUED
        assert lot.status == LotStatus.ORDERED
        assert statuses == [PurchaseRequestStatus.ORDERED] * 3

    async def test_cancel_quote(self, make_use_case, batched_request, quote, unit_of_work):
        pr = await batched_request()
        generated = await quote([pr])

        await make_use_case(CancelOrderUseCase).execute(generated.id)

        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.purchase_requests.get(pr.id)).status == PurchaseRequestStatus.BATCHED

    async def test_superseded_quote_cannot_be_cancelled(
        self, make_use_case, batched_request, quote, issue_order
    ):
        pr = await batched_request()
        generated = await quote([pr])
        await issue_order("L1", [("Cement", 100, 7)])

        with pytest.raises(InvalidStateError):
            await make_use_case(CancelOrderUseCase).execute(generated.id)

    async def test_partially_received_order_cannot_be_cancelled(
        self, make_use_case, batched_request, quote, issue_order, unit_of_work
    ):
        pr = await batched_request()
        await quote([pr])
        order = await issue_order("L1", [("Cement", 100, 7)])
        await make_use_case(ReceivePurchaseRequestUseCase).execute(
            pr.id, ReceivePurchaseRequestRequest(received_quantity=30)
        )

        with pytest.raises(InvalidStateError):
            await make_use_case(CancelOrderUseCase).execute(order.id)

        async with unit_of_work.reader(TENANT) as tx:
            assert await tx.orders.get(order.id) is not None

    async def test_missing_order(self, make_use_case):
        with pytest.raises(OrderNotFoundError):
            await make_use_case(CancelOrderUseCase).execute("ghost")
