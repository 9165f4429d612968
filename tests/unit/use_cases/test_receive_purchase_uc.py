"""Tests for ReceivePurchaseRequestUseCase."""

import pytest

from procurement.application.dto.requests import ReceivePurchaseRequestRequest
from procurement.application.use_cases import ReceivePurchaseRequestUseCase
from procurement.core.entities import MovementType, PurchaseRequestStatus
from procurement.core.exceptions import (
    InvalidStateError,
    MaterialNotFoundError,
    PermissionDeniedError,
    ValidationError,
)

TENANT = "tenant-a"


async def receive(make_use_case, request_id, quantity, **kwargs):
    return await make_use_case(ReceivePurchaseRequestUseCase).execute(
        request_id, ReceivePurchaseRequestRequest(received_quantity=quantity, **kwargs)
    )


class TestPartialReceipt:
    async def test_split_keeps_remainder_open(
        self, make_use_case, batched_request, quote, issue_order, create_material, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=20)
        pr = await batched_request()
        await quote([pr])
        order = await issue_order("L1", [("Cement", 100, 7.5)])

        result = await receive(make_use_case, pr.id, 60)

        remainder = result.remainder_request
        assert remainder.id == pr.id
        assert remainder.status == PurchaseRequestStatus.APPROVED
        assert remainder.quantity == 40
        assert remainder.lot_id is None
        assert remainder.purchase_order_id is None
        assert remainder.notes.startswith("Partial receipt of 60. Pending: 40.")

        sibling = result.received_request
        assert sibling.id != pr.id
        assert sibling.status == PurchaseRequestStatus.RECEIVED
        assert sibling.quantity == 60
        assert sibling.original_quantity == 100
        assert sibling.derived_from_request_id == pr.id
        assert sibling.purchase_order_id == order.id
        assert sibling.received_at is not None

        assert result.material.id == cement.id
        assert result.material.stock == 80
        assert result.movement.quantity_change == 60
        assert result.movement.type == MovementType.RECEIVING
        assert result.movement.related_request_id == sibling.id

        async with unit_of_work.reader(TENANT) as tx:
            movements = await tx.ledger.list_for_material(cement.id)
            stored_sibling = await tx.purchase_requests.get(sibling.id)
        assert [m.quantity_change for m in movements] == [60, 20]
        assert stored_sibling.status == PurchaseRequestStatus.RECEIVED

    async def test_remainder_can_be_received_later(self, make_use_case, approved_request, create_material):
        await create_material("Cement")
        pr = await approved_request(quantity=100)

        await receive(make_use_case, pr.id, 60)
        result = await receive(make_use_case, pr.id, 40)

        assert result.remainder_request is None
        assert result.received_request.id == pr.id
        assert result.received_request.status == PurchaseRequestStatus.RECEIVED
        assert result.received_request.original_quantity == 100
        assert result.material.stock == 100


class TestFullReceipt:
    async def test_over_delivery_records_received_quantity(
        self, make_use_case, approved_request, create_material
    ):
        await create_material("Cement", initial_stock=5)
        pr = await approved_request(quantity=100)

        result = await receive(make_use_case, pr.id, 120)

        assert result.remainder_request is None
        assert result.received_request.quantity == 120
        assert result.received_request.original_quantity == 100
        assert result.material.stock == 125

    async def test_exact_delivery(self, make_use_case, approved_request, create_material):
        await create_material("Cement")
        pr = await approved_request(quantity=100)

        result = await receive(make_use_case, pr.id, 100)

        assert result.received_request.quantity == 100
        assert result.received_request.original_quantity == 100

    async def test_unknown_material_is_created(self, make_use_case, approved_request, unit_of_work):
        pr = await approved_request(material_name="Grout", quantity=10, unit="kg")

        result = await receive(make_use_case, pr.id, 10)

        assert result.material_created is True
        assert result.material.name == "Grout"
        assert result.material.unit == "kg"
        assert result.material.stock == 10
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.find_by_name("Grout")).id == result.material.id

    async def test_explicit_target_material(self, make_use_case, approved_request, create_material):
        target = await create_material("Portland cement 42.5")
        pr = await approved_request(material_name="Cement", quantity=10)

        result = await receive(make_use_case, pr.id, 10, target_material_id=target.id)

        assert result.material.id == target.id
        assert result.material_created is False


class TestReceiveRejections:
    async def test_pending_request(self, make_use_case, create_request):
        pr = await create_request()
        with pytest.raises(InvalidStateError):
            await receive(make_use_case, pr.id, 10)

    async def test_already_received(self, make_use_case, approved_request):
        pr = await approved_request(quantity=10)
        await receive(make_use_case, pr.id, 10)
        with pytest.raises(InvalidStateError):
            await receive(make_use_case, pr.id, 10)

    async def test_non_positive_quantity(self, make_use_case, approved_request):
        pr = await approved_request()
        with pytest.raises(ValidationError):
            await receive(make_use_case, pr.id, 0)

    async def test_missing_target_material_rolls_back(
        self, make_use_case, approved_request, unit_of_work
    ):
        pr = await approved_request(quantity=10)

        with pytest.raises(MaterialNotFoundError):
            await receive(make_use_case, pr.id, 10, target_material_id="ghost")

        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.purchase_requests.get(pr.id)).status == PurchaseRequestStatus.APPROVED

    async def test_requester_cannot_receive(self, make_use_case, approved_request):
        pr = await approved_request()
        with pytest.raises(PermissionDeniedError):
            await make_use_case(ReceivePurchaseRequestUseCase, actor_id="rick").execute(
                pr.id, ReceivePurchaseRequestRequest(received_quantity=10)
            )

    async def test_response_shape(self, make_use_case, approved_request):
        pr = await approved_request(quantity=10)
        use_case = make_use_case(ReceivePurchaseRequestUseCase)
        response = use_case.to_response(
            await use_case.execute(pr.id, ReceivePurchaseRequestRequest(received_quantity=4))
        )
        assert response.remainder_request.quantity == 6
        assert response.movement.quantity_change == 4
        assert response.material_created is True
