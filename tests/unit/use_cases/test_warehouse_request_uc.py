"""Tests for material requests and return requests."""

import asyncio

import pytest

from procurement.application.dto.requests import (
    MaterialRequestItemRequest,
    RejectRequest,
    SubmitMaterialRequestRequest,
    SubmitReturnRequestRequest,
)
from procurement.application.use_cases import (
    ApproveMaterialRequestUseCase,
    CompleteReturnRequestUseCase,
    RejectMaterialRequestUseCase,
    RejectReturnRequestUseCase,
    SubmitMaterialRequestUseCase,
    SubmitReturnRequestUseCase,
)
from procurement.core.entities import MaterialRequestStatus, MovementType, ReturnRequestStatus
from procurement.core.exceptions import (
    InsufficientStockError,
    InvalidStateError,
    MaterialNotFoundError,
    MaterialRequestNotFoundError,
    PermissionDeniedError,
    ValidationError,
)

TENANT = "tenant-a"


@pytest.fixture
def submit_material_request(make_use_case):
    async def submit(*lines, area: str = "Tower B"):
        return await make_use_case(SubmitMaterialRequestUseCase, actor_id="rick").execute(
            SubmitMaterialRequestRequest(
                items=[MaterialRequestItemRequest(material_id=m, quantity=q) for m, q in lines],
                area=area,
            )
        )

    return submit


@pytest.fixture
def submit_return(make_use_case):
    async def submit(material_id: str, quantity: float):
        created = await make_use_case(SubmitReturnRequestUseCase).execute(
            SubmitReturnRequestRequest(
                items=[MaterialRequestItemRequest(material_id=material_id, quantity=quantity)]
            )
        )
        return created[0]

    return submit


class TestSubmitMaterialRequest:
    async def test_submits_pending(self, create_material, submit_material_request):
        cement = await create_material("Cement", initial_stock=30)

        request = await submit_material_request((cement.id, 10))

        assert request.status == MaterialRequestStatus.PENDING
        assert request.requester_name == "Rick Requester"
        assert request.items[0].quantity == 10

    async def test_unknown_material(self, submit_material_request):
        with pytest.raises(MaterialNotFoundError):
            await submit_material_request(("ghost", 1))

    async def test_no_items(self, submit_material_request):
        with pytest.raises(ValidationError):
            await submit_material_request()

    async def test_non_positive_quantity(self, create_material, submit_material_request):
        cement = await create_material("Cement")
        with pytest.raises(ValidationError):
            await submit_material_request((cement.id, 0))


class TestApproveMaterialRequest:
    async def test_delivers_every_line(
        self, make_use_case, create_material, submit_material_request, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=30)
        sand = await create_material("Sand", initial_stock=8)
        request = await submit_material_request((cement.id, 10), (sand.id, 8), (cement.id, 5))

        decision = await make_use_case(ApproveMaterialRequestUseCase, actor_id="wanda").execute(
            request.id
        )

        assert decision.request.status == MaterialRequestStatus.APPROVED
        assert decision.request.approver_id == "wanda"
        assert [m.resulting_stock for m in decision.movements] == [20, 0, 15]
        assert {m.type for m in decision.movements} == {MovementType.REQUEST_DELIVERY}
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 15
            assert (await tx.materials.get(sand.id)).stock == 0
            assert len(await tx.ledger.list_for_request(request.id)) == 3

    async def test_short_stock_aborts_everything(
        self, make_use_case, create_material, submit_material_request, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=30)
        request = await submit_material_request((cement.id, 50))

        with pytest.raises(InsufficientStockError) as exc_info:
            await make_use_case(ApproveMaterialRequestUseCase).execute(request.id)

        assert exc_info.value.details["available"] == 30
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 30
            assert await tx.ledger.list_for_request(request.id) == []
            assert (await tx.material_requests.get(request.id)).status == MaterialRequestStatus.PENDING

    async def test_one_short_line_rolls_back_earlier_lines(
        self, make_use_case, create_material, submit_material_request, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=30)
        sand = await create_material("Sand", initial_stock=1)
        request = await submit_material_request((cement.id, 10), (sand.id, 2))

        with pytest.raises(InsufficientStockError):
            await make_use_case(ApproveMaterialRequestUseCase).execute(request.id)

        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 30

    async def test_concurrent_approvals_never_overdraw(
        self, make_use_case, create_material, submit_material_request, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=30)
        requests = [await submit_material_request((cement.id, 20)) for _ in range(3)]

        results = await asyncio.gather(
            *(
                make_use_case(ApproveMaterialRequestUseCase).execute(request.id)
                for request in requests
            ),
            return_exceptions=True,
        )

        approved = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(approved) == 1
        assert all(isinstance(f, InsufficientStockError) for f in failures)
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 10
            total, count, last = await tx.ledger.summarize(cement.id)
        assert (total, count, last) == (10, 2, 10)

    async def test_only_pending(self, make_use_case, create_material, submit_material_request):
        cement = await create_material("Cement", initial_stock=30)
        request = await submit_material_request((cement.id, 1))
        use_case = make_use_case(ApproveMaterialRequestUseCase)
        await use_case.execute(request.id)

        with pytest.raises(InvalidStateError):
            await use_case.execute(request.id)

    async def test_requester_cannot_approve(self, make_use_case, create_material, submit_material_request):
        cement = await create_material("Cement", initial_stock=30)
        request = await submit_material_request((cement.id, 1))
        with pytest.raises(PermissionDeniedError):
            await make_use_case(ApproveMaterialRequestUseCase, actor_id="rick").execute(request.id)


class TestRejectMaterialRequest:
    async def test_reject_leaves_stock(
        self, make_use_case, create_material, submit_material_request, unit_of_work
    ):
        cement = await create_material("Cement", initial_stock=30)
        request = await submit_material_request((cement.id, 10))

        decision = await make_use_case(RejectMaterialRequestUseCase).execute(
            request.id, RejectRequest(notes="use leftovers")
        )

        assert decision.request.status == MaterialRequestStatus.REJECTED
        assert decision.request.notes == "use leftovers"
        assert decision.movements == []
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 30

    async def test_missing(self, make_use_case):
        with pytest.raises(MaterialRequestNotFoundError):
            await make_use_case(RejectMaterialRequestUseCase).execute("ghost")


class TestReturnRequests:
    async def test_complete_puts_stock_back(self, make_use_case, create_material, submit_return):
        cement = await create_material("Cement", initial_stock=4)
        request = await submit_return(cement.id, 3)

        assert request.status == ReturnRequestStatus.PENDING
        assert request.material_name == "Cement"
        assert request.unit == "bag"

        decision = await make_use_case(CompleteReturnRequestUseCase).execute(request.id)

        assert decision.request.status == ReturnRequestStatus.COMPLETED
        assert decision.request.handler_name == "Alice Admin"
        assert decision.movement.type == MovementType.RETURN_REENTRY
        assert decision.movement.resulting_stock == 7
        assert decision.movement.related_request_id == request.id

    async def test_reject_return(self, make_use_case, create_material, submit_return, unit_of_work):
        cement = await create_material("Cement", initial_stock=4)
        request = await submit_return(cement.id, 3)

        decision = await make_use_case(RejectReturnRequestUseCase).execute(request.id)

        assert decision.request.status == ReturnRequestStatus.REJECTED
        assert decision.movement is None
        async with unit_of_work.reader(TENANT) as tx:
            assert (await tx.materials.get(cement.id)).stock == 4

    async def test_completed_return_is_final(self, make_use_case, create_material, submit_return):
        cement = await create_material("Cement")
        request = await submit_return(cement.id, 3)
        await make_use_case(CompleteReturnRequestUseCase).execute(request.id)

        with pytest.raises(InvalidStateError):
            await make_use_case(RejectReturnRequestUseCase).execute(request.id)

    async def test_warehouse_role_cannot_handle_returns(
        self, make_use_case, create_material, submit_return
    ):
        cement = await create_material("Cement")
        request = await submit_return(cement.id, 3)
        with pytest.raises(PermissionDeniedError):
            await make_use_case(CompleteReturnRequestUseCase, actor_id="wanda").execute(request.id)

    async def test_return_of_unknown_material(self, submit_return):
        with pytest.raises(MaterialNotFoundError):
            await submit_return("ghost", 1)

    async def test_one_request_per_returned_line(self, make_use_case, create_material, unit_of_work):
        cement = await create_material("Cement")
        sand = await create_material("Sand")
        use_case = make_use_case(SubmitReturnRequestUseCase)

        created = await use_case.execute(
            SubmitReturnRequestRequest(
                items=[
                    MaterialRequestItemRequest(material_id=cement.id, quantity=3),
                    MaterialRequestItemRequest(material_id=sand.id, quantity=0.5),
                ],
                notes="Leftover from slab pour",
            )
        )

        assert [(r.material_name, r.quantity) for r in created] == [("Cement", 3), ("Sand", 0.5)]
        assert all(r.notes == "Leftover from slab pour" for r in created)
        assert len(use_case.to_response(created)) == 2
        async with unit_of_work.reader(TENANT) as tx:
            assert len(await tx.return_requests.list()) == 2

    async def test_unknown_line_writes_nothing(self, make_use_case, create_material, unit_of_work):
        cement = await create_material("Cement")

        with pytest.raises(MaterialNotFoundError):
            await make_use_case(SubmitReturnRequestUseCase).execute(
                SubmitReturnRequestRequest(
                    items=[
                        MaterialRequestItemRequest(material_id=cement.id, quantity=3),
                        MaterialRequestItemRequest(material_id="ghost", quantity=1),
                    ]
                )
            )

        async with unit_of_work.reader(TENANT) as tx:
            assert await tx.return_requests.list() == []

    async def test_empty_return(self, make_use_case):
        with pytest.raises(ValidationError):
            await make_use_case(SubmitReturnRequestUseCase).execute(
                SubmitReturnRequestRequest(items=[])
            )
