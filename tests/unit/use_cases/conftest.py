"""Fixtures for driving requests through the purchasing workflow."""

import pytest

from procurement.application.dto.requests import (
    AddToLotRequest,
    DecidePurchaseRequestRequest,
    GenerateQuoteRequestRequest,
    IssueOrderRequest,
    PricedItemRequest,
)
from procurement.application.use_cases import (
    AddToLotUseCase,
    DecidePurchaseRequestUseCase,
    GenerateQuoteRequestUseCase,
    IssueOrderUseCase,
)


@pytest.fixture
def approved_request(make_use_case, create_request):
    """Create and approve a purchase request."""

    async def create(material_name: str = "Cement", quantity: float = 100, **overrides):
        pr = await create_request(material_name=material_name, quantity=quantity, **overrides)
        return await make_use_case(DecidePurchaseRequestUseCase).execute(
            pr.id, DecidePurchaseRequestRequest(decision="approved")
        )

    return create


@pytest.fixture
def batched_request(make_use_case, approved_request):
    """Approved request added to a lot."""

    async def create(lot_id: str = "L1", material_name: str = "Cement", quantity: float = 100):
        pr = await approved_request(material_name=material_name, quantity=quantity)
        result = await make_use_case(AddToLotUseCase).execute(lot_id, AddToLotRequest(request_id=pr.id))
        return result.request

    return create


@pytest.fixture
def quote(make_use_case, create_supplier):
    """Generate a quote request for the given batched requests."""

    async def create(requests, supplier=None):
        supplier = supplier or await create_supplier()
        return await make_use_case(GenerateQuoteRequestUseCase).execute(
            GenerateQuoteRequestRequest(
                request_ids=[pr.id for pr in requests], supplier_id=supplier.id
            )
        )

    return create


@pytest.fixture
def issue_order(make_use_case):
    """Issue the binding order of a lot from (name, quantity, price) lines."""

    async def issue(lot_id: str, lines, number: str = "OC-001"):
        return await make_use_case(IssueOrderUseCase).execute(
            IssueOrderRequest(
                lot_id=lot_id,
                official_order_number=number,
                items=[
                    PricedItemRequest(material_name=name, quantity=qty, unit_price=price)
                    for name, qty, price in lines
                ],
            )
        )

    return issue
