"""Quote request and purchase order endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import (
    get_cancel_order_use_case,
    get_generate_quote_request_use_case,
    get_issue_order_use_case,
    get_queries,
)
from procurement.application.dto.requests import GenerateQuoteRequestRequest, IssueOrderRequest
from procurement.application.dto.responses import (
    CancelOrderResponse,
    ErrorResponse,
    OrderListResponse,
    PurchaseOrderResponse,
)
from procurement.application.use_cases import (
    CancelOrderUseCase,
    GenerateQuoteRequestUseCase,
    IssueOrderUseCase,
    ProcurementQueries,
)

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post(
    "/quote",
    response_model=PurchaseOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def generate_quote_request(
    request: GenerateQuoteRequestRequest,
    use_case: GenerateQuoteRequestUseCase = Depends(get_generate_quote_request_use_case),
) -> PurchaseOrderResponse:
    """Ask a supplier to quote the batched requests of one lot."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.post(
    "/issue",
    response_model=PurchaseOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def issue_order(
    request: IssueOrderRequest,
    use_case: IssueOrderUseCase = Depends(get_issue_order_use_case),
) -> PurchaseOrderResponse:
    """Issue the binding purchase order for a lot."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    lot_id: str | None = None,
    status: str | None = None,
    queries: ProcurementQueries = Depends(get_queries),
) -> OrderListResponse:
    """List orders, optionally by lot and status."""
    return await queries.list_orders(lot_id=lot_id, status=status)


@router.delete(
    "/{order_id}",
    response_model=CancelOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_order(
    order_id: str,
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
) -> CancelOrderResponse:
    """Cancel an order and return its requests to the lot."""
    result = await use_case.execute(order_id)
    return use_case.to_response(result)
