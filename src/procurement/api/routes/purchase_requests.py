"""Purchase request endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import (
    get_create_purchase_request_use_case,
    get_decide_purchase_request_use_case,
    get_delete_purchase_request_use_case,
    get_queries,
    get_receive_purchase_request_use_case,
)
from procurement.application.dto.requests import (
    CreatePurchaseRequestRequest,
    DecidePurchaseRequestRequest,
    ReceivePurchaseRequestRequest,
)
from procurement.application.dto.responses import (
    DeletedResponse,
    ErrorResponse,
    PurchaseRequestListResponse,
    PurchaseRequestResponse,
    ReceiveResponse,
)
from procurement.application.use_cases import (
    CreatePurchaseRequestUseCase,
    DecidePurchaseRequestUseCase,
    DeletePurchaseRequestUseCase,
    ProcurementQueries,
    ReceivePurchaseRequestUseCase,
)

router = APIRouter(prefix="/api/purchase-requests", tags=["purchase-requests"])


@router.post(
    "",
    response_model=PurchaseRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_purchase_request(
    request: CreatePurchaseRequestRequest,
    use_case: CreatePurchaseRequestUseCase = Depends(get_create_purchase_request_use_case),
) -> PurchaseRequestResponse:
    """Submit a pending purchase request."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=PurchaseRequestListResponse)
async def list_purchase_requests(
    status: str | None = None,
    limit: int = 100,
    offset: int = 0,
    queries: ProcurementQueries = Depends(get_queries),
) -> PurchaseRequestListResponse:
    """List purchase requests, newest first, optionally by status."""
    return await queries.list_purchase_requests(status=status, limit=limit, offset=offset)


@router.get(
    "/{request_id}",
    response_model=PurchaseRequestResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase_request(
    request_id: str,
    queries: ProcurementQueries = Depends(get_queries),
) -> PurchaseRequestResponse:
    """Get one purchase request."""
    return await queries.get_purchase_request(request_id)


@router.post(
    "/{request_id}/decision",
    response_model=PurchaseRequestResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def decide_purchase_request(
    request_id: str,
    request: DecidePurchaseRequestRequest,
    use_case: DecidePurchaseRequestUseCase = Depends(get_decide_purchase_request_use_case),
) -> PurchaseRequestResponse:
    """Approve or reject a pending request, optionally editing it first."""
    result = await use_case.execute(request_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{request_id}",
    response_model=DeletedResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_purchase_request(
    request_id: str,
    use_case: DeletePurchaseRequestUseCase = Depends(get_delete_purchase_request_use_case),
) -> DeletedResponse:
    """Hard-delete a request that has not been received."""
    result = await use_case.execute(request_id)
    return use_case.to_response(result)


@router.post(
    "/{request_id}/receive",
    response_model=ReceiveResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def receive_purchase_request(
    request_id: str,
    request: ReceivePurchaseRequestRequest,
    use_case: ReceivePurchaseRequestUseCase = Depends(get_receive_purchase_request_use_case),
) -> ReceiveResponse:
    """Record a goods receipt, splitting the request on partial delivery."""
    result = await use_case.execute(request_id, request)
    return use_case.to_response(result)
