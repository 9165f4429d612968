"""Purchase lot endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import (
    get_add_to_lot_use_case,
    get_create_lot_use_case,
    get_delete_lot_use_case,
    get_queries,
    get_remove_from_lot_use_case,
)
from procurement.application.dto.requests import AddToLotRequest, CreateLotRequest
from procurement.application.dto.responses import (
    DeleteLotResponse,
    ErrorResponse,
    LotListResponse,
    LotResponse,
    PurchaseRequestResponse,
)
from procurement.application.use_cases import (
    AddToLotUseCase,
    CreateLotUseCase,
    DeleteLotUseCase,
    ProcurementQueries,
    RemoveFromLotUseCase,
)

router = APIRouter(prefix="/api/lots", tags=["lots"])


@router.post(
    "",
    response_model=LotResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_lot(
    request: CreateLotRequest,
    use_case: CreateLotUseCase = Depends(get_create_lot_use_case),
) -> LotResponse:
    """Create an empty open lot."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=LotListResponse)
async def list_lots(
    status: str | None = None,
    queries: ProcurementQueries = Depends(get_queries),
) -> LotListResponse:
    """List lots with their member requests."""
    return await queries.list_lots(status=status)


@router.post(
    "/{lot_id}/requests",
    response_model=PurchaseRequestResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_to_lot(
    lot_id: str,
    request: AddToLotRequest,
    use_case: AddToLotUseCase = Depends(get_add_to_lot_use_case),
) -> PurchaseRequestResponse:
    """Batch an approved request into a lot, creating the lot if needed."""
    result = await use_case.execute(lot_id, request)
    return use_case.to_response(result)


@router.delete(
    "/requests/{request_id}",
    response_model=PurchaseRequestResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def remove_from_lot(
    request_id: str,
    use_case: RemoveFromLotUseCase = Depends(get_remove_from_lot_use_case),
) -> PurchaseRequestResponse:
    """Take a batched request out of its lot."""
    result = await use_case.execute(request_id)
    return use_case.to_response(result)


@router.delete(
    "/{lot_id}",
    response_model=DeleteLotResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_lot(
    lot_id: str,
    use_case: DeleteLotUseCase = Depends(get_delete_lot_use_case),
) -> DeleteLotResponse:
    """Delete a lot without an issued order, releasing its requests."""
    result = await use_case.execute(lot_id)
    return use_case.to_response(result)
