"""Material request and return request endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import (
    get_approve_material_request_use_case,
    get_complete_return_request_use_case,
    get_queries,
    get_reject_material_request_use_case,
    get_reject_return_request_use_case,
    get_submit_material_request_use_case,
    get_submit_return_request_use_case,
)
from procurement.application.dto.requests import (
    RejectRequest,
    SubmitMaterialRequestRequest,
    SubmitReturnRequestRequest,
)
from procurement.application.dto.responses import (
    ErrorResponse,
    MaterialRequestDecisionResponse,
    MaterialRequestResponse,
    ReturnRequestDecisionResponse,
    ReturnRequestResponse,
)
from procurement.application.use_cases import (
    ApproveMaterialRequestUseCase,
    CompleteReturnRequestUseCase,
    ProcurementQueries,
    RejectMaterialRequestUseCase,
    RejectReturnRequestUseCase,
    SubmitMaterialRequestUseCase,
    SubmitReturnRequestUseCase,
)

router = APIRouter(prefix="/api", tags=["warehouse"])

_DECISION_ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# --- Material requests ---


@router.post(
    "/material-requests",
    response_model=MaterialRequestResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def submit_material_request(
    request: SubmitMaterialRequestRequest,
    use_case: SubmitMaterialRequestUseCase = Depends(get_submit_material_request_use_case),
) -> MaterialRequestResponse:
    """Request stocked material for an area."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/material-requests", response_model=list[MaterialRequestResponse])
async def list_material_requests(
    status: str | None = None,
    limit: int = 100,
    queries: ProcurementQueries = Depends(get_queries),
) -> list[MaterialRequestResponse]:
    """List material requests, newest first."""
    return await queries.list_material_requests(status=status, limit=limit)


@router.post(
    "/material-requests/{request_id}/approve",
    response_model=MaterialRequestDecisionResponse,
    responses=_DECISION_ERRORS,
)
async def approve_material_request(
    request_id: str,
    use_case: ApproveMaterialRequestUseCase = Depends(get_approve_material_request_use_case),
) -> MaterialRequestDecisionResponse:
    """Approve a material request and take its lines out of stock."""
    result = await use_case.execute(request_id)
    return use_case.to_response(result)


@router.post(
    "/material-requests/{request_id}/reject",
    response_model=MaterialRequestDecisionResponse,
    responses=_DECISION_ERRORS,
)
async def reject_material_request(
    request_id: str,
    request: RejectRequest | None = None,
    use_case: RejectMaterialRequestUseCase = Depends(get_reject_material_request_use_case),
) -> MaterialRequestDecisionResponse:
    """Reject a pending material request."""
    result = await use_case.execute(request_id, request)
    return use_case.to_response(result)


# --- Return requests ---


@router.post(
    "/return-requests",
    response_model=list[ReturnRequestResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def submit_return_request(
    request: SubmitReturnRequestRequest,
    use_case: SubmitReturnRequestUseCase = Depends(get_submit_return_request_use_case),
) -> list[ReturnRequestResponse]:
    """Submit excess material for return to stock, one request per line."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("/return-requests", response_model=list[ReturnRequestResponse])
async def list_return_requests(
    status: str | None = None,
    limit: int = 100,
    queries: ProcurementQueries = Depends(get_queries),
) -> list[ReturnRequestResponse]:
    """List return requests, newest first."""
    return await queries.list_return_requests(status=status, limit=limit)


@router.post(
    "/return-requests/{request_id}/complete",
    response_model=ReturnRequestDecisionResponse,
    responses=_DECISION_ERRORS,
)
async def complete_return_request(
    request_id: str,
    use_case: CompleteReturnRequestUseCase = Depends(get_complete_return_request_use_case),
) -> ReturnRequestDecisionResponse:
    """Put returned material back into stock."""
    result = await use_case.execute(request_id)
    return use_case.to_response(result)


@router.post(
    "/return-requests/{request_id}/reject",
    response_model=ReturnRequestDecisionResponse,
    responses=_DECISION_ERRORS,
)
async def reject_return_request(
    request_id: str,
    request: RejectRequest | None = None,
    use_case: RejectReturnRequestUseCase = Depends(get_reject_return_request_use_case),
) -> ReturnRequestDecisionResponse:
    """Reject a pending return."""
    result = await use_case.execute(request_id, request)
    return use_case.to_response(result)
