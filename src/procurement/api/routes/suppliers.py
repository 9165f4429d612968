"""Supplier endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import get_create_supplier_use_case, get_queries
from procurement.application.dto.requests import CreateSupplierRequest
from procurement.application.dto.responses import (
    ErrorResponse,
    SupplierListResponse,
    SupplierResponse,
)
from procurement.application.use_cases import CreateSupplierUseCase, ProcurementQueries

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_supplier(
    request: CreateSupplierRequest,
    use_case: CreateSupplierUseCase = Depends(get_create_supplier_use_case),
) -> SupplierResponse:
    """Register a supplier."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    limit: int = 100,
    offset: int = 0,
    queries: ProcurementQueries = Depends(get_queries),
) -> SupplierListResponse:
    """List suppliers."""
    return await queries.list_suppliers(limit=limit, offset=offset)
