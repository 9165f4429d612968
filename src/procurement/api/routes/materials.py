"""Material and stock ledger endpoints."""

from fastapi import APIRouter, Depends, status

from procurement.api.dependencies import (
    get_audit_ledger_use_case,
    get_create_material_use_case,
    get_manual_stock_entry_use_case,
    get_queries,
)
from procurement.application.dto.requests import CreateMaterialRequest, ManualStockEntryRequest
from procurement.application.dto.responses import (
    ErrorResponse,
    LedgerAuditResponse,
    MaterialListResponse,
    MovementListResponse,
    StockChangeResponse,
    UnitResponse,
)
from procurement.application.use_cases import (
    AuditLedgerUseCase,
    CreateMaterialUseCase,
    ManualStockEntryUseCase,
    ProcurementQueries,
)

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.post(
    "",
    response_model=StockChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    use_case: CreateMaterialUseCase = Depends(get_create_material_use_case),
) -> StockChangeResponse:
    """Register a material with optional opening stock."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    limit: int = 100,
    offset: int = 0,
    category: str | None = None,
    queries: ProcurementQueries = Depends(get_queries),
) -> MaterialListResponse:
    """List materials with quantity on hand."""
    return await queries.list_materials(limit=limit, offset=offset, category=category)


@router.get("/units", response_model=list[UnitResponse])
async def list_units(
    queries: ProcurementQueries = Depends(get_queries),
) -> list[UnitResponse]:
    """List units of measure seen so far."""
    return await queries.list_units()


@router.post(
    "/{material_id}/manual-entry",
    response_model=StockChangeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def manual_stock_entry(
    material_id: str,
    request: ManualStockEntryRequest,
    use_case: ManualStockEntryUseCase = Depends(get_manual_stock_entry_use_case),
) -> StockChangeResponse:
    """Apply a signed manual correction to stock."""
    result = await use_case.execute(material_id, request)
    return use_case.to_response(result)


@router.get(
    "/{material_id}/movements",
    response_model=MovementListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_movements(
    material_id: str,
    limit: int = 100,
    offset: int = 0,
    queries: ProcurementQueries = Depends(get_queries),
) -> MovementListResponse:
    """Ledger entries of a material, newest first."""
    return await queries.list_movements(material_id, limit=limit, offset=offset)


@router.get(
    "/{material_id}/audit",
    response_model=LedgerAuditResponse,
    responses={404: {"model": ErrorResponse}},
)
async def audit_ledger(
    material_id: str,
    use_case: AuditLedgerUseCase = Depends(get_audit_ledger_use_case),
) -> LedgerAuditResponse:
    """Compare a material's stock with the sum of its ledger."""
    result = await use_case.execute(material_id)
    return use_case.to_response(result)
