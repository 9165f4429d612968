"""Materials and direct stock changes: creation, manual entries, ledger audit."""

from dataclasses import dataclass

from procurement.application.dto.requests import CreateMaterialRequest, ManualStockEntryRequest
from procurement.application.dto.responses import (
    LedgerAuditResponse,
    MaterialResponse,
    StockChangeResponse,
    StockMovementResponse,
)
from procurement.application.use_cases.base import UseCase, require_text
from procurement.config import get_logger
from procurement.core.entities import LedgerAudit, Material, MovementType, StockMovement
from procurement.core.exceptions import (
    MaterialNotFoundError,
    SupplierNotFoundError,
    ValidationError,
)
from procurement.core.interfaces import Capability, ITransaction, NotificationLevel
from procurement.core.services import StockLedgerService

logger = get_logger(__name__)


async def load_material(tx: ITransaction, material_id: str) -> Material:
    material = await tx.materials.get(material_id)
    if material is None:
        raise MaterialNotFoundError(material_id)
    return material


@dataclass
class StockChangeResult:
    """Material after a change, with the ledger entry that recorded it."""

    material: Material
    movement: StockMovement | None = None

    def to_response(self) -> StockChangeResponse:
        return StockChangeResponse(
            material=MaterialResponse.model_validate(self.material),
            movement=(
                StockMovementResponse.model_validate(self.movement) if self.movement else None
            ),
        )


class CreateMaterialUseCase(UseCase):
    """Register a material, posting an `initial` entry for any opening stock."""

    operation = "create_material"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(self, request: CreateMaterialRequest) -> StockChangeResult:
        await self._authorize(Capability.MATERIALS_CREATE)

        name = require_text("name", request.name)
        if request.initial_stock < 0:
            raise ValidationError("initial_stock", "must not be negative", request.initial_stock)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> StockChangeResult:
            if await tx.materials.find_by_name(name) is not None:
                raise ValidationError("name", "a material with this name already exists", name)
            if request.preferred_supplier_id:
                if await tx.suppliers.get(request.preferred_supplier_id) is None:
                    raise SupplierNotFoundError(request.preferred_supplier_id)
            if request.unit.strip():
                await tx.units.ensure(request.unit.strip())

            material = await tx.materials.add(
                Material(
                    tenant_id=self.scope.tenant_id,
                    name=name,
                    unit=request.unit.strip(),
                    category=request.category.strip(),
                    preferred_supplier_id=request.preferred_supplier_id,
                )
            )
            movement = None
            if request.initial_stock > 0:
                movement = await self._ledger.post_movement(
                    tx,
                    material,
                    request.initial_stock,
                    MovementType.INITIAL,
                    justification="Initial stock",
                    actor_id=self.scope.actor_id,
                    actor_name=actor_name,
                )
            return StockChangeResult(material=material, movement=movement)

        result = await self._run_transaction(work)
        await self._notify(NotificationLevel.SUCCESS, f"Material {name} created")
        return result

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        return result.to_response()


class ManualStockEntryUseCase(UseCase):
    """Signed manual stock correction with a mandatory justification."""

    operation = "manual_stock_entry"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(
        self, material_id: str, request: ManualStockEntryRequest
    ) -> StockChangeResult:
        await self._authorize(Capability.STOCK_ADD_MANUAL)

        if request.quantity_change == 0:
            raise ValidationError("quantity_change", "must be non-zero", request.quantity_change)
        justification = require_text("justification", request.justification)
        actor_name = await self._actor_name()

        async def work(tx: ITransaction) -> StockChangeResult:
            material = await load_material(tx, material_id)
            movement = await self._ledger.post_movement(
                tx,
                material,
                request.quantity_change,
                MovementType.MANUAL_ENTRY,
                justification=justification,
                actor_id=self.scope.actor_id,
                actor_name=actor_name,
            )
            return StockChangeResult(material=material, movement=movement)

        result = await self._run_transaction(work)
        await self._notify(
            NotificationLevel.SUCCESS,
            f"Stock of {result.material.name} adjusted by {request.quantity_change:+g}",
        )
        return result

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        return result.to_response()


class AuditLedgerUseCase(UseCase):
    """Recompute a material's ledger sum and compare it with stock."""

    operation = "audit_ledger"

    def __init__(self, *args, ledger: StockLedgerService | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._ledger = ledger or StockLedgerService()

    async def execute(self, material_id: str) -> LedgerAudit:
        async def work(tx: ITransaction) -> LedgerAudit:
            material = await load_material(tx, material_id)
            return await self._ledger.audit(tx, material)

        return await self._read(work)

    def to_response(self, result: LedgerAudit) -> LedgerAuditResponse:
        return LedgerAuditResponse.model_validate(result)
