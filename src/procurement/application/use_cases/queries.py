"""Read models over the tenant's purchasing and warehouse data."""

from enum import Enum
from typing import TypeVar

from procurement.application.dto.responses import (
    LotListResponse,
    LotResponse,
    MaterialListResponse,
    MaterialRequestResponse,
    MaterialResponse,
    MovementListResponse,
    OrderListResponse,
    PurchaseOrderResponse,
    PurchaseRequestListResponse,
    PurchaseRequestResponse,
    ReturnRequestResponse,
    StockMovementResponse,
    SupplierListResponse,
    SupplierResponse,
    UnitResponse,
)
from procurement.application.use_cases.base import UseCase
from procurement.application.use_cases.purchase_requests import load_request
from procurement.application.use_cases.stock_movements import load_material
from procurement.core.entities import (
    LotStatus,
    MaterialRequestStatus,
    OrderStatus,
    PurchaseRequestStatus,
    ReturnRequestStatus,
)
from procurement.core.exceptions import ValidationError
from procurement.core.interfaces import ITransaction

E = TypeVar("E", bound=Enum)


def parse_status(enum_type: type[E], value: str | None) -> E | None:
    """Parse an optional status filter, raising ValidationError on unknown values."""
    if value is None or value == "":
        return None
    try:
        return enum_type(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValidationError("status", f"must be one of: {allowed}", value) from e


class ProcurementQueries(UseCase):
    """Read-only lookups; no capability required."""

    operation = "query"

    async def get_purchase_request(self, request_id: str) -> PurchaseRequestResponse:
        async def work(tx: ITransaction) -> PurchaseRequestResponse:
            return PurchaseRequestResponse.model_validate(await load_request(tx, request_id))

        return await self._read(work)

    async def list_purchase_requests(
        self, status: str | None = None, limit: int = 100, offset: int = 0
    ) -> PurchaseRequestListResponse:
        status_filter = parse_status(PurchaseRequestStatus, status)

        async def work(tx: ITransaction) -> PurchaseRequestListResponse:
            requests = await tx.purchase_requests.list(status=status_filter, limit=limit, offset=offset)
            return PurchaseRequestListResponse(
                requests=[PurchaseRequestResponse.model_validate(r) for r in requests],
                total=len(requests),
            )

        return await self._read(work)

    async def list_lots(self, status: str | None = None) -> LotListResponse:
        status_filter = parse_status(LotStatus, status)

        async def work(tx: ITransaction) -> LotListResponse:
            lots = []
            for lot in await tx.lots.list(status=status_filter):
                members = await tx.purchase_requests.list_by_lot(lot.id)
                lots.append(
                    LotResponse.model_validate(lot).model_copy(
                        update={
                            "requests": [PurchaseRequestResponse.model_validate(m) for m in members]
                        }
                    )
                )
            return LotListResponse(lots=lots, total=len(lots))

        return await self._read(work)

    async def list_orders(
        self, lot_id: str | None = None, status: str | None = None
    ) -> OrderListResponse:
        status_filter = parse_status(OrderStatus, status)

        async def work(tx: ITransaction) -> OrderListResponse:
            orders = await tx.orders.list(lot_id=lot_id, status=status_filter)
            return OrderListResponse(
                orders=[PurchaseOrderResponse.model_validate(o) for o in orders],
                total=len(orders),
            )

        return await self._read(work)

    async def list_materials(
        self, limit: int = 100, offset: int = 0, category: str | None = None
    ) -> MaterialListResponse:
        async def work(tx: ITransaction) -> MaterialListResponse:
            materials = await tx.materials.list(limit=limit, offset=offset, category=category)
            return MaterialListResponse(
                materials=[MaterialResponse.model_validate(m) for m in materials],
                total=len(materials),
            )

        return await self._read(work)

    async def list_movements(
        self, material_id: str, limit: int = 100, offset: int = 0
    ) -> MovementListResponse:
        async def work(tx: ITransaction) -> MovementListResponse:
            material = await load_material(tx, material_id)
            movements = await tx.ledger.list_for_material(material.id, limit=limit, offset=offset)
            return MovementListResponse(
                material_id=material.id,
                movements=[StockMovementResponse.model_validate(m) for m in movements],
                total=len(movements),
            )

        return await self._read(work)

    async def list_suppliers(self, limit: int = 100, offset: int = 0) -> SupplierListResponse:
        async def work(tx: ITransaction) -> SupplierListResponse:
            suppliers = await tx.suppliers.list(limit=limit, offset=offset)
            return SupplierListResponse(
                suppliers=[SupplierResponse.model_validate(s) for s in suppliers],
                total=len(suppliers),
            )

        return await self._read(work)

    async def list_material_requests(
        self, status: str | None = None, limit: int = 100
    ) -> list[MaterialRequestResponse]:
        status_filter = parse_status(MaterialRequestStatus, status)

        async def work(tx: ITransaction) -> list[MaterialRequestResponse]:
            requests = await tx.material_requests.list(status=status_filter, limit=limit)
            return [MaterialRequestResponse.model_validate(r) for r in requests]

        return await self._read(work)

    async def list_return_requests(
        self, status: str | None = None, limit: int = 100
    ) -> list[ReturnRequestResponse]:
        status_filter = parse_status(ReturnRequestStatus, status)

        async def work(tx: ITransaction) -> list[ReturnRequestResponse]:
            requests = await tx.return_requests.list(status=status_filter, limit=limit)
            return [ReturnRequestResponse.model_validate(r) for r in requests]

        return await self._read(work)

    async def list_units(self) -> list[UnitResponse]:
        async def work(tx: ITransaction) -> list[UnitResponse]:
            return [UnitResponse.model_validate(u) for u in await tx.units.list()]

        return await self._read(work)
