"""API route modules."""

from procurement.api.routes.health import router as health_router
from procurement.api.routes.lots import router as lots_router
from procurement.api.routes.materials import router as materials_router
from procurement.api.routes.orders import router as orders_router
from procurement.api.routes.purchase_requests import router as purchase_requests_router
from procurement.api.routes.suppliers import router as suppliers_router
from procurement.api.routes.warehouse import router as warehouse_router

__all__ = [
    "health_router",
    "purchase_requests_router",
    "lots_router",
    "orders_router",
    "materials_router",
    "warehouse_router",
    "suppliers_router",
]
