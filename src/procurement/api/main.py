"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from procurement import __version__
from procurement.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from procurement.api.middleware.error_handler import setup_exception_handlers
from procurement.api.routes import (
    health_router,
    lots_router,
    materials_router,
    orders_router,
    purchase_requests_router,
    suppliers_router,
    warehouse_router,
)
from procurement.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the pool on startup; closes it on shutdown.
    """
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    try:
        from procurement.infrastructure.storage.sqlite import get_pool
        from procurement.infrastructure.storage.sqlite.migrations import initialize_database

        await initialize_database()
        logger.info("database_initialized")

        await get_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    # Fail fast on a malformed policy file
    from procurement.infrastructure.auth import get_policy

    get_policy()

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from procurement.infrastructure.storage.sqlite import close_pool, reset_unit_of_work

        await close_pool()
        reset_unit_of_work()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Purchase requests, lots, orders, receiving and the stock ledger",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(purchase_requests_router)
    app.include_router(lots_router)
    app.include_router(orders_router)
    app.include_router(materials_router)
    app.include_router(warehouse_router)
    app.include_router(suppliers_router)

    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Liveness check without a database round trip."""
        return {"status": "healthy", "version": __version__}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "procurement.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
