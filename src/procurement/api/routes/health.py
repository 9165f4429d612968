"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Depends

from procurement import __version__
from procurement.api.dependencies import get_connection_pool
from procurement.application.dto.responses import ComponentHealthResponse, HealthResponse
from procurement.infrastructure.storage.sqlite import ConnectionPool

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(
    pool: ConnectionPool = Depends(get_connection_pool),
) -> HealthResponse:
    """
    Service and database health.

    Tests SQLite connectivity and response time.
    """
    try:
        start = time.time()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ComponentHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.time() - start) * 1000,
        )

    except Exception as e:
        db_status = ComponentHealthResponse(
            name="sqlite",
            available=False,
            error=str(e),
        )

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
