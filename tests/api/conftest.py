"""API test fixtures: the real app wired to a temp database."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from procurement.api.dependencies import (
    get_authorizer,
    get_connection_pool,
    get_identity,
    get_notifier,
    get_unit_of_work,
)
from procurement.api.main import app

TENANT = "tenant-a"


def headers(actor_id: str = "alice", tenant_id: str = TENANT) -> dict[str, str]:
    return {"X-Tenant-ID": tenant_id, "X-Actor-ID": actor_id}


@pytest.fixture
async def client(pool, unit_of_work, policy, notifier) -> AsyncGenerator[AsyncClient, None]:
    overrides = {
        get_unit_of_work: lambda: unit_of_work,
        get_authorizer: lambda: policy,
        get_identity: lambda: policy,
        get_notifier: lambda: notifier,
        get_connection_pool: lambda: pool,
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers()
    ) as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)
