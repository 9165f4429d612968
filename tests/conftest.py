"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from procurement.application.dto.requests import (
    CreateMaterialRequest,
    CreatePurchaseRequestRequest,
    CreateSupplierRequest,
)
from procurement.application.use_cases import (
    CreateMaterialUseCase,
    CreatePurchaseRequestUseCase,
    CreateSupplierUseCase,
)
from procurement.config import reset_settings
from procurement.core.entities import Scope
from procurement.infrastructure.auth import PolicyDirectory, reset_policy
from procurement.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteUnitOfWork,
    reset_unit_of_work,
)
from procurement.infrastructure.storage.sqlite.migrations import initialize_database

TENANT = "tenant-a"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temp directory and keep retry backoff short."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TX_RETRY_DELAY", "0.001")
    monkeypatch.setenv("TX_RETRY_MAX_DELAY", "0.01")
    monkeypatch.setenv("AUTH_POLICY_FILE", str(tmp_path / "missing-policy.yaml"))
    reset_settings()
    reset_policy()
    reset_unit_of_work()
    yield
    reset_settings()
    reset_policy()
    reset_unit_of_work()


@pytest.fixture
async def db_path(tmp_path: Path) -> Path:
    """Temporary database migrated to the current schema."""
    path = tmp_path / "procurement.db"
    await initialize_database(path, create_backup_before=False)
    return path


@pytest.fixture
async def pool(db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(db_path, pool_size=4, busy_timeout=5000)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def unit_of_work(pool: ConnectionPool) -> SQLiteUnitOfWork:
    return SQLiteUnitOfWork(pool)


@pytest.fixture
def policy() -> PolicyDirectory:
    """Policy with one actor per role."""
    return PolicyDirectory(
        {
            "roles": {
                "admin": ["*"],
                "requester": ["purchase_requests:create", "material_requests:create"],
                "warehouse": ["stock:*", "materials:create", "material_requests:approve"],
            },
            "actors": {
                "alice": {"role": "admin", "name": "Alice Admin"},
                "rick": {"role": "requester", "name": "Rick Requester"},
                "wanda": "warehouse",
            },
        }
    )


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def scope() -> Scope:
    return Scope(tenant_id=TENANT, actor_id="alice")


@pytest.fixture
def make_use_case(unit_of_work, policy, notifier, scope):
    """Construct any use case against the temp database."""

    def factory(use_case_cls, actor_id: str | None = None, tenant_id: str | None = None, **kwargs):
        use_case_scope = Scope(
            tenant_id=tenant_id or scope.tenant_id,
            actor_id=actor_id or scope.actor_id,
        )
        return use_case_cls(
            use_case_scope,
            unit_of_work=unit_of_work,
            authorizer=policy,
            identity=policy,
            notifier=notifier,
            **kwargs,
        )

    return factory


@pytest.fixture
def create_request(make_use_case):
    """Submit a pending purchase request."""

    async def create(material_name: str = "Cement", quantity: float = 100, **overrides):
        fields = {
            "material_name": material_name,
            "quantity": quantity,
            "unit": "bag",
            "category": "aggregates",
            "justification": "Slab pour",
            "area": "Tower B",
        }
        fields.update(overrides)
        use_case = make_use_case(CreatePurchaseRequestUseCase)
        return await use_case.execute(CreatePurchaseRequestRequest(**fields))

    return create


@pytest.fixture
def create_material(make_use_case):
    """Register a material with opening stock."""

    async def create(name: str = "Cement", initial_stock: float = 0, **overrides):
        use_case = make_use_case(CreateMaterialUseCase)
        result = await use_case.execute(
            CreateMaterialRequest(name=name, unit="bag", initial_stock=initial_stock, **overrides)
        )
        return result.material

    return create


@pytest.fixture
def create_supplier(make_use_case):
    async def create(name: str = "Holcim"):
        use_case = make_use_case(CreateSupplierUseCase)
        return await use_case.execute(CreateSupplierRequest(name=name, categories=["aggregates"]))

    return create
