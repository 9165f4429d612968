"""Tests for shared use case plumbing: authorization, retries, notification."""

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
import structlog

from procurement.application.dto.requests import CreateLotRequest
from procurement.application.use_cases import CreateLotUseCase, RemoveFromLotUseCase
from procurement.application.use_cases.base import UseCase, require_positive, require_text
from procurement.core.entities import Scope
from procurement.core.exceptions import (
    ConcurrencyError,
    PermissionDeniedError,
    PurchaseRequestNotFoundError,
    TransactionConflictError,
    ValidationError,
)
from procurement.core.interfaces import NotificationLevel


class ConflictingUnitOfWork:
    """Unit of work whose every transaction loses the write lock."""

    def __init__(self):
        self.attempts = 0

    @asynccontextmanager
    async def transaction(self, tenant_id):
        self.attempts += 1
        raise TransactionConflictError("database is locked")
        yield


class FlakyUnitOfWork:
    """Conflicts a fixed number of times, then delegates."""

    def __init__(self, inner, failures: int):
        self.inner = inner
        self.failures = failures
        self.attempts = 0

    @asynccontextmanager
    async def transaction(self, tenant_id):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise TransactionConflictError("stale version")
        async with self.inner.transaction(tenant_id) as tx:
            yield tx


class TestValidators:
    def test_require_text_strips(self):
        assert require_text("name", "  Lot 1 ") == "Lot 1"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_require_text_rejects_blank(self, value):
        with pytest.raises(ValidationError):
            require_text("name", value)

    @pytest.mark.parametrize("value", [None, 0, -3])
    def test_require_positive(self, value):
        with pytest.raises(ValidationError):
            require_positive("quantity", value)


class TestAuthorization:
    async def test_denied_before_any_transaction(self, policy, notifier):
        uow = MagicMock()
        use_case = CreateLotUseCase(
            Scope(tenant_id="tenant-a", actor_id="rick"),
            unit_of_work=uow,
            authorizer=policy,
            identity=policy,
            notifier=notifier,
        )

        with pytest.raises(PermissionDeniedError) as exc_info:
            await use_case.execute(CreateLotRequest(name="Week 14"))

        assert exc_info.value.details["capability"] == "lots:create"
        uow.transaction.assert_not_called()
        uow.reader.assert_not_called()

    async def test_unknown_actor_denied(self, make_use_case):
        use_case = make_use_case(CreateLotUseCase, actor_id="mallory")
        with pytest.raises(PermissionDeniedError):
            await use_case.execute(CreateLotRequest(name="Week 14"))


class TestTransactionRetry:
    async def test_exhausted_retries_raise_concurrency_error(self, policy, notifier):
        uow = ConflictingUnitOfWork()
        use_case = CreateLotUseCase(
            Scope(tenant_id="tenant-a", actor_id="alice"),
            unit_of_work=uow,
            authorizer=policy,
            identity=policy,
            notifier=notifier,
        )

        with pytest.raises(ConcurrencyError) as exc_info:
            await use_case.execute(CreateLotRequest(name="Week 14"))

        assert uow.attempts == 5
        assert exc_info.value.details["attempts"] == 5
        assert isinstance(exc_info.value.__cause__, TransactionConflictError)
        notifier.notify.assert_awaited_once()
        assert notifier.notify.await_args.args[1] == NotificationLevel.FAILURE

    async def test_conflict_then_success(self, unit_of_work, policy, notifier):
        uow = FlakyUnitOfWork(unit_of_work, failures=2)
        use_case = CreateLotUseCase(
            Scope(tenant_id="tenant-a", actor_id="alice"),
            unit_of_work=uow,
            authorizer=policy,
            identity=policy,
            notifier=notifier,
        )

        lot = await use_case.execute(CreateLotRequest(name="Week 14"))

        assert uow.attempts == 3
        async with unit_of_work.reader("tenant-a") as tx:
            assert [lt.id for lt in await tx.lots.list()] == [lot.id]


class TestNotifications:
    async def test_success_notifies_actor(self, make_use_case, notifier):
        await make_use_case(CreateLotUseCase).execute(CreateLotRequest(name="Week 14"))

        notifier.notify.assert_awaited_once_with(
            "alice", NotificationLevel.SUCCESS, "Lot 'Week 14' created"
        )

    async def test_sink_failure_is_swallowed(self, make_use_case, notifier):
        notifier.notify.side_effect = RuntimeError("sink down")

        lot = await make_use_case(CreateLotUseCase).execute(CreateLotRequest(name="Week 14"))

        assert lot.name == "Week 14"

    async def test_domain_failure_notified(self, make_use_case, notifier):
        with pytest.raises(PurchaseRequestNotFoundError):
            await make_use_case(RemoveFromLotUseCase).execute("missing")

        level = notifier.notify.await_args.args[1]
        assert level == NotificationLevel.FAILURE


class TestDefaultCollaborators:
    def test_falls_back_to_global_adapters(self):
        use_case = UseCase(Scope(tenant_id="tenant-a", actor_id="alice"))

        from procurement.infrastructure.auth import get_policy
        from procurement.infrastructure.notifications import LogNotificationSink

        assert use_case._get_authorizer() is get_policy()
        assert isinstance(use_case._get_notifier(), LogNotificationSink)


class TestLogContext:
    async def test_scope_bound_while_work_runs(self, make_use_case):
        structlog.contextvars.clear_contextvars()
        use_case = make_use_case(CreateLotUseCase, actor_id="wanda", tenant_id="tenant-b")
        seen = {}

        async def work(tx):
            seen.update(structlog.contextvars.get_contextvars())

        await use_case._run_transaction(work)

        assert seen == {"tenant_id": "tenant-b", "actor_id": "wanda", "operation": "create_lot"}
        assert structlog.contextvars.get_contextvars() == {}

    async def test_reads_bound_and_request_context_kept(self, make_use_case):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="req-1", actor_id=None)
        seen = {}

        async def work(tx):
            seen.update(structlog.contextvars.get_contextvars())

        await make_use_case(CreateLotUseCase)._read(work)

        assert seen["request_id"] == "req-1"
        assert seen["actor_id"] == "alice"
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1", "actor_id": None}
        structlog.contextvars.clear_contextvars()
