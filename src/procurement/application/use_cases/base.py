"""
Shared plumbing for transactional use cases.

Each use case authorizes before touching storage, runs its body inside one
unit-of-work transaction retried on write conflicts, and reports the
outcome to the caller through the notification sink.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from procurement.config import get_logger, get_settings, scope_context
from procurement.core.entities import Scope
from procurement.core.exceptions import (
    ConcurrencyError,
    PermissionDeniedError,
    ProcurementError,
    TransactionConflictError,
    ValidationError,
)
from procurement.core.interfaces import (
    Capability,
    IAuthorizationChecker,
    IIdentityLookup,
    INotificationSink,
    ITransaction,
    IUnitOfWork,
    NotificationLevel,
)

logger = get_logger(__name__)

T = TypeVar("T")


def require_text(field: str, value: str | None) -> str:
    """Return the stripped value, raising ValidationError if blank."""
    if value is None or not value.strip():
        raise ValidationError(field, "must not be blank", value)
    return value.strip()


def require_positive(field: str, value: float | None) -> float:
    if value is None or value <= 0:
        raise ValidationError(field, "must be greater than 0", value)
    return value


class UseCase:
    """Base class for use cases run on behalf of one scoped actor."""

    operation: str = "operation"

    def __init__(
        self,
        scope: Scope,
        unit_of_work: IUnitOfWork | None = None,
        authorizer: IAuthorizationChecker | None = None,
        identity: IIdentityLookup | None = None,
        notifier: INotificationSink | None = None,
    ):
        self.scope = scope
        self._unit_of_work = unit_of_work
        self._authorizer = authorizer
        self._identity = identity
        self._notifier = notifier

    def _get_unit_of_work(self) -> IUnitOfWork:
        if self._unit_of_work is None:
            from procurement.infrastructure.storage.sqlite import get_unit_of_work

            self._unit_of_work = get_unit_of_work()
        return self._unit_of_work

    def _get_authorizer(self) -> IAuthorizationChecker:
        if self._authorizer is None:
            from procurement.infrastructure.auth import get_policy

            self._authorizer = get_policy()
        return self._authorizer

    def _get_identity(self) -> IIdentityLookup:
        if self._identity is None:
            from procurement.infrastructure.auth import get_policy

            self._identity = get_policy()
        return self._identity

    def _get_notifier(self) -> INotificationSink:
        if self._notifier is None:
            from procurement.infrastructure.notifications import LogNotificationSink

            self._notifier = LogNotificationSink()
        return self._notifier

    async def _authorize(self, capability: Capability) -> None:
        """Raise PermissionDeniedError unless the actor holds the capability."""
        allowed = await self._get_authorizer().has_capability(
            self.scope.actor_id, capability.value
        )
        if not allowed:
            logger.warning(
                "permission_denied",
                actor_id=self.scope.actor_id,
                capability=capability.value,
                operation=self.operation,
            )
            raise PermissionDeniedError(self.scope.actor_id, capability.value)

    async def _actor_name(self) -> str:
        return await self._get_identity().display_name(self.scope.actor_id)

    def _log_context(self):
        return scope_context(self.scope.tenant_id, self.scope.actor_id, operation=self.operation)

    async def _run_transaction(self, work: Callable[[ITransaction], Awaitable[T]]) -> T:
        """
        Run `work` in a fresh transaction, retrying on write conflicts.

        `work` must load everything it needs through the transaction it is
        given; it is re-run from scratch on every attempt. Log events emitted
        meanwhile carry the tenant, actor and operation.
        """
        with self._log_context():
            return await self._retry_transaction(work)

    async def _retry_transaction(self, work: Callable[[ITransaction], Awaitable[T]]) -> T:
        settings = get_settings().transaction
        uow = self._get_unit_of_work()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(settings.max_attempts),
            wait=wait_exponential(
                multiplier=settings.retry_delay,
                min=settings.retry_delay,
                max=settings.retry_max_delay,
            ),
            retry=retry_if_exception_type(TransactionConflictError),
            before_sleep=self._log_retry,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    async with uow.transaction(self.scope.tenant_id) as tx:
                        return await work(tx)
        except TransactionConflictError as e:
            logger.error(
                "transaction_retries_exhausted",
                operation=self.operation,
                attempts=settings.max_attempts,
                error=str(e),
            )
            error = ConcurrencyError(self.operation, settings.max_attempts)
            await self._notify(NotificationLevel.FAILURE, error.message)
            raise error from e
        except ProcurementError as e:
            await self._notify(NotificationLevel.FAILURE, e.message)
            raise

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.warning(
            "transaction_retry",
            operation=self.operation,
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _read(self, work: Callable[[ITransaction], Awaitable[T]]) -> T:
        """Run `work` against a read-only session."""
        with self._log_context():
            async with self._get_unit_of_work().reader(self.scope.tenant_id) as tx:
                return await work(tx)

    async def _notify(self, level: NotificationLevel, message: str) -> None:
        """Fire-and-forget; sink failures never reach the caller."""
        try:
            await self._get_notifier().notify(self.scope.actor_id, level, message)
        except Exception as e:
            logger.warning("notification_failed", operation=self.operation, error=str(e))
