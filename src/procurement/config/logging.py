"""
Structured logging for the procurement engine.

Every event carries the application identity. Events emitted while a use
case or an HTTP request is running also carry the tenant and actor they
act for, bound through structlog's contextvars.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from procurement.config.settings import get_settings

# Third-party loggers that only speak up on warnings
QUIET_LOGGERS = ("aiosqlite", "uvicorn.access", "httpx", "httpcore")


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp the application name, version and environment on each event."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def drop_unset_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Remove scope keys bound as None (e.g. a request without X-Actor-ID)."""
    for key in ("tenant_id", "actor_id", "operation", "request_id"):
        if key in event_dict and event_dict[key] is None:
            del event_dict[key]
    return event_dict


def _renderer(environment: str) -> list[Processor]:
    if environment == "development":
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        drop_unset_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_app_context,
    ]

    structlog.configure(
        processors=shared_processors + _renderer(settings.environment),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(request_id: str, tenant_id: str | None, actor_id: str | None) -> None:
    """Start a fresh log context for one HTTP request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        tenant_id=tenant_id,
        actor_id=actor_id,
    )


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def scope_context(tenant_id: str, actor_id: str, **extra: Any) -> Iterator[None]:
    """
    Bind tenant, actor and any extra keys for the duration of a block.

    Previously bound values are restored on exit, so nested scopes and the
    request context of the enclosing HTTP call survive.
    """
    with structlog.contextvars.bound_contextvars(tenant_id=tenant_id, actor_id=actor_id, **extra):
        yield


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
