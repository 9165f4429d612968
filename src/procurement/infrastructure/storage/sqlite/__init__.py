"""SQLite storage implementations."""

from procurement.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from procurement.infrastructure.storage.sqlite.unit_of_work import (
    SQLiteTransaction,
    SQLiteUnitOfWork,
)

# Singleton instance
_unit_of_work: SQLiteUnitOfWork | None = None


def get_unit_of_work() -> SQLiteUnitOfWork:
    """Get singleton unit of work over the global pool."""
    global _unit_of_work
    if _unit_of_work is None:
        _unit_of_work = SQLiteUnitOfWork()
    return _unit_of_work


def reset_unit_of_work() -> None:
    """Drop the singleton (for testing and shutdown)."""
    global _unit_of_work
    _unit_of_work = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Unit of work
    "SQLiteTransaction",
    "SQLiteUnitOfWork",
    "get_unit_of_work",
    "reset_unit_of_work",
]
