"""Shared helpers for tenant-scoped SQLite repositories."""

import json
from datetime import UTC, datetime
from typing import Any

import aiosqlite


class SQLiteRepository:
    """Base for repositories bound to one connection and one tenant."""

    def __init__(self, conn: aiosqlite.Connection, tenant_id: str):
        self.conn = conn
        self.tenant_id = tenant_id

    async def _fetch_one(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchone()

    async def _fetch_all(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        cursor = await self.conn.execute(sql, params)
        return list(await cursor.fetchall())


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def from_iso(value: str | None) -> datetime | None:
    """Parse a stored timestamp, treating naive values as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def from_iso_or_now(value: str | None) -> datetime:
    return from_iso(value) or datetime.now(UTC)


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def load_json(value: str | None, default: Any) -> Any:
    if not value:
        return default
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return default
