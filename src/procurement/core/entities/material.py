"""
Material domain entities.

Represents warehouse materials with their quantity on hand, plus the
reference data (units of measure, suppliers) that purchasing relies on.
"""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field


def new_id() -> str:
    """Generate a new UUID text ID."""
    return str(uuid.uuid4())


class Material(BaseModel):
    """
    A stocked material.

    `stock` is only ever written together with a ledger entry; `version`
    increments on every stock write and backs the optimistic check.
    """

    id: str = Field(default_factory=new_id)
    tenant_id: str
    name: str
    unit: str = ""
    category: str = ""
    stock: float = Field(default=0.0, ge=0)
    preferred_supplier_id: str | None = None
    archived: bool = False
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Unit(BaseModel):
    """A unit of measure known to a tenant."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    name: str


class Supplier(BaseModel):
    """A supplier that lots are quoted and ordered from."""

    id: str = Field(default_factory=new_id)
    tenant_id: str
    name: str
    categories: list[str] = Field(default_factory=list)
    tax_id: str | None = None
    email: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
