"""Caller scope passed explicitly to every use case."""

from pydantic import BaseModel, ConfigDict


class Scope(BaseModel):
    """The tenant an operation runs in and the actor performing it."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    actor_id: str
