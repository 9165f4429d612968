"""
Interfaces for collaborators the engine consumes but does not own.

Authorization, identity and notifications live outside the core and are
injected into every use case.
"""

from abc import ABC, abstractmethod
from enum import Enum


class Capability(str, Enum):
    """Capabilities checked before mutating operations."""

    PURCHASE_REQUESTS_CREATE = "purchase_requests:create"
    PURCHASE_REQUESTS_APPROVE = "purchase_requests:approve"
    PURCHASE_REQUESTS_DELETE = "purchase_requests:delete"
    LOTS_CREATE = "lots:create"
    LOTS_ASSIGN = "lots:assign"
    LOTS_DELETE = "lots:delete"
    ORDERS_CREATE = "orders:create"
    ORDERS_CANCEL = "orders:cancel"
    STOCK_RECEIVE_ORDER = "stock:receive_order"
    STOCK_ADD_MANUAL = "stock:add_manual"
    MATERIALS_CREATE = "materials:create"
    MATERIAL_REQUESTS_CREATE = "material_requests:create"
    MATERIAL_REQUESTS_APPROVE = "material_requests:approve"
    RETURN_REQUESTS_CREATE = "return_requests:create"
    RETURN_REQUESTS_APPROVE = "return_requests:approve"
    SUPPLIERS_CREATE = "suppliers:create"


class IAuthorizationChecker(ABC):
    """Boolean capability check."""

    @abstractmethod
    async def has_capability(self, actor_id: str, capability: str) -> bool:
        """Return True if the actor may exercise the capability."""


class IIdentityLookup(ABC):
    """Resolves actor IDs to display names for audit fields."""

    @abstractmethod
    async def display_name(self, actor_id: str) -> str:
        """Return a display name, falling back to the ID itself."""


class NotificationLevel(str, Enum):
    """Severity of a caller notification."""

    SUCCESS = "success"
    FAILURE = "failure"


class INotificationSink(ABC):
    """Fire-and-forget messages to the caller."""

    @abstractmethod
    async def notify(self, actor_id: str, level: NotificationLevel, message: str) -> None:
        """Deliver a message. Not part of any transactional guarantee."""
