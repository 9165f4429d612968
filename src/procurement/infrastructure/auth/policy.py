"""
YAML role policy.

Maps actors to a role and display name, and roles to capabilities:

    roles:
      warehouse:
        - stock:*
        - material_requests:approve
    actors:
      u-17:
        role: warehouse
        name: Ana Torres

A capability entry of `*` grants everything; `prefix:*` grants every
capability in that namespace.
"""

from pathlib import Path
from typing import Any

import yaml

from procurement.config import get_logger, get_settings
from procurement.core.exceptions import ConfigurationError
from procurement.core.interfaces import IAuthorizationChecker, IIdentityLookup

logger = get_logger(__name__)


class PolicyDirectory(IAuthorizationChecker, IIdentityLookup):
    """Capability checks and display names from one policy document."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._roles: dict[str, set[str]] = {}
        self._actors: dict[str, dict[str, Any]] = {}
        if data:
            self._load(data)

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "PolicyDirectory":
        """
        Load a policy file.

        A missing file yields an empty policy that denies every capability.
        """
        path = Path(path) if path else get_settings().auth.policy_file
        if not path.exists():
            logger.warning("policy_file_missing", path=str(path))
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid policy file {path}: {e}") from e

        policy = cls(data or {})
        logger.info(
            "policy_loaded",
            path=str(path),
            roles=len(policy._roles),
            actors=len(policy._actors),
        )
        return policy

    def _load(self, data: dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Policy must be a mapping with 'roles' and 'actors', got {type(data).__name__}"
            )
        roles = data.get("roles") or {}
        actors = data.get("actors") or {}
        if not isinstance(roles, dict) or not isinstance(actors, dict):
            raise ConfigurationError("Policy 'roles' and 'actors' must be mappings")

        for name, caps in roles.items():
            if isinstance(caps, str):
                caps = [caps]
            if not isinstance(caps, list | None):
                raise ConfigurationError(f"Capabilities of role '{name}' must be a list")
            self._roles[str(name)] = {str(cap) for cap in caps or []}

        for actor_id, entry in actors.items():
            if isinstance(entry, str):
                entry = {"role": entry}
            if not isinstance(entry, dict | None):
                raise ConfigurationError(f"Policy entry for actor '{actor_id}' must be a mapping")
            self._actors[str(actor_id)] = entry or {}

    def capabilities_for(self, actor_id: str) -> set[str]:
        actor = self._actors.get(actor_id)
        if not actor:
            return set()
        return self._roles.get(actor.get("role", ""), set())

    async def has_capability(self, actor_id: str, capability: str) -> bool:
        granted = self.capabilities_for(actor_id)
        if "*" in granted or capability in granted:
            return True
        namespace = capability.split(":", 1)[0]
        return f"{namespace}:*" in granted

    async def display_name(self, actor_id: str) -> str:
        actor = self._actors.get(actor_id) or {}
        return actor.get("name") or actor_id


# Global policy instance
_policy: PolicyDirectory | None = None


def get_policy() -> PolicyDirectory:
    """Get or load the global policy."""
    global _policy
    if _policy is None:
        _policy = PolicyDirectory.from_file()
    return _policy


def reset_policy() -> None:
    """Reset policy (for testing)."""
    global _policy
    _policy = None
