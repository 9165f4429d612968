"""Authorization and identity adapters."""

from procurement.infrastructure.auth.policy import PolicyDirectory, get_policy, reset_policy

__all__ = ["PolicyDirectory", "get_policy", "reset_policy"]
