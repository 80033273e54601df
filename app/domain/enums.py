"""Domain enumerations for the access core.

Enums represent fixed sets of domain values (access context, loader state).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class AccessContext(_ValuesMixin, str, Enum):
    """Context a capability is checked in.

    PAGE gates navigation and allows VIEW/READ fallback; ACTION gates
    mutating operations and requires an exact match.
    """

    PAGE = "page"
    ACTION = "action"


class LoaderState(_ValuesMixin, str, Enum):
    """RoleProfileLoader lifecycle state.

    DEGRADED is terminal until the identity changes.
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    DEGRADED = "degraded"


class AdminMatchMode(_ValuesMixin, str, Enum):
    """How an admin role is recognised for the resolver's bypass."""

    SUBSTRING = "substring"
    ALLOWLIST = "allowlist"
