"""Domain entities.

Pure domain models; no wire-format or transport concerns.
"""

from app.domain.entities.access import (
    Identity,
    Permission,
    PermissionSnapshot,
    RetryState,
    Role,
)

__all__ = [
    "Identity",
    "Permission",
    "PermissionSnapshot",
    "RetryState",
    "Role",
]
