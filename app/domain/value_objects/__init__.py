"""Domain value objects and shared value types."""

from app.domain.value_objects.core import KNOWN_ACTIONS, Capability, PermissionCode

__all__ = [
    "KNOWN_ACTIONS",
    "Capability",
    "PermissionCode",
]
