"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    Identity,
    Permission,
    PermissionSnapshot,
    RetryState,
    Role,
)
from app.domain.enums import AccessContext, AdminMatchMode, LoaderState
from app.domain.exceptions import (
    AccessCoreException,
    AuthenticationException,
    AuthorizationException,
    CatalogFetchException,
    IdentityFetchException,
    MalformedIdentityException,
    NoActiveSessionException,
    ValidationException,
)
from app.domain.value_objects import Capability, PermissionCode

__all__ = [
    # Entities
    "Identity",
    "Permission",
    "PermissionSnapshot",
    "RetryState",
    "Role",
    # Enums
    "AccessContext",
    "AdminMatchMode",
    "LoaderState",
    # Exceptions
    "AccessCoreException",
    "AuthenticationException",
    "AuthorizationException",
    "CatalogFetchException",
    "IdentityFetchException",
    "MalformedIdentityException",
    "NoActiveSessionException",
    "ValidationException",
    # Value objects
    "Capability",
    "PermissionCode",
]
