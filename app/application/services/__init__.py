"""Access services: role loading, resolution, labels, localization."""

from app.application.services.access_session import AccessSession
from app.application.services.label_catalog import LabelCatalog
from app.application.services.message_localizer import MessageLocalizer
from app.application.services.permission_resolver import PermissionResolver
from app.application.services.role_profile_loader import RoleProfileLoader

__all__ = [
    "AccessSession",
    "LabelCatalog",
    "MessageLocalizer",
    "PermissionResolver",
    "RoleProfileLoader",
]
