"""Service interfaces (ports) for the application layer.

Protocols define contracts the access services depend on (DIP). The HTTP
gateway in app.infrastructure.http implements them; tests use fakes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.access import IdentityProfile
    from app.domain.entities.access import Permission


class IIdentityGateway(Protocol):
    """Fetches the current identity's role profile."""

    async def fetch_current_identity(self) -> IdentityProfile:
        """Return the role profile of the signed-in identity.

        Raises IdentityFetchException on transport errors and
        MalformedIdentityException when the payload carries no role.
        """


class ICatalogGateway(Protocol):
    """Fetches the permission catalog and the translation catalog."""

    async def fetch_permissions(self) -> list[Permission]:
        """Return every permission the backend knows (active or not)."""

    async def fetch_translations(self) -> Any:
        """Return the raw translation payload (one of the accepted wire shapes)."""


class IBackendGateway(IIdentityGateway, ICatalogGateway, Protocol):
    """Single backend adapter used by AccessSession."""

    def set_access_token(self, token: str | None) -> None:
        """Use token as bearer credential for subsequent calls (None clears it)."""


class ILabelStore(Protocol):
    """Write side of the label cache used by RoleProfileLoader."""

    def ingest_role_permissions(self, names: Mapping[str, str]) -> int:
        """Overwrite labels for the given codes; return how many were written."""
