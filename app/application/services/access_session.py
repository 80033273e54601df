"""Access session: composition of the authorization core for one signed-in user.

Owns the LabelCatalog, RoleProfileLoader, PermissionResolver and
MessageLocalizer, and is the only object the UI talks to. Created once by the
composition root; sign_out() clears all session state explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from app.application.dtos.access import Resolution, SessionView
from app.application.interfaces.services import IBackendGateway
from app.application.services.label_catalog import LabelCatalog
from app.application.services.message_localizer import MessageLocalizer
from app.application.services.permission_resolver import (
    DEFAULT_ADMIN_ROLE_CODES,
    PermissionResolver,
)
from app.application.services.role_profile_loader import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    RoleProfileLoader,
)
from app.domain.entities.access import Identity, Permission, PermissionSnapshot
from app.domain.enums import AccessContext, AdminMatchMode
from app.domain.exceptions import AuthorizationException, NoActiveSessionException

logger = logging.getLogger(__name__)


class AccessSession:
    """Entry point for UI gating (resolve), labels (display_name) and messages (localize)."""

    def __init__(
        self,
        gateway: IBackendGateway,
        *,
        identity_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        identity_max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        admin_match_mode: AdminMatchMode = AdminMatchMode.SUBSTRING,
        admin_role_codes: Iterable[str] = DEFAULT_ADMIN_ROLE_CODES,
        fallback_role_names: Mapping[str, str] | None = None,
    ) -> None:
        self._gateway = gateway
        self.catalog = LabelCatalog(gateway)
        self.loader = RoleProfileLoader(
            gateway,
            label_store=self.catalog,
            timeout_seconds=identity_timeout_seconds,
            max_attempts=identity_max_attempts,
            fallback_role_names=fallback_role_names,
        )
        self.resolver = PermissionResolver(admin_match_mode, admin_role_codes)
        self.localizer = MessageLocalizer(self.catalog)

    # ---- Lifecycle ----

    @property
    def identity(self) -> Identity | None:
        return self.loader.identity

    @property
    def snapshot(self) -> PermissionSnapshot:
        return self.loader.snapshot

    async def sign_in(self, identity: Identity) -> PermissionSnapshot:
        """Start (or switch to) identity and load its role profile."""
        current = self.loader.identity
        if current is None or identity != current or identity.access_token != current.access_token:
            self._gateway.set_access_token(identity.access_token)
        return await self.loader.load(identity)

    async def ensure_loaded(self) -> PermissionSnapshot:
        """Retry the role fetch for the current identity if the last attempt failed."""
        identity = self.loader.identity
        if identity is None:
            raise NoActiveSessionException()
        return await self.loader.load(identity)

    async def refresh(self) -> PermissionSnapshot:
        """Refetch the current identity's role (e.g. after a role edit)."""
        identity = self.loader.identity
        if identity is None:
            raise NoActiveSessionException()
        return await self.loader.refresh(identity)

    def sign_out(self) -> None:
        """Discard the snapshot, retry state and every cached label."""
        self.loader.reset()
        self.catalog.clear()
        self._gateway.set_access_token(None)

    async def enrich(self) -> bool:
        """Load catalog labels once a permission snapshot exists.

        Returns False (and fetches nothing) while no identity is signed in or
        the first role fetch is still pending: the catalog endpoint rejects
        callers that are not fully authorized yet.
        """
        if self.loader.identity is None or self.snapshot.loading:
            logger.debug("Label enrichment deferred: no permission snapshot yet")
            return False
        await self.catalog.enrich()
        return True

    def view(self) -> SessionView:
        """Read model for the UI bridge."""
        return SessionView(
            signed_in=self.loader.identity is not None,
            state=self.loader.state.value,
            snapshot=self.snapshot,
            attempt_count=self.loader.attempt_count,
            labels_loaded=self.catalog.labels_loaded,
        )

    # ---- Decisions ----

    def resolve(self, capability: str, context: AccessContext = AccessContext.PAGE) -> bool:
        """Allow/deny capability for the current snapshot. Never raises."""
        return self.resolver.resolve(capability, context, self.snapshot)

    def explain(self, capability: str, context: AccessContext = AccessContext.PAGE) -> Resolution:
        return self.resolver.explain(capability, context, self.snapshot)

    def resolve_any(
        self, capabilities: Iterable[str], context: AccessContext = AccessContext.PAGE
    ) -> bool:
        return self.resolver.resolve_any(capabilities, context, self.snapshot)

    def resolve_all(
        self, capabilities: Iterable[str], context: AccessContext = AccessContext.PAGE
    ) -> bool:
        return self.resolver.resolve_all(capabilities, context, self.snapshot)

    def require(self, capability: str, context: AccessContext = AccessContext.ACTION) -> None:
        """Raise AuthorizationException with a localized message when capability is denied."""
        resolution = self.explain(capability, context)
        if resolution.allowed:
            return
        message = self.localizer.describe_missing(sorted(resolution.resolved_codes))
        raise AuthorizationException(capability=capability, message=message)

    # ---- Labels ----

    def display_name(self, code: str) -> str:
        return self.catalog.display_name(code)

    def localize(self, text: str) -> str:
        return self.localizer.localize(text)

    def grouped_permissions(self) -> dict[str, list[Permission]]:
        return self.catalog.grouped_permissions()
