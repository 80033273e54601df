"""Role profile loader: fetches the current identity's role with retry and degraded fallback.

State machine:
    IDLE --load--> LOADING --success--> LOADED
                   LOADING --failure, attempts < max--> IDLE (empty snapshot, retry on next load)
                   LOADING --failure, attempts >= max--> DEGRADED (static fallback role)
    any --identity change / reset()--> IDLE (retry counter cleared)

DEGRADED is terminal until the identity changes. Concurrent load() calls for
the same identity share one in-flight fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import replace

from app.application.dtos.access import IdentityProfile
from app.application.interfaces.services import IIdentityGateway, ILabelStore
from app.domain.entities.access import (
    Identity,
    PermissionSnapshot,
    RetryState,
)
from app.domain.enums import LoaderState
from app.domain.exceptions import AccessCoreException, IdentityFetchException
from app.domain.fallback_roles import build_fallback_role
from app.shared.telemetry.tracing import add_span_attributes, add_span_event, traced

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_ATTEMPTS = 3


class RoleProfileLoader:
    """Produces PermissionSnapshots for the current identity, resiliently."""

    def __init__(
        self,
        gateway: IIdentityGateway,
        label_store: ILabelStore | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        fallback_role_names: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the loader in IDLE with a pending snapshot.

        Args:
            gateway: Identity fetch port.
            label_store: Receives role-embedded permission names on success.
            timeout_seconds: Bound for one identity fetch.
            max_attempts: Consecutive failures before degraded mode.
            fallback_role_names: Optional override of the static role_id -> name table.
        """
        self._gateway = gateway
        self._label_store = label_store
        self._timeout = timeout_seconds
        self._max_attempts = max_attempts
        self._fallback_role_names = fallback_role_names
        self._identity: Identity | None = None
        self._state = LoaderState.IDLE
        self._snapshot = PermissionSnapshot.pending()
        self._retry = RetryState()
        self._inflight: asyncio.Task[PermissionSnapshot] | None = None

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def snapshot(self) -> PermissionSnapshot:
        """Current snapshot (immutable; safe to hand to readers)."""
        return self._snapshot

    @property
    def attempt_count(self) -> int:
        """Consecutive failed fetches for the current identity."""
        return self._retry.attempt_count

    @property
    def last_error(self) -> Exception | None:
        return self._retry.last_error

    @property
    def retry_state(self) -> RetryState:
        """Copy of the retry counters; mutating it does not affect the loader."""
        return replace(self._retry)

    @traced("role_profile_loader.load")
    async def load(self, identity: Identity | None, *, force: bool = False) -> PermissionSnapshot:
        """Return a snapshot for identity, fetching when needed.

        Args:
            identity: Signed-in identity; None returns the current snapshot.
            force: Refetch even when already LOADED (ignored in DEGRADED).

        Returns:
            The snapshot after this call (pending, loaded, empty, or degraded).
        """
        if identity is None:
            return self._snapshot
        if identity != self._identity:
            self._switch_identity(identity)
        else:
            # Same user and role; keep the newest object so a rotated token is current.
            self._identity = identity

        if self._inflight is not None:
            return await asyncio.shield(self._inflight)
        if self._state == LoaderState.DEGRADED:
            return self._snapshot
        if self._state == LoaderState.LOADED and not force:
            return self._snapshot

        self._state = LoaderState.LOADING
        if self._snapshot.role is None and not self._snapshot.codes:
            self._snapshot = PermissionSnapshot.pending()
        task = asyncio.ensure_future(self._fetch(identity))
        self._inflight = task
        task.add_done_callback(self._clear_inflight)
        return await asyncio.shield(task)

    async def refresh(self, identity: Identity) -> PermissionSnapshot:
        """Refetch the role for identity (no-op while degraded)."""
        return await self.load(identity, force=True)

    def reset(self) -> None:
        """Forget identity, snapshot and retry state (sign-out)."""
        if self._identity is not None:
            logger.info("Role profile reset for user %s", self._identity.user_id)
        self._identity = None
        self._state = LoaderState.IDLE
        self._snapshot = PermissionSnapshot.pending()
        self._retry.reset()
        self._inflight = None

    def _switch_identity(self, identity: Identity) -> None:
        """Identity changed: reset retry state; a fetch for the old identity is orphaned."""
        previous = self._identity
        self._identity = identity
        self._state = LoaderState.IDLE
        self._snapshot = PermissionSnapshot.pending()
        self._retry.reset()
        self._inflight = None
        if previous is not None:
            logger.info(
                "Identity changed (user %s -> %s); permissions will be refetched",
                previous.user_id,
                identity.user_id,
            )

    def _clear_inflight(self, task: asyncio.Task[PermissionSnapshot]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _fetch(self, identity: Identity) -> PermissionSnapshot:
        """One guarded fetch; applies the result only if identity is still current."""
        try:
            profile = await asyncio.wait_for(
                self._gateway.fetch_current_identity(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            error: AccessCoreException = IdentityFetchException(
                f"timed out after {self._timeout} seconds"
            )
            return self._on_failure(identity, error)
        except AccessCoreException as e:
            return self._on_failure(identity, e)
        except Exception as e:
            # Gateways should wrap transport errors; anything else still counts as a failed attempt.
            logger.exception("Unexpected error fetching identity for user %s", identity.user_id)
            return self._on_failure(identity, IdentityFetchException(str(e) or type(e).__name__))

        return self._on_success(identity, profile)

    def _on_success(self, identity: Identity, profile: IdentityProfile) -> PermissionSnapshot:
        if identity != self._identity:
            logger.debug("Discarding role profile for stale identity %s", identity.user_id)
            return self._snapshot
        if self._label_store is not None and profile.permission_names:
            self._label_store.ingest_role_permissions(profile.permission_names)
        self._retry.reset()
        self._state = LoaderState.LOADED
        self._snapshot = PermissionSnapshot.for_role(profile.role)
        add_span_attributes(role=profile.role.name, permission_count=len(self._snapshot.codes))
        logger.info(
            "Role profile loaded for user %s: role=%s, %s permissions",
            identity.user_id,
            profile.role.name,
            len(self._snapshot.codes),
        )
        return self._snapshot

    def _on_failure(self, identity: Identity, error: AccessCoreException) -> PermissionSnapshot:
        if identity != self._identity:
            logger.debug("Ignoring fetch failure for stale identity %s", identity.user_id)
            return self._snapshot
        attempts = self._retry.record_failure(error)
        add_span_event("identity_fetch_failed", {"attempt": attempts, "error": error.error_code})
        if attempts < self._max_attempts:
            logger.warning(
                "Identity fetch failed for user %s (attempt %s/%s): %s",
                identity.user_id,
                attempts,
                self._max_attempts,
                error.message,
            )
            self._state = LoaderState.IDLE
            self._snapshot = PermissionSnapshot.empty()
            return self._snapshot

        role = build_fallback_role(identity.role_id, self._fallback_role_names)
        logger.warning(
            "Identity fetch failed %s times for user %s; using offline role %r",
            attempts,
            identity.user_id,
            role.name,
        )
        self._state = LoaderState.DEGRADED
        self._snapshot = PermissionSnapshot.for_role(role, degraded=True)
        return self._snapshot
