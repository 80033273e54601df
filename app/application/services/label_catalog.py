"""Permission label catalog: code -> human-readable name.

Three tiers, in precedence order:
1. Shared label map written by role-embedded names (every successful role
   load) and by the /permissions catalog (enrich). Last writer wins per code.
2. Translation map from /public/translations (enrich), consulted only when
   tier 1 has no entry; a hit equal to the formatted fallback is ignored.
3. format_permission_code.

Entries never expire; clear() drops everything (sign-out).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from app.application.interfaces.services import ICatalogGateway
from app.application.services.label_payloads import normalize_payload
from app.application.services.permission_groups import group_permissions
from app.application.services.translation_lookup import (
    format_permission_code,
    lookup_translation,
)
from app.domain.entities.access import Permission
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

_CATALOG = "catalog"
_TRANSLATIONS = "translations"


class LabelCatalog:
    """Session-scoped permission label cache with lazy, coalesced enrichment."""

    def __init__(self, gateway: ICatalogGateway | None = None) -> None:
        """Initialize an empty catalog.

        Args:
            gateway: Source for enrich(); without one, enrich() is a no-op.
        """
        self._gateway = gateway
        self._labels: dict[str, str] = {}
        self._translations: dict[str, str] = {}
        self._catalog: list[Permission] = []
        self._inflight: dict[str, tuple[int, asyncio.Task[None]]] = {}
        # Bumped by clear(); fetches started under an older generation are dropped.
        self._generation = 0

    # ---- Write side ----

    def ingest_role_permissions(self, names: Mapping[str, str]) -> int:
        """Overwrite labels with names embedded in the role payload."""
        written = 0
        for code, name in names.items():
            if code and name:
                self._labels[code] = name
                written += 1
        return written

    def ingest_catalog(self, permissions: Iterable[Permission]) -> int:
        """Merge active catalog permissions into the label map (overwrite)."""
        usable = [p for p in permissions if p.is_usable]
        self._catalog = usable
        written = 0
        for permission in usable:
            if permission.code and permission.name:
                self._labels[permission.code] = permission.name
                written += 1
            else:
                logger.debug("Permission %r has no name; skipped", permission.code)
        return written

    def ingest(self, payload: Any) -> int:
        """Normalize a translation payload (any accepted shape) and merge it."""
        translations = normalize_payload(payload)
        self._translations.update(translations)
        return len(translations)

    def clear(self) -> None:
        """Drop every cached label and forget in-flight fetches."""
        self._generation += 1
        self._labels.clear()
        self._translations.clear()
        self._catalog = []
        self._inflight.clear()

    # ---- Read side ----

    @property
    def labels_loaded(self) -> bool:
        """True when any tier-1 or tier-2 entry exists."""
        return bool(self._labels) or bool(self._translations)

    def resolve_label(self, code: str) -> str | None:
        """Return a real label for code (tier 1 or 2), or None when only the fallback applies."""
        if not code:
            return None
        label = self._labels.get(code)
        if label:
            return label
        if not self._translations:
            return None
        hit = lookup_translation(code, self._translations)
        if hit and hit != code and hit != format_permission_code(code):
            return hit
        return None

    def display_name(self, code: str) -> str:
        """Return the display label for code. Never raises; falls back to formatting."""
        if not code:
            return ""
        return self.resolve_label(code) or format_permission_code(code)

    def grouped_permissions(self) -> dict[str, list[Permission]]:
        """Catalog permissions grouped by module (empty until enrich() succeeded)."""
        return group_permissions(self._catalog)

    # ---- Enrichment ----

    @traced("label_catalog.enrich")
    async def enrich(self) -> None:
        """Fetch the permission catalog and translations; errors are logged and swallowed.

        Safe to call repeatedly: concurrent calls share the same in-flight fetches.
        Both fetches are bound to the generation current when enrich() was
        called, so a clear() while they run discards their results.
        """
        if self._gateway is None:
            return
        generation = self._generation
        tasks = [
            self._join_or_start(_CATALOG, self._load_catalog, generation),
            self._join_or_start(_TRANSLATIONS, self._load_translations, generation),
        ]
        await asyncio.gather(*(asyncio.shield(task) for task in tasks))
        add_span_attributes(
            labels=len(self._labels), translations=len(self._translations)
        )

    def _join_or_start(
        self,
        name: str,
        factory: Callable[[int], Awaitable[None]],
        generation: int,
    ) -> asyncio.Task[None]:
        """Return the in-flight fetch called name for generation, or start one."""
        entry = self._inflight.get(name)
        if entry is not None and entry[0] == generation:
            return entry[1]
        task = asyncio.ensure_future(factory(generation))
        self._inflight[name] = (generation, task)
        task.add_done_callback(lambda done: self._forget(name, done))
        return task

    def _forget(self, name: str, task: asyncio.Task[None]) -> None:
        entry = self._inflight.get(name)
        if entry is not None and entry[1] is task:
            del self._inflight[name]


    async def _load_catalog(self, generation: int) -> None:
        assert self._gateway is not None
        try:
            permissions = await self._gateway.fetch_permissions()
        except Exception as e:
            logger.warning("Permission catalog unavailable, keeping cached labels: %s", e)
            return
        if generation != self._generation:
            logger.debug("Discarding permission catalog fetched before clear()")
            return
        written = self.ingest_catalog(permissions)
        logger.info("Permission catalog loaded: %s labels", written)

    async def _load_translations(self, generation: int) -> None:
        assert self._gateway is not None
        try:
            payload = await self._gateway.fetch_translations()
        except Exception as e:
            logger.warning("Translation catalog unavailable, keeping cached labels: %s", e)
            return
        if generation != self._generation:
            logger.debug("Discarding translations fetched before clear()")
            return
        merged = self.ingest(payload)
        logger.info("Permission translations loaded: %s keys", merged)
