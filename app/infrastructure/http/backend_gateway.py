"""HTTP adapter for the backend identity, permission and translation endpoints.

All calls share one httpx.AsyncClient (created in the lifespan). Transport and
parse errors are wrapped in domain exceptions; the services never see httpx.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.application.dtos.access import IdentityProfile
from app.domain.entities.access import Permission, Role
from app.domain.exceptions import (
    AuthenticationException,
    CatalogFetchException,
    IdentityFetchException,
    MalformedIdentityException,
)
from app.infrastructure.http.wire import WireIdentityEnvelope, WirePermission, WireRole
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY_PATH = "/current-identity"
DEFAULT_PERMISSIONS_PATH = "/permissions"
DEFAULT_TRANSLATIONS_PATH = "/public/translations"
TRANSLATION_PARAMS: dict[str, str] = {"scope": "permissions", "includeCodes": "true"}

# Keys under which list endpoints wrap their rows.
_LIST_KEYS = ("data", "rows")


class BackendGateway:
    """Implements IBackendGateway over httpx."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        identity_path: str = DEFAULT_IDENTITY_PATH,
        permissions_path: str = DEFAULT_PERMISSIONS_PATH,
        translations_path: str = DEFAULT_TRANSLATIONS_PATH,
    ) -> None:
        self._client = client
        self._identity_path = identity_path
        self._permissions_path = permissions_path
        self._translations_path = translations_path
        self._access_token: str | None = None

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token or None

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET path and decode JSON. Raises httpx.HTTPError or ValueError (bad JSON)."""
        response = await self._client.get(path, params=params, headers=self._headers())
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    # ---- Identity ----

    @traced("backend.fetch_current_identity")
    async def fetch_current_identity(self) -> IdentityProfile:
        """GET the identity and return its role profile.

        Raises:
            AuthenticationException: Backend answered 401.
            IdentityFetchException: Transport error or other non-2xx status.
            MalformedIdentityException: Body is not JSON, null, or has no role.
        """
        try:
            payload = await self._get(self._identity_path)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationException("Session credentials were rejected") from e
            raise IdentityFetchException(f"HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            raise IdentityFetchException(str(e) or type(e).__name__) from e
        except json.JSONDecodeError as e:
            raise MalformedIdentityException("response is not JSON") from e

        if payload is None:
            raise MalformedIdentityException("empty payload")
        try:
            envelope = WireIdentityEnvelope.model_validate(payload)
        except ValidationError as e:
            raise MalformedIdentityException(f"{e.error_count()} validation errors") from e
        if envelope.data is None or envelope.data.role is None:
            raise MalformedIdentityException("missing role")

        profile = _to_profile(envelope.data.role)
        add_span_attributes(permission_count=len(profile.role.permissions))
        return profile

    # ---- Catalogs ----

    @traced("backend.fetch_permissions")
    async def fetch_permissions(self) -> list[Permission]:
        """GET the permission catalog; accepts a bare list or {data|rows: [...]}."""
        path = self._permissions_path
        try:
            payload = await self._get(path)
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            raise CatalogFetchException(path, str(e) or type(e).__name__) from e

        rows = _unwrap_rows(payload)
        if rows is None:
            raise CatalogFetchException(path, "unexpected payload shape")

        permissions: list[Permission] = []
        for row in rows:
            try:
                item = WirePermission.model_validate(row)
            except ValidationError:
                logger.debug("Skipping malformed permission row: %r", row)
                continue
            permissions.append(
                Permission(
                    code=item.code,
                    name=item.name,
                    id=item.id,
                    resource=item.resource,
                    description=item.description,
                    is_active=item.is_active,
                    is_deleted=item.is_deleted,
                )
            )
        return permissions

    @traced("backend.fetch_translations")
    async def fetch_translations(self) -> Any:
        """GET permission translations (codes included); returns the raw payload."""
        path = self._translations_path
        try:
            return await self._get(path, params=TRANSLATION_PARAMS)
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            raise CatalogFetchException(path, str(e) or type(e).__name__) from e


def _to_profile(wire_role: WireRole) -> IdentityProfile:
    codes = tuple(dict.fromkeys(ref.code for ref in wire_role.permissions))
    names = {ref.code: ref.name for ref in wire_role.permissions if ref.name}
    role = Role(
        id=wire_role.id,
        name=wire_role.name,
        code=wire_role.code,
        description=wire_role.description,
        permissions=codes,
    )
    return IdentityProfile(role=role, permission_names=names)


def _unwrap_rows(payload: Any) -> list[Any] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _LIST_KEYS:
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    return None
