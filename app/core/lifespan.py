"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: the shared backend HTTP client, the
AccessSession composition root, and telemetry. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.application.services.access_session import AccessSession
from app.core.config import Settings, get_settings
from app.infrastructure.http.backend_gateway import BackendGateway
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


def build_access_session(settings: Settings, client: httpx.AsyncClient) -> AccessSession:
    """Wire the backend gateway and the access services from settings."""
    gateway = BackendGateway(
        client,
        identity_path=settings.identity_path,
        permissions_path=settings.permissions_path,
        translations_path=settings.translations_path,
    )
    return AccessSession(
        gateway,
        identity_timeout_seconds=settings.identity_timeout_seconds,
        identity_max_attempts=settings.identity_max_attempts,
        admin_match_mode=settings.admin_match,
        admin_role_codes=settings.admin_role_code_list,
    )


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: backend HTTP client, access session, telemetry (if
    enabled). Shutdown order: session sign-out, HTTP client close,
    telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    client = httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout_seconds,
    )
    app.state.backend_http_client = client
    app.state.access_session = build_access_session(settings, client)
    logger.info("Access session ready (backend %s)", settings.api_base_url)

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.start(app):
            set_telemetry(telemetry)

    yield

    # ---- Shutdown ----
    session = getattr(app.state, "access_session", None)
    if session is not None:
        session.sign_out()
        app.state.access_session = None

    if getattr(app.state, "backend_http_client", None) is not None:
        await app.state.backend_http_client.aclose()
        app.state.backend_http_client = None
        logger.info("Backend HTTP client closed")

    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
        set_telemetry(None)
