"""FastAPI entry point for the access bridge the back-office UI talks to.

Wiring only; behaviour lives in app.application.services.access_session.
create_app() reads settings when called, so tests can change env and call
get_settings.cache_clear() first.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.middleware import RequestIDMiddleware
from app.shared.telemetry.logging import setup_logging

API_PREFIX = "/api/v1"


def _install_middleware(app: FastAPI, settings: Settings) -> None:
    # Added last runs first: request ids exist before CORS short-circuits preflights.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[settings.request_id_header],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )
    register_exception_handlers(app)
    _install_middleware(app, settings)
    app.include_router(api_router, prefix=API_PREFIX)
    return app


app = create_app()
