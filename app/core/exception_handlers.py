"""Centralized exception handlers for the FastAPI bridge.

Register with register_exception_handlers(app). Every error body has the
shape {"error", "message", "details"?, "request_id"?}; request_id is the one
RequestIDMiddleware assigned, so UI error reports can be matched to logs.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import AccessCoreException
from app.shared.telemetry.tracing import get_trace_id

logger = logging.getLogger(__name__)

# error_code -> HTTP status; upstream backend failures surface as 502.
ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "NO_ACTIVE_SESSION": 401,
    "PERMISSION_DENIED": 403,
    "MALFORMED_IDENTITY": 502,
    "IDENTITY_FETCH_ERROR": 502,
    "CATALOG_FETCH_ERROR": 502,
}
DEFAULT_ERROR_STATUS = 400


def status_for(exc: AccessCoreException) -> int:
    return ERROR_CODE_STATUS.get(exc.error_code, DEFAULT_ERROR_STATUS)


def _error_response(request: Request, status_code: int, body: dict[str, Any]) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body = {**body, "request_id": request_id}
    return JSONResponse(status_code=status_code, content=body)


def _access_exception_handler(request: Request, exc: AccessCoreException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.warning("Backend failure on %s: %s (%s)", request.url.path, exc.message, exc.error_code)
    return _error_response(request, status_code, exc.to_dict())


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422 with pydantic's error list, input values omitted."""
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return _error_response(
        request,
        422,
        {"error": "VALIDATION_ERROR", "message": "Request validation failed", "details": details},
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(
        request, exc.status_code, {"error": "HTTP_ERROR", "message": exc.detail}
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500; the exception text is included only when debug is on."""
    logger.exception("Unhandled exception (trace_id=%s): %s", get_trace_id(), exc)
    message = str(exc) if get_settings().debug else "Internal server error"
    return _error_response(request, 500, {"error": "INTERNAL_ERROR", "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers for AccessCoreException (and subclasses),
    RequestValidationError, StarletteHTTPException and Exception."""
    app.add_exception_handler(AccessCoreException, _access_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
