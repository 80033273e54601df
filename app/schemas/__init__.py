"""Pydantic request/response schemas for the HTTP bridge."""

from app.schemas.access import ResolutionResponse, ResolveBatchRequest, ResolveBatchResponse
from app.schemas.health import HealthResponse
from app.schemas.labels import (
    EnrichResponse,
    LabelResponse,
    LocalizeRequest,
    LocalizeResponse,
    PermissionGroup,
    PermissionItem,
)
from app.schemas.session import RoleSummary, SessionResponse, SignInRequest

__all__ = [
    "EnrichResponse",
    "HealthResponse",
    "LabelResponse",
    "LocalizeRequest",
    "LocalizeResponse",
    "PermissionGroup",
    "PermissionItem",
    "ResolutionResponse",
    "ResolveBatchRequest",
    "ResolveBatchResponse",
    "RoleSummary",
    "SessionResponse",
    "SignInRequest",
]
