"""Permission label API schemas."""

from pydantic import BaseModel, Field


class LabelResponse(BaseModel):
    code: str
    label: str


class LocalizeRequest(BaseModel):
    """Request body for POST /labels/localize."""

    text: str = Field(..., max_length=10_000)


class LocalizeResponse(BaseModel):
    text: str


class EnrichResponse(BaseModel):
    """enriched is False when no permission snapshot exists yet."""

    enriched: bool
    labels_loaded: bool


class PermissionItem(BaseModel):
    code: str
    label: str
    description: str | None = None


class PermissionGroup(BaseModel):
    module: str
    permissions: list[PermissionItem]
