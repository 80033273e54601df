"""Access decision API schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from app.application.dtos.access import Resolution
from app.domain.enums import AccessContext


class ResolutionResponse(BaseModel):
    """Decision for one capability and the codes it was checked against."""

    capability: str
    allowed: bool
    reason: str
    resolved_codes: list[str] = Field(default_factory=list)

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> "ResolutionResponse":
        return cls(
            capability=resolution.capability,
            allowed=resolution.allowed,
            reason=resolution.reason,
            resolved_codes=sorted(resolution.resolved_codes),
        )


class ResolveBatchRequest(BaseModel):
    """Request body for POST /access/resolve."""

    capabilities: list[str] = Field(..., min_length=1, max_length=200)
    context: AccessContext = AccessContext.PAGE
    mode: Literal["any", "all"] = "any"


class ResolveBatchResponse(BaseModel):
    allowed: bool
    mode: Literal["any", "all"]
    results: list[ResolutionResponse]
