"""Pydantic models for backend payloads (camelCase on the wire).

Parsing is lenient about extra keys and id types; only the fields the access
core reads are declared.
"""

from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


def _id_to_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


# Backend ids are ints or strings depending on the endpoint.
WireId = Annotated[str | None, BeforeValidator(_id_to_str)]


class WirePermissionRef(BaseModel):
    """Permission embedded in a role: {code, name}."""

    model_config = ConfigDict(extra="ignore")

    code: str = Field(..., min_length=1)
    name: str | None = None


class WireRole(BaseModel):
    """Role object of /current-identity; permissions may be objects or bare codes."""

    model_config = ConfigDict(extra="ignore")

    id: WireId = None
    name: str = ""
    code: str | None = None
    description: str | None = None
    permissions: list[WirePermissionRef] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _name_or_empty(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("permissions", mode="before")
    @classmethod
    def _accept_bare_codes(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [{"code": item} if isinstance(item, str) else item for item in value]
        return value


class WireIdentityData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: WireRole | None = None


class WireIdentityEnvelope(BaseModel):
    """{data: {role: ...}}; a missing data or role object means zero permissions."""

    model_config = ConfigDict(extra="ignore")

    data: WireIdentityData | None = None


class WirePermission(BaseModel):
    """Entry of the /permissions catalog."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: WireId = None
    code: str = Field(..., min_length=1)
    name: str | None = None
    resource: str | None = None
    description: str | None = None
    is_active: bool = Field(default=True, alias="isActive")
    is_deleted: bool = Field(default=False, alias="isDeleted")

    @field_validator("is_active", "is_deleted", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return info.field_name == "is_active"
        return value
