"""Session API schemas."""

from pydantic import BaseModel, Field

from app.application.dtos.access import SessionView
from app.domain.entities.access import Identity


class SignInRequest(BaseModel):
    """Request body for POST /session/sign-in."""

    user_id: str = Field(..., min_length=1, max_length=128)
    role_id: str | None = Field(default=None, max_length=64)
    access_token: str | None = Field(default=None, repr=False)

    def to_identity(self) -> Identity:
        return Identity(
            user_id=self.user_id,
            role_id=self.role_id,
            access_token=self.access_token,
        )


class RoleSummary(BaseModel):
    id: str | None
    name: str
    code: str | None = None


class SessionResponse(BaseModel):
    """Current session state as seen by the UI."""

    signed_in: bool
    user_id: str | None = None
    state: str
    loading: bool
    degraded: bool
    role: RoleSummary | None = None
    permissions: list[str] = Field(default_factory=list)
    attempt_count: int = 0
    labels_loaded: bool = False

    @classmethod
    def from_view(cls, view: SessionView, user_id: str | None) -> "SessionResponse":
        snapshot = view.snapshot
        role = snapshot.role
        return cls(
            signed_in=view.signed_in,
            user_id=user_id,
            state=view.state,
            loading=snapshot.loading,
            degraded=snapshot.degraded,
            role=RoleSummary(id=role.id, name=role.name, code=role.code) if role else None,
            permissions=sorted(snapshot.codes),
            attempt_count=view.attempt_count,
            labels_loaded=view.labels_loaded,
        )
