"""Session API: sign in, sign out, refresh, and current state."""

from fastapi import APIRouter, Response

from app.api.v1.dependencies import AccessSessionDep, SignedInSessionDep
from app.application.services.access_session import AccessSession
from app.schemas.session import SessionResponse, SignInRequest

router = APIRouter()


def _session_response(session: AccessSession) -> SessionResponse:
    identity = session.identity
    return SessionResponse.from_view(
        session.view(), identity.user_id if identity else None
    )


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(body: SignInRequest, session: AccessSessionDep):
    """Start a session for the identity and load its role permissions.

    Re-posting the same identity reuses the loaded snapshot; a different
    user_id or role_id discards it and refetches.
    """
    await session.sign_in(body.to_identity())
    return _session_response(session)


@router.post("/sign-out", status_code=204)
def sign_out(session: AccessSessionDep) -> Response:
    """Drop the snapshot, retry state and every cached label."""
    session.sign_out()
    return Response(status_code=204)


@router.post("/refresh", response_model=SessionResponse)
async def refresh(session: SignedInSessionDep):
    """Refetch the current identity's role (after a role edit)."""
    await session.refresh()
    return _session_response(session)


@router.get("", response_model=SessionResponse)
async def get_session(session: AccessSessionDep):
    """Current session; retries a failed role fetch before answering."""
    if session.identity is not None:
        await session.ensure_loaded()
    return _session_response(session)
