"""Presentation-layer dependency injection.

The AccessSession is built once in the lifespan (app.state.access_session);
routes receive it through Depends() and never construct services themselves.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.application.services.access_session import AccessSession
from app.domain.exceptions import NoActiveSessionException


def get_access_session(request: Request) -> AccessSession:
    """Return the process-wide AccessSession (503 before startup completed)."""
    session = getattr(request.app.state, "access_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Access session not initialized")
    return session


def get_signed_in_session(
    session: Annotated[AccessSession, Depends(get_access_session)],
) -> AccessSession:
    """Same as get_access_session but requires a signed-in identity."""
    if session.identity is None:
        raise NoActiveSessionException()
    return session


AccessSessionDep = Annotated[AccessSession, Depends(get_access_session)]
SignedInSessionDep = Annotated[AccessSession, Depends(get_signed_in_session)]
