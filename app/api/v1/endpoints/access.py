"""Access API: allow/deny decisions for capabilities."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.v1.dependencies import AccessSessionDep
from app.domain.enums import AccessContext
from app.schemas.access import ResolutionResponse, ResolveBatchRequest, ResolveBatchResponse

router = APIRouter()


@router.get("/resolve", response_model=ResolutionResponse)
def resolve(
    session: AccessSessionDep,
    capability: Annotated[str, Query(min_length=1, max_length=128)],
    context: AccessContext = AccessContext.PAGE,
):
    """Decide one capability ('orders.read' or 'ORDERS_READ') in page or action context."""
    return ResolutionResponse.from_resolution(session.explain(capability, context))


@router.post("/resolve", response_model=ResolveBatchResponse)
def resolve_batch(body: ResolveBatchRequest, session: AccessSessionDep):
    """Decide several capabilities; allowed combines them with any/all."""
    results = [session.explain(c, body.context) for c in body.capabilities]
    if body.mode == "all":
        allowed = session.resolve_all(body.capabilities, body.context)
    else:
        allowed = session.resolve_any(body.capabilities, body.context)
    return ResolveBatchResponse(
        allowed=allowed,
        mode=body.mode,
        results=[ResolutionResponse.from_resolution(r) for r in results],
    )
