"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get the
AccessSession from app.api.v1.dependencies.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import access, health, labels, session

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
api_router.include_router(access.router, prefix="/access", tags=["access"])
api_router.include_router(labels.router, prefix="/labels", tags=["labels"])
