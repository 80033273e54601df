"""HTTP middleware for the bridge (raw ASGI). Import and use from app.main."""

from app.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
