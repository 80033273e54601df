"""HTTP adapters for the backend API."""

from app.infrastructure.http.backend_gateway import BackendGateway

__all__ = ["BackendGateway"]
