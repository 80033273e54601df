"""Application interfaces (ports)."""

from app.application.interfaces.services import (
    IBackendGateway,
    ICatalogGateway,
    IIdentityGateway,
    ILabelStore,
)

__all__ = [
    "IBackendGateway",
    "ICatalogGateway",
    "IIdentityGateway",
    "ILabelStore",
]
