"""Application layer: ports, DTOs, and the access services.

Depends only on domain and protocol definitions (DIP). The HTTP gateway in
app.infrastructure.http implements the ports.
"""

from app.application.interfaces import (
    IBackendGateway,
    ICatalogGateway,
    IIdentityGateway,
    ILabelStore,
)
from app.application.services.access_session import AccessSession

__all__ = [
    "AccessSession",
    "IBackendGateway",
    "ICatalogGateway",
    "IIdentityGateway",
    "ILabelStore",
]
