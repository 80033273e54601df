"""Application DTOs (no dependency on the wire format)."""

from app.application.dtos.access import IdentityProfile, Resolution, SessionView

__all__ = ["IdentityProfile", "Resolution", "SessionView"]
