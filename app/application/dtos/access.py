"""DTOs for the access services (no dependency on the wire format)."""

from dataclasses import dataclass, field

from app.domain.entities.access import PermissionSnapshot, Role


@dataclass(frozen=True)
class IdentityProfile:
    """Parsed identity fetch: the role and the names embedded in it."""

    role: Role
    permission_names: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Resolution:
    """Outcome of a capability check with the codes it was decided on.

    reason is one of: loading, admin, special, descriptor, fallback, literal, invalid.
    """

    capability: str
    allowed: bool
    reason: str
    resolved_codes: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SessionView:
    """Read model of the session for the UI bridge."""

    signed_in: bool
    state: str
    snapshot: PermissionSnapshot
    attempt_count: int
    labels_loaded: bool
