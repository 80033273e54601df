"""Access domain entities: identity, role, permission, and the permission snapshot.

Read-only client mirrors of backend-owned data, independent of the wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class Identity:
    """Signed-in identity. A different user_id or role_id is an identity change."""

    user_id: str
    role_id: str | None = None
    access_token: str | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValidationException("Identity user_id is required", field="user_id")


@dataclass(frozen=True)
class Permission:
    """Permission catalog entry. Only active, non-deleted entries are used."""

    code: str
    name: str | None = None
    id: str | None = None
    resource: str | None = None
    description: str | None = None
    is_active: bool = True
    is_deleted: bool = False

    @property
    def is_usable(self) -> bool:
        """True when the entry participates in lookup and grouping."""
        return self.is_active and not self.is_deleted


@dataclass(frozen=True)
class Role:
    """Role snapshot with its ordered permission codes."""

    id: str | None
    name: str
    code: str | None = None
    description: str | None = None
    permissions: tuple[str, ...] = ()


@dataclass(frozen=True)
class PermissionSnapshot:
    """Unit consumed by PermissionResolver; replaced wholesale, never mutated.

    Attributes:
        role: Current role or None (no role / failed fetch).
        codes: Flattened permission codes of the role.
        loading: True while the first fetch for the identity is in flight.
        degraded: True when codes come from the static fallback tables.
    """

    role: Role | None = None
    codes: frozenset[str] = frozenset()
    loading: bool = False
    degraded: bool = False

    @classmethod
    def pending(cls) -> PermissionSnapshot:
        """Snapshot used before any fetch completed (denies everything)."""
        return cls(loading=True)

    @classmethod
    def empty(cls) -> PermissionSnapshot:
        """Fail-closed snapshot: no role, no codes, not loading."""
        return cls()

    @classmethod
    def for_role(cls, role: Role, *, degraded: bool = False) -> PermissionSnapshot:
        """Snapshot carrying a role and its flattened codes."""
        return cls(
            role=role,
            codes=frozenset(role.permissions),
            loading=False,
            degraded=degraded,
        )


@dataclass
class RetryState:
    """Consecutive identity-fetch failures for the current identity."""

    attempt_count: int = 0
    last_error: Exception | None = None

    def record_failure(self, error: Exception) -> int:
        """Increment attempt_count, remember the error, return the new count."""
        self.attempt_count += 1
        self.last_error = error
        return self.attempt_count

    def reset(self) -> None:
        self.attempt_count = 0
        self.last_error = None
