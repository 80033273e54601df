"""Domain exceptions for the access core.

Defines domain-level exceptions raised by the authorization engine and its
backend gateway. These exceptions are independent of the transport; the HTTP
bridge maps them to responses in exception handlers.
"""

from typing import Any


class AccessCoreException(Exception):
    """Base exception for all access core errors.

    All custom exceptions inherit from this class so callers can catch one
    type. The HTTP bridge maps these to responses using message, error_code,
    and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. path, status_code).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AccessCoreException):
    """Raised when input validation fails (e.g. malformed capability or code)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AccessCoreException):
    """Raised when the backend rejects the session credentials (401)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(AccessCoreException):
    """Raised by require-style checks when the current role lacks a capability."""

    def __init__(
        self,
        capability: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional capability and message.

        Args:
            capability: Capability that was denied (e.g. 'orders.create').
            message: Human-readable message (usually already localized).
        """
        details: dict[str, Any] = {}
        if capability:
            details["capability"] = capability
        super().__init__(message, "PERMISSION_DENIED", details)


class NoActiveSessionException(AccessCoreException):
    """Raised when an operation needs a signed-in identity and there is none."""

    def __init__(self) -> None:
        super().__init__("No identity is signed in", "NO_ACTIVE_SESSION")


class IdentityFetchException(AccessCoreException):
    """Identity fetch failed (transport error, non-2xx status, or timeout).

    Retryable: RoleProfileLoader counts it toward the degraded-mode threshold.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {"reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Identity fetch failed: {reason}",
            "IDENTITY_FETCH_ERROR",
            details,
        )


class MalformedIdentityException(AccessCoreException):
    """Identity payload has no role object or does not match the wire shape."""

    def __init__(self, reason: str = "missing role") -> None:
        super().__init__(
            f"Malformed identity payload: {reason}",
            "MALFORMED_IDENTITY",
            {"reason": reason},
        )


class CatalogFetchException(AccessCoreException):
    """Permission catalog or translation catalog could not be fetched or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Catalog fetch failed for {path}: {reason}",
            "CATALOG_FETCH_ERROR",
            {"path": path, "reason": reason},
        )
