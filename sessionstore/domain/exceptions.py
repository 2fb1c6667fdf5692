"""Domain exceptions for the session store.

Defines domain-level exceptions that represent business rule violations.
Services raise these; the outer facades convert them to result values.
"""

from typing import Any

from sessionstore.domain.value_objects import FieldViolation


class StoreException(Exception):
    """Base exception for all session store errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
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
        """Return a JSON-safe error body (code, message, details)."""
        return {"code": self.error_code, "message": self.message, "details": self.details}


class ValidationException(StoreException):
    """Raised when a record fails its collection schema."""

    def __init__(
        self,
        violations: list[FieldViolation],
        collection: str | None = None,
    ) -> None:
        """Initialize with the violations found.

        Args:
            violations: Every failed rule; message joins them in order.
            collection: Optional collection the record belongs to.
        """
        self.violations = list(violations)
        message = "Validation failed: " + ", ".join(v.message for v in self.violations)
        details: dict[str, Any] = {"violations": [v.to_dict() for v in self.violations]}
        if collection:
            details["collection"] = collection
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(StoreException):
    """Raised when a requested record is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Collection name (e.g. 'agents').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SerializationException(StoreException):
    """Raised when a stored value cannot be decoded into a record list."""

    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(
            f"Stored data for {collection} is corrupt: {reason}",
            "SERIALIZATION_ERROR",
            {"collection": collection},
        )


class AuthenticationException(StoreException):
    """Raised when credentials are rejected (format, policy or throttling)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_ERROR",
    ) -> None:
        """Initialize with message and a specific code.

        Args:
            message: Description shown to the user.
            error_code: e.g. INVALID_EMAIL, INVALID_PASSWORD, RATE_LIMITED.
        """
        super().__init__(message, error_code)


class SessionExpiredException(StoreException):
    """Raised when an operation needs a tenant but the session has expired."""

    def __init__(self, message: str = "Session expired. Please sign in again.") -> None:
        super().__init__(message, "SESSION_EXPIRED")
