"""Tests for domain exceptions (error_code, message, details)."""

from sessionstore.domain.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    SerializationException,
    SessionExpiredException,
    StoreException,
    ValidationException,
)
from sessionstore.domain.value_objects import FieldViolation
from sessionstore.infrastructure.exceptions import StorageException


def test_store_exception_default_error_code() -> None:
    """Base StoreException uses class name as error_code when not provided."""
    exc = StoreException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "StoreException"
    assert exc.details == {}


def test_store_exception_to_dict() -> None:
    exc = StoreException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"code": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_joins_violations() -> None:
    exc = ValidationException(
        [
            FieldViolation("name", "required", "Field 'name' is required"),
            FieldViolation("greeting", "max_length", "Field 'greeting' exceeds maximum length of 500"),
        ],
        collection="agents",
    )
    assert exc.message == (
        "Validation failed: Field 'name' is required, "
        "Field 'greeting' exceeds maximum length of 500"
    )
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details["collection"] == "agents"
    assert len(exc.details["violations"]) == 2


def test_authentication_exception_defaults() -> None:
    exc = AuthenticationException()
    assert exc.message == "Authentication failed"
    assert exc.error_code == "AUTHENTICATION_ERROR"


def test_authentication_exception_specific_code() -> None:
    exc = AuthenticationException("Invalid email format", "INVALID_EMAIL")
    assert exc.error_code == "INVALID_EMAIL"


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("agents", "agent_9")
    assert "agents" in exc.message and "agent_9" in exc.message
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "agents", "resource_id": "agent_9"}


def test_serialization_exception() -> None:
    exc = SerializationException("agents", "invalid JSON")
    assert exc.error_code == "SERIALIZATION_ERROR"
    assert exc.details == {"collection": "agents"}


def test_session_expired_exception() -> None:
    assert SessionExpiredException().error_code == "SESSION_EXPIRED"


def test_storage_exception_hides_reason_from_message() -> None:
    exc = StorageException("set", "connection refused")
    assert exc.message == "Storage set failed"
    assert exc.error_code == "STORAGE_ERROR"
    assert isinstance(exc, StoreException)
