"""Domain layer: enums, value objects, and exceptions.

No dependencies on infrastructure. Used by application and infrastructure layers.
"""

from sessionstore.domain.enums import (
    CollectionName,
    SessionState,
    SyncMethod,
    canonical_collection,
)
from sessionstore.domain.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    SerializationException,
    SessionExpiredException,
    StoreException,
    ValidationException,
)
from sessionstore.domain.value_objects import FieldViolation

__all__ = [
    "AuthenticationException",
    "CollectionName",
    "FieldViolation",
    "ResourceNotFoundException",
    "SerializationException",
    "SessionExpiredException",
    "SessionState",
    "StoreException",
    "SyncMethod",
    "ValidationException",
    "canonical_collection",
]
