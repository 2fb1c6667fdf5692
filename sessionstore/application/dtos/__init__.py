"""Application DTOs."""

from sessionstore.application.dtos.results import (
    ErrorInfo,
    OperationResult,
    QueryResponse,
    Record,
)
from sessionstore.application.dtos.session import AuthResult, SessionSnapshot, TenantUser

__all__ = [
    "AuthResult",
    "ErrorInfo",
    "OperationResult",
    "QueryResponse",
    "Record",
    "SessionSnapshot",
    "TenantUser",
]
