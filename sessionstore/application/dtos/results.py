"""Result values returned by the UI-facing facades (no exceptions cross them)."""

from dataclasses import dataclass, field
from typing import Any

from sessionstore.domain.exceptions import StoreException

Record = dict[str, Any]


@dataclass(frozen=True)
class ErrorInfo:
    """Machine code plus human message; details never include storage keys."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: StoreException) -> "ErrorInfo":
        return cls(code=exc.error_code, message=exc.message, details=dict(exc.details))


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a DataStore CRUD call."""

    ok: bool
    data: Any = None
    error: ErrorInfo | None = None

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: ErrorInfo) -> "OperationResult":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class QueryResponse:
    """Outcome of a query-builder execution: data or error, never both set on failure."""

    data: Any = None
    error: ErrorInfo | None = None
