"""DTOs for session and authentication results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sessionstore.domain.enums import SessionState


@dataclass(frozen=True)
class TenantUser:
    """Signed-in user. Its id is the tenant id for every storage key it owns."""

    id: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return str(self.metadata.get("name") or self.email)

    def to_dict(self) -> dict[str, Any]:
        """Shape written to the currentUser session marker."""
        return {"id": self.id, "email": self.email, "user_metadata": dict(self.metadata)}

    @classmethod
    def from_dict(cls, data: Any) -> "TenantUser":
        """Build from a decoded currentUser marker.

        Raises:
            ValueError: If data is not an object or id or email is missing.
        """
        if not isinstance(data, dict):
            raise ValueError("currentUser marker must be an object")
        user_id = data.get("id")
        email = data.get("email")
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            raise ValueError("currentUser marker is missing id or email")
        metadata = data.get("user_metadata") or {}
        if not isinstance(metadata, dict):
            metadata = {}
        return cls(id=user_id, email=email, metadata=dict(metadata))


@dataclass(frozen=True)
class SessionSnapshot:
    """Point-in-time view of the session (state, user, expiry).

    tenant_id is the user id when authenticated, the anonymous tenant id when
    anonymous, and None while authenticating or after expiry.
    """

    state: SessionState
    user: TenantUser | None = None
    expires_at: datetime | None = None
    anonymous_tenant_id: str | None = None

    @property
    def tenant_id(self) -> str | None:
        if self.state == SessionState.AUTHENTICATED and self.user is not None:
            return self.user.id
        if self.state == SessionState.ANONYMOUS:
            return self.anonymous_tenant_id
        return None

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED


@dataclass(frozen=True)
class AuthResult:
    """Outcome of login, signup, logout or refresh. Never raises to the caller."""

    success: bool
    user: TenantUser | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, user: TenantUser | None = None) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, error: str, error_code: str) -> "AuthResult":
        return cls(success=False, error=error, error_code=error_code)
