"""Simulated authentication and session lifecycle.

The session lives in an explicit SessionContext owned by AuthService; no
module-level state. States: ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED,
and AUTHENTICATED -> EXPIRED once the expiry marker passes. Credential
problems come back as failed AuthResults; unexpected errors are logged and
reported with a generic message.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sessionstore.application.dtos.session import AuthResult, SessionSnapshot, TenantUser
from sessionstore.application.services.credential_validator import (
    LoginRateLimiter,
    validate_email,
    validate_password,
)
from sessionstore.application.services.demo_data import KNOWN_COLLECTIONS
from sessionstore.core.config import Settings
from sessionstore.core.constants import (
    GENERIC_ERROR_MESSAGE,
    INTERNAL_ERROR_CODE,
    SESSION_EXPIRY_KEY,
    SESSION_USER_KEY,
)
from sessionstore.domain.enums import SessionState
from sessionstore.domain.exceptions import AuthenticationException
from sessionstore.infrastructure.exceptions import DecryptionException
from sessionstore.shared.telemetry.tracing import set_span_error, traced
from sessionstore.shared.utils.datetime import (
    from_timestamp_ms_utc,
    to_timestamp_ms,
    utc_now,
)
from sessionstore.shared.utils.generators import synthesize_tenant_id

if TYPE_CHECKING:
    from sessionstore.application.interfaces.ports import StorageProtocol
    from sessionstore.infrastructure.storage.collection_store import CollectionStore

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Mutable session state held by the auth service."""

    state: SessionState = SessionState.ANONYMOUS
    user: TenantUser | None = None
    expires_at: datetime | None = None

    def copy(self) -> SessionContext:
        return SessionContext(self.state, self.user, self.expires_at)


class AuthService:
    """Login, signup, logout, restore and expiry handling for one session."""

    def __init__(
        self,
        storage: StorageProtocol,
        collection_store: CollectionStore,
        settings: Settings,
        clock: Callable[[], datetime] = utc_now,
        rate_limiter: LoginRateLimiter | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            storage: Substrate that holds the session markers.
            collection_store: Engine used to seed and clear tenant collections.
            settings: TTL, password policy and anonymous tenant id.
            clock: Source of "now" (injected in tests).
            rate_limiter: Login throttle; built from settings when omitted.
        """
        self._storage = storage
        self._store = collection_store
        self._settings = settings
        self._clock = clock
        self._rate_limiter = rate_limiter or LoginRateLimiter.from_settings(settings)
        self._session = SessionContext()

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self._settings.session_ttl_hours)

    def current_session(self) -> SessionSnapshot:
        """Return the current session, expiring it first if its time has passed."""
        self.check_session()
        return SessionSnapshot(
            state=self._session.state,
            user=self._session.user,
            expires_at=self._session.expires_at,
            anonymous_tenant_id=self._settings.anonymous_tenant_id,
        )

    @traced("auth.login")
    async def login(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password.

        On success the tenant's known collections are seeded if absent.
        """
        try:
            email = validate_email(email)
            validate_password(password, self._settings)
            self._rate_limiter.check(email)
        except AuthenticationException as e:
            logger.info("Login rejected: %s", e.error_code)
            return AuthResult.fail(e.message, e.error_code)

        user = TenantUser(
            id=synthesize_tenant_id(email),
            email=email,
            metadata={"name": email.split("@", 1)[0]},
        )
        return self._start_session(user)

    @traced("auth.signup")
    async def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> AuthResult:
        """Create an account and sign in. First and last name are required."""
        try:
            email = validate_email(email)
            validate_password(password, self._settings)
            first = (first_name or "").strip()
            last = (last_name or "").strip()
            if not first or not last:
                raise AuthenticationException("First and last name are required", "MISSING_NAME")
        except AuthenticationException as e:
            logger.info("Signup rejected: %s", e.error_code)
            return AuthResult.fail(e.message, e.error_code)

        user = TenantUser(
            id=synthesize_tenant_id(email),
            email=email,
            metadata={"first_name": first, "last_name": last, "name": f"{first} {last}"},
        )
        return self._start_session(user)

    @traced("auth.logout")
    async def logout(self) -> AuthResult:
        """End the session: drop markers, clear the active tenant's data, go anonymous."""
        previous = self._session.copy()
        tenant_id = previous.user.id if previous.user else self._settings.anonymous_tenant_id
        try:
            self._storage.remove(SESSION_USER_KEY)
            self._storage.remove(SESSION_EXPIRY_KEY)
            self._store.clear_tenant(tenant_id)
        except Exception as e:
            logger.exception("Logout failed for tenant %s", tenant_id)
            set_span_error(e)
            return AuthResult.fail(GENERIC_ERROR_MESSAGE, INTERNAL_ERROR_CODE)
        finally:
            self._store.reset_cache()
        self._session = SessionContext()
        logger.info("Logged out tenant %s", tenant_id)
        return AuthResult.ok()

    @traced("auth.refresh_session")
    async def refresh_session(self) -> AuthResult:
        """Extend the expiry of a signed-in (or just expired) user's session."""
        user = self._session.user
        if user is None:
            return AuthResult.fail("No active session", "NO_SESSION")
        previous = self._session.copy()
        try:
            expires_at = self._write_markers(user)
        except Exception as e:
            logger.exception("Session refresh failed for tenant %s", user.id)
            set_span_error(e)
            self._session = previous
            return AuthResult.fail(GENERIC_ERROR_MESSAGE, INTERNAL_ERROR_CODE)
        self._session = SessionContext(SessionState.AUTHENTICATED, user, expires_at)
        logger.debug("Session refreshed for tenant %s", user.id)
        return AuthResult.ok(user)

    def restore(self) -> SessionSnapshot:
        """Rebuild the session from stored markers (on process start).

        Valid, unexpired markers resume AUTHENTICATED without a new login.
        Anything else removes the markers and starts ANONYMOUS.
        """
        try:
            raw_user = self._storage.get(SESSION_USER_KEY)
            raw_expiry = self._storage.get(SESSION_EXPIRY_KEY)
            if raw_user is None and raw_expiry is None:
                self._session = SessionContext()
                return self.current_session()
            user = TenantUser.from_dict(json.loads(raw_user or ""))
            expires_at = from_timestamp_ms_utc(int(raw_expiry or ""))
        except (ValueError, TypeError, OverflowError, OSError, DecryptionException) as e:
            logger.warning("Discarding unreadable session markers: %s", e)
            self._drop_markers()
            self._session = SessionContext()
            return self.current_session()
        if expires_at <= self._clock():
            logger.info("Stored session for tenant %s has expired", user.id)
            self._drop_markers()
            self._session = SessionContext()
            return self.current_session()
        self._session = SessionContext(SessionState.AUTHENTICATED, user, expires_at)
        logger.info("Restored session for tenant %s", user.id)
        return self.current_session()

    def check_session(self) -> SessionState:
        """Move AUTHENTICATED to EXPIRED once the expiry has passed; return the state."""
        session = self._session
        if (
            session.state == SessionState.AUTHENTICATED
            and session.expires_at is not None
            and session.expires_at <= self._clock()
        ):
            session.state = SessionState.EXPIRED
            logger.info("Session expired for tenant %s", session.user.id if session.user else "?")
        return session.state

    def _start_session(self, user: TenantUser) -> AuthResult:
        previous = self._session.copy()
        self._session = SessionContext(SessionState.AUTHENTICATING, user, None)
        try:
            expires_at = self._write_markers(user)
            self._store.ensure_seeded(user.id, KNOWN_COLLECTIONS)
        except Exception as e:
            logger.exception("Failed to start session for tenant %s", user.id)
            set_span_error(e)
            self._session = previous
            return AuthResult.fail(GENERIC_ERROR_MESSAGE, INTERNAL_ERROR_CODE)
        self._session = SessionContext(SessionState.AUTHENTICATED, user, expires_at)
        logger.info("Session started for tenant %s", user.id)
        return AuthResult.ok(user)

    def _write_markers(self, user: TenantUser) -> datetime:
        expires_at = self._clock() + self.session_ttl
        self._storage.set(SESSION_USER_KEY, json.dumps(user.to_dict()))
        self._storage.set(SESSION_EXPIRY_KEY, str(to_timestamp_ms(expires_at)))
        return expires_at

    def _drop_markers(self) -> None:
        self._storage.remove(SESSION_USER_KEY)
        self._storage.remove(SESSION_EXPIRY_KEY)
