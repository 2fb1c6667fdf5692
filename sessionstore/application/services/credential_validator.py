"""Credential format checks and login throttling for the auth simulator."""

from __future__ import annotations

import re
import time
from collections import defaultdict
from collections.abc import Callable
from threading import Lock

from sessionstore.core.config import Settings
from sessionstore.domain.exceptions import AuthenticationException

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL_MESSAGE = "Invalid email format"
RATE_LIMITED_MESSAGE = "Too many login attempts. Please try again later."


def validate_email(email: str) -> str:
    """Return the trimmed email.

    Raises:
        AuthenticationException: INVALID_EMAIL if the format is wrong.
    """
    candidate = (email or "").strip()
    if not EMAIL_PATTERN.match(candidate):
        raise AuthenticationException(INVALID_EMAIL_MESSAGE, "INVALID_EMAIL")
    return candidate


def password_policy_message(settings: Settings) -> str:
    """Human-readable description of the configured password policy."""
    parts = [f"at least {settings.password_min_length} characters"]
    extras = []
    if settings.password_require_uppercase:
        extras.append("1 uppercase letter")
    if settings.password_require_digit:
        extras.append("1 number")
    if extras:
        parts.append("with " + " and ".join(extras))
    return "Password must be " + " ".join(parts)


def validate_password(password: str, settings: Settings) -> None:
    """Check password against the configured policy.

    Raises:
        AuthenticationException: INVALID_PASSWORD if empty or below policy.
    """
    if not password:
        raise AuthenticationException("Password is required", "INVALID_PASSWORD")
    if (
        len(password) < settings.password_min_length
        or (settings.password_require_uppercase and not any(c.isupper() for c in password))
        or (settings.password_require_digit and not any(c.isdigit() for c in password))
    ):
        raise AuthenticationException(password_policy_message(settings), "INVALID_PASSWORD")


class LoginRateLimiter:
    """In-memory sliding window of login attempts per email."""

    def __init__(
        self,
        max_attempts: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._attempts: defaultdict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> LoginRateLimiter:
        return cls(settings.login_max_attempts, settings.login_attempt_window_seconds)

    def check(self, email: str) -> None:
        """Record an attempt for email.

        Raises:
            AuthenticationException: RATE_LIMITED if the window is already full.
        """
        now = self._clock()
        cutoff = now - self.window_seconds
        key = email.strip().lower()
        with self._lock:
            self._attempts[key] = [t for t in self._attempts[key] if t > cutoff]
            if len(self._attempts[key]) >= self.max_attempts:
                raise AuthenticationException(RATE_LIMITED_MESSAGE, "RATE_LIMITED")
            self._attempts[key].append(now)

    def reset(self, email: str | None = None) -> None:
        with self._lock:
            if email is None:
                self._attempts.clear()
            else:
                self._attempts.pop(email.strip().lower(), None)
