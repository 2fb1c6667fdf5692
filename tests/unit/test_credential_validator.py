"""Tests for email/password checks and the login rate limiter."""

import pytest

from sessionstore.application.services.credential_validator import (
    LoginRateLimiter,
    password_policy_message,
    validate_email,
    validate_password,
)
from sessionstore.core.config import Settings
from sessionstore.domain.exceptions import AuthenticationException


@pytest.mark.parametrize("email", ["demo@x.com", "  a.b+c@sub.example.org  "])
def test_valid_emails(email: str) -> None:
    assert validate_email(email) == email.strip()


@pytest.mark.parametrize("email", ["", "demo", "demo@x", "de mo@x.com", "@x.com"])
def test_invalid_emails(email: str) -> None:
    with pytest.raises(AuthenticationException) as exc_info:
        validate_email(email)
    assert exc_info.value.error_code == "INVALID_EMAIL"
    assert exc_info.value.message == "Invalid email format"


def test_default_policy_message(settings: Settings) -> None:
    assert password_policy_message(settings) == (
        "Password must be at least 8 characters with 1 uppercase letter and 1 number"
    )


@pytest.mark.parametrize("password", ["short1A", "alllowercase1", "NODIGITSHERE"])
def test_weak_passwords_rejected(settings: Settings, password: str) -> None:
    with pytest.raises(AuthenticationException) as exc_info:
        validate_password(password, settings)
    assert exc_info.value.error_code == "INVALID_PASSWORD"


def test_empty_password_rejected(settings: Settings) -> None:
    with pytest.raises(AuthenticationException, match="required"):
        validate_password("", settings)


def test_policy_is_configurable() -> None:
    relaxed = Settings(
        _env_file=None,
        password_min_length=4,
        password_require_uppercase=False,
        password_require_digit=False,
    )
    validate_password("abcd", relaxed)
    assert password_policy_message(relaxed) == "Password must be at least 4 characters"


def test_strong_password_accepted(settings: Settings) -> None:
    validate_password("Password123", settings)


class TestLoginRateLimiter:
    def _limiter(self) -> tuple[LoginRateLimiter, list[float]]:
        now = [100.0]
        return LoginRateLimiter(5, 60, clock=lambda: now[0]), now

    def test_sixth_attempt_in_window_is_blocked(self) -> None:
        limiter, _ = self._limiter()
        for _ in range(5):
            limiter.check("demo@x.com")
        with pytest.raises(AuthenticationException) as exc_info:
            limiter.check("demo@x.com")
        assert exc_info.value.error_code == "RATE_LIMITED"
        assert exc_info.value.message == "Too many login attempts. Please try again later."

    def test_window_slides(self) -> None:
        limiter, now = self._limiter()
        for _ in range(5):
            limiter.check("demo@x.com")
        now[0] += 61
        limiter.check("demo@x.com")

    def test_emails_counted_separately_and_case_insensitively(self) -> None:
        limiter, _ = self._limiter()
        for _ in range(5):
            limiter.check("Demo@X.com")
        limiter.check("other@x.com")
        with pytest.raises(AuthenticationException):
            limiter.check("demo@x.com")

    def test_reset(self) -> None:
        limiter, _ = self._limiter()
        for _ in range(5):
            limiter.check("demo@x.com")
        limiter.reset("demo@x.com")
        limiter.check("demo@x.com")
