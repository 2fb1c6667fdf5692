"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Every field has a default so a bare Settings() is a
working in-memory demo store.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sessionstore.core.constants import KEY_SEP, VALID_STORAGE_BACKENDS


class Settings(BaseSettings):
    """Session store settings loaded from environment and .env."""

    # App
    app_name: str = "sessionstore"
    app_version: str = "1.0.0"
    debug: bool = False

    # Storage: "memory" (process-local) or "redis" (session-scoped keys)
    storage_backend: str = "memory"
    storage_prefix: str = "blvckwall"
    anonymous_tenant_id: str = "demo-user-id"

    # Encryption at rest (optional). Both secret and salt are needed.
    storage_encryption_secret: SecretStr | None = None
    storage_encryption_salt: str = ""

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_session_namespace: str = "session"
    redis_session_ttl_seconds: int = 86400

    # Session
    session_ttl_hours: int = 24

    # Login throttling (per email, sliding window)
    login_max_attempts: int = 5
    login_attempt_window_seconds: int = 60

    # Password policy
    password_min_length: int = 8
    password_require_uppercase: bool = True
    password_require_digit: bool = True

    # Remote sync (fire-and-forget mirror of CRUD mutations)
    remote_sync_enabled: bool = False
    remote_sync_base_url: str = "http://localhost:3000"
    remote_sync_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_storage_and_session(self) -> "Settings":
        """Validate backend choice, key components and session values.

        - storage_prefix and anonymous_tenant_id must not contain the key separator.
        - An encryption secret requires a salt.
        """
        if self.storage_backend not in VALID_STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(repr(b) for b in VALID_STORAGE_BACKENDS)}"
            )
        for name in ("storage_prefix", "anonymous_tenant_id"):
            value = getattr(self, name)
            if not value or KEY_SEP in value:
                raise ValueError(
                    f"{name} must be non-empty and must not contain '{KEY_SEP}'"
                )
        if self.session_ttl_hours <= 0:
            raise ValueError("session_ttl_hours must be positive")
        if self.login_max_attempts <= 0 or self.login_attempt_window_seconds <= 0:
            raise ValueError("login throttling values must be positive")
        if (
            self.storage_encryption_secret
            and self.storage_encryption_secret.get_secret_value()
            and not self.storage_encryption_salt
        ):
            raise ValueError(
                "STORAGE_ENCRYPTION_SALT is required when STORAGE_ENCRYPTION_SECRET is set."
            )
        return self

    @property
    def encryption_enabled(self) -> bool:
        """True when values should be encrypted before reaching the substrate."""
        return bool(
            self.storage_encryption_secret
            and self.storage_encryption_secret.get_secret_value()
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
