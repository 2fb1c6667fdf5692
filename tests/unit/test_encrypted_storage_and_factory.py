"""Tests for EncryptedStorage, StorageFactory and storage-related settings validation."""

import pytest
from pydantic import ValidationError

from sessionstore.core.config import Settings
from sessionstore.infrastructure.exceptions import DecryptionException
from sessionstore.infrastructure.storage.encrypted_storage import EncryptedStorage
from sessionstore.infrastructure.storage.factory import StorageFactory
from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage
from sessionstore.infrastructure.storage.redis_storage import RedisSessionStorage


def test_values_are_encrypted_at_rest() -> None:
    inner = MemorySessionStorage()
    encrypted = EncryptedStorage(inner, "secret", "salt")
    encrypted.set("k", '[{"id": "a"}]')
    assert inner.get("k") != '[{"id": "a"}]'
    assert encrypted.get("k") == '[{"id": "a"}]'


def test_keys_stay_plaintext() -> None:
    inner = MemorySessionStorage()
    encrypted = EncryptedStorage(inner, "secret", "salt")
    encrypted.set("blvckwall_t1_agents", "[]")
    assert encrypted.keys() == ["blvckwall_t1_agents"]


def test_wrong_key_raises_decryption_error() -> None:
    inner = MemorySessionStorage()
    EncryptedStorage(inner, "secret", "salt").set("k", "v")
    with pytest.raises(DecryptionException) as exc_info:
        EncryptedStorage(inner, "other-secret", "salt").get("k")
    assert exc_info.value.error_code == "STORAGE_ERROR"


def test_absent_key_returns_none() -> None:
    assert EncryptedStorage(MemorySessionStorage(), "s", "salt").get("k") is None


def test_factory_defaults_to_memory() -> None:
    storage = StorageFactory.create_storage(Settings(_env_file=None))
    assert isinstance(storage, MemorySessionStorage)


def test_factory_wraps_with_encryption_when_secret_set() -> None:
    settings = Settings(
        _env_file=None,
        storage_encryption_secret="s3cret",
        storage_encryption_salt="pepper",
    )
    assert isinstance(StorageFactory.create_storage(settings), EncryptedStorage)


def test_factory_builds_redis_backend() -> None:
    settings = Settings(_env_file=None, storage_backend="redis")
    storage = StorageFactory.create_storage(settings, session_id="abc")
    assert isinstance(storage, RedisSessionStorage)
    assert storage.session_id == "abc"


def test_settings_reject_unknown_backend() -> None:
    with pytest.raises(ValidationError, match="storage_backend"):
        Settings(_env_file=None, storage_backend="s3")


def test_settings_reject_prefix_with_separator() -> None:
    with pytest.raises(ValidationError, match="storage_prefix"):
        Settings(_env_file=None, storage_prefix="my_app")


def test_settings_require_salt_with_secret() -> None:
    with pytest.raises(ValidationError, match="SALT"):
        Settings(_env_file=None, storage_encryption_secret="s3cret")


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_TTL_HOURS", "2")
    monkeypatch.setenv("STORAGE_PREFIX", "acme")
    settings = Settings(_env_file=None)
    assert settings.session_ttl_hours == 2
    assert settings.storage_prefix == "acme"
