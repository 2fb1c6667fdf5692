"""Factory for creating the configured storage substrate."""

import logging

from sessionstore.application.interfaces.ports import StorageProtocol
from sessionstore.core.config import Settings
from sessionstore.infrastructure.storage.encrypted_storage import EncryptedStorage
from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage
from sessionstore.infrastructure.storage.redis_storage import RedisSessionStorage

logger = logging.getLogger(__name__)


class StorageFactory:
    """Creates the storage substrate for one session based on settings."""

    @staticmethod
    def create_storage(settings: Settings, session_id: str | None = None) -> StorageProtocol:
        """Create the substrate for settings.storage_backend.

        Args:
            settings: Backend choice, Redis connection and encryption settings.
            session_id: Session scope for the Redis backend.

        Returns:
            A StorageProtocol, wrapped in EncryptedStorage when a secret is set.

        Raises:
            ValueError: If storage_backend is unknown.
        """
        backend = settings.storage_backend.lower()
        storage: StorageProtocol
        if backend == "memory":
            storage = MemorySessionStorage()
        elif backend == "redis":
            storage = RedisSessionStorage(settings, session_id=session_id)
            logger.info(
                "Using Redis session storage at %s:%s",
                settings.redis_host,
                settings.redis_port,
            )
        else:
            raise ValueError(
                f"Unknown storage backend: {backend}. Supported backends: memory, redis"
            )
        if settings.encryption_enabled and settings.storage_encryption_secret:
            storage = EncryptedStorage(
                storage,
                settings.storage_encryption_secret.get_secret_value(),
                settings.storage_encryption_salt,
            )
        return storage
