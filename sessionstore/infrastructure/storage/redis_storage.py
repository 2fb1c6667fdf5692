"""Redis-backed storage substrate scoped to one session.

Every key is stored as '<namespace>:<session_id>:<key>' with a sliding TTL,
so a session's data disappears on its own once the session is abandoned.
clear() and keys() only ever touch the current session's namespace.
"""

from __future__ import annotations

import logging

import redis

from sessionstore.core.config import Settings
from sessionstore.infrastructure.exceptions import StorageException
from sessionstore.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

_SCAN_BATCH = 500


class RedisSessionStorage:
    """StorageProtocol implementation on a synchronous redis client."""

    def __init__(
        self,
        settings: Settings,
        session_id: str | None = None,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize the substrate.

        Args:
            settings: Redis connection, namespace and TTL settings.
            session_id: Session scope; a new CUID when omitted.
            redis_client: Optional client for testing or DI.
        """
        self.session_id = session_id or generate_cuid()
        self._ttl = settings.redis_session_ttl_seconds
        self._namespace = f"{settings.redis_session_namespace}:{self.session_id}:"
        self.redis = redis_client or redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password.get_secret_value() if settings.redis_password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )

    def _full_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get(self, key: str) -> str | None:
        try:
            value = self.redis.get(self._full_key(key))
        except redis.RedisError as e:
            raise StorageException("get", str(e)) from e
        if isinstance(value, bytes):
            return value.decode()
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.redis.set(self._full_key(key), value, ex=self._ttl)
        except redis.RedisError as e:
            raise StorageException("set", str(e)) from e

    def remove(self, key: str) -> None:
        try:
            self.redis.delete(self._full_key(key))
        except redis.RedisError as e:
            raise StorageException("remove", str(e)) from e

    def keys(self) -> list[str]:
        try:
            found = self.redis.scan_iter(match=f"{self._namespace}*", count=_SCAN_BATCH)
            return [
                (k.decode() if isinstance(k, bytes) else k)[len(self._namespace):]
                for k in found
            ]
        except redis.RedisError as e:
            raise StorageException("keys", str(e)) from e

    def clear(self) -> None:
        """Delete every key of this session in chunks (SCAN + UNLINK)."""
        full_keys = [self._full_key(k) for k in self.keys()]
        try:
            for start in range(0, len(full_keys), _SCAN_BATCH):
                self.redis.unlink(*full_keys[start:start + _SCAN_BATCH])
        except redis.RedisError as e:
            raise StorageException("clear", str(e)) from e
        logger.debug("Redis session %s cleared (%d keys)", self.session_id, len(full_keys))

    def close(self) -> None:
        try:
            self.redis.close()
        except redis.RedisError:
            logger.warning("Redis close failed for session %s", self.session_id, exc_info=True)
