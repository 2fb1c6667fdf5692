"""Process-local storage substrate (lifetime of one session)."""

import logging
from threading import Lock

logger = logging.getLogger(__name__)


class MemorySessionStorage:
    """Dict-backed StorageProtocol implementation.

    Values are plain strings, as in any browser-style key/value store. The
    lock keeps get/set atomic when the store is touched from worker threads.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Storage values must be str, got {type(value).__name__}")
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            count = len(self._data)
            self._data.clear()
        logger.debug("Memory storage cleared (%d keys)", count)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
