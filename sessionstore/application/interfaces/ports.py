"""Ports (protocols) for storage substrates, remote sync and session lookup.

Infrastructure implementations must fulfill these contracts; application
services depend only on them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from sessionstore.application.dtos.session import SessionSnapshot
    from sessionstore.domain.enums import SyncMethod


class StorageProtocol(Protocol):
    """Session-scoped string key/value substrate. No business logic.

    Implementations raise StorageException on I/O failure.
    """

    def get(self, key: str) -> str | None:
        """Return the stored string for key, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any existing value."""
        ...

    def remove(self, key: str) -> None:
        """Delete key. No error if absent."""
        ...

    def clear(self) -> None:
        """Delete every key in this substrate."""
        ...

    def keys(self) -> list[str]:
        """Return every key currently stored."""
        ...


class IRemoteSync(Protocol):
    """Fire-and-forget mirror of local mutations to a remote API."""

    def dispatch(
        self,
        method: SyncMethod,
        collection: str,
        record_id: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Schedule the remote call; never raises, never blocks."""
        ...

    async def drain(self) -> None:
        """Wait for in-flight calls (used on shutdown and in tests)."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


class ISessionProvider(Protocol):
    """Anything that can report the current session (the auth service)."""

    def current_session(self) -> SessionSnapshot:
        """Return the current session snapshot."""
        ...
