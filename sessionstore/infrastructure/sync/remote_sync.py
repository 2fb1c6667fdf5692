"""Best-effort remote sync of CRUD mutations.

The local store is the source of truth. Each mutation schedules one HTTP call
(POST /api/<collection>, PATCH or DELETE /api/<collection>/<id>) as a detached
asyncio task; the caller never awaits it and its outcome is only logged.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any
from urllib.parse import quote

import httpx

from sessionstore.core.config import Settings
from sessionstore.domain.enums import SyncMethod, canonical_collection

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def api_path(collection: str, record_id: str | None = None) -> str:
    """Return the remote API path for a collection (kebab-case) and optional record id.

    Example: api_path("conversationFlows", "flow_1") -> "/api/conversation-flows/flow_1".
    """
    name = canonical_collection(collection)
    segment = _CAMEL_BOUNDARY.sub("-", name).replace("_", "-").lower()
    path = f"/api/{segment}"
    if record_id:
        path = f"{path}/{quote(record_id, safe='')}"
    return path


class NullRemoteSync:
    """Remote sync that does nothing (sync disabled)."""

    def dispatch(
        self,
        method: SyncMethod,
        collection: str,
        record_id: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        return None

    async def drain(self) -> None:
        return None

    async def aclose(self) -> None:
        return None


class RemoteSyncClient:
    """Schedules remote mirror calls on an httpx.AsyncClient.

    References to in-flight tasks are kept until they finish so they are not
    garbage-collected mid-flight.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Remote API origin (e.g. http://localhost:3000).
            timeout: Per-request timeout in seconds.
            client: Optional pre-built client (tests pass one with MockTransport).
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(
        self,
        method: SyncMethod,
        collection: str,
        record_id: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Schedule the remote call and return immediately.

        Skipped (with a debug log) when no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping remote sync for %s", collection)
            return
        path = api_path(collection, record_id)
        task = loop.create_task(self._send(SyncMethod(method), path, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _send(self, method: SyncMethod, path: str, payload: dict[str, Any] | None) -> None:
        try:
            if method == SyncMethod.DELETE:
                resp = await self._client.delete(path)
            else:
                resp = await self._client.request(method.value, path, json=payload)
            resp.raise_for_status()
            logger.debug("Remote sync %s %s -> %s", method.value, path, resp.status_code)
        except httpx.HTTPError as e:
            logger.warning("Remote sync %s %s failed: %s", method.value, path, e)
        except Exception:
            logger.exception("Unexpected remote sync failure for %s %s", method.value, path)

    async def drain(self) -> None:
        """Wait for every in-flight sync call to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        if self._owns_client:
            await self._client.aclose()


def create_remote_sync(settings: Settings) -> RemoteSyncClient | NullRemoteSync:
    """Return a RemoteSyncClient when remote sync is enabled, else NullRemoteSync."""
    if not settings.remote_sync_enabled:
        return NullRemoteSync()
    logger.info("Remote sync enabled against %s", settings.remote_sync_base_url)
    return RemoteSyncClient(
        settings.remote_sync_base_url,
        timeout=settings.remote_sync_timeout_seconds,
    )
