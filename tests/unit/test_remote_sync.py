"""Tests for RemoteSyncClient (fire-and-forget dispatch via httpx.MockTransport)."""

import json
import logging

import httpx
import pytest

from sessionstore.application.services.collection_manager import CollectionManager
from sessionstore.core.config import Settings
from sessionstore.domain.enums import SyncMethod
from sessionstore.infrastructure.storage.collection_store import CollectionStore
from sessionstore.infrastructure.sync.remote_sync import (
    NullRemoteSync,
    RemoteSyncClient,
    api_path,
    create_remote_sync,
)


def _client(handler) -> RemoteSyncClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    return RemoteSyncClient("http://test", client=http)


@pytest.mark.parametrize(
    ("collection", "record_id", "expected"),
    [
        ("agents", None, "/api/agents"),
        ("conversationFlows", "flow_1", "/api/conversation-flows/flow_1"),
        ("knowledge_bases", "kb 1", "/api/knowledge-bases/kb%201"),
        ("phoneNumbers", None, "/api/phone-numbers"),
    ],
)
def test_api_path(collection: str, record_id: str | None, expected: str) -> None:
    assert api_path(collection, record_id) == expected


@pytest.mark.asyncio
async def test_dispatch_sends_request_in_background() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"ok": True})

    sync = _client(handler)
    sync.dispatch(SyncMethod.POST, "agents", None, {"id": "agent_x", "name": "Bot"})
    sync.dispatch(SyncMethod.PATCH, "agents", "agent_x", {"name": "Bot2"})
    sync.dispatch(SyncMethod.DELETE, "agents", "agent_x")
    await sync.drain()

    assert {(r.method, r.url.path) for r in seen} == {
        ("POST", "/api/agents"),
        ("PATCH", "/api/agents/agent_x"),
        ("DELETE", "/api/agents/agent_x"),
    }
    post = next(r for r in seen if r.method == "POST")
    assert json.loads(post.content) == {"id": "agent_x", "name": "Bot"}
    assert sync.pending == 0
    await sync.aclose()


@pytest.mark.asyncio
async def test_http_error_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    sync = _client(lambda request: httpx.Response(500))
    with caplog.at_level(logging.WARNING):
        sync.dispatch(SyncMethod.POST, "agents", None, {"name": "Bot"})
        await sync.drain()
    assert "Remote sync POST /api/agents failed" in caplog.text
    await sync.aclose()


@pytest.mark.asyncio
async def test_connection_error_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    sync = _client(handler)
    with caplog.at_level(logging.WARNING):
        sync.dispatch(SyncMethod.DELETE, "calls", "call_1")
        await sync.drain()
    assert "failed" in caplog.text
    await sync.aclose()


def test_dispatch_without_running_loop_is_skipped() -> None:
    sync = _client(lambda request: httpx.Response(200))
    sync.dispatch(SyncMethod.POST, "agents", None, {})
    assert sync.pending == 0


@pytest.mark.asyncio
async def test_null_remote_sync_is_noop() -> None:
    sync = NullRemoteSync()
    sync.dispatch(SyncMethod.POST, "agents")
    await sync.drain()
    await sync.aclose()


@pytest.mark.asyncio
async def test_create_remote_sync_follows_settings() -> None:
    assert isinstance(create_remote_sync(Settings(_env_file=None)), NullRemoteSync)
    enabled = create_remote_sync(Settings(_env_file=None, remote_sync_enabled=True))
    assert isinstance(enabled, RemoteSyncClient)
    await enabled.aclose()


@pytest.mark.asyncio
async def test_remote_failure_never_reaches_crud_caller(store: CollectionStore, clock) -> None:
    sync = _client(lambda request: httpx.Response(503))
    manager = CollectionManager(store, remote_sync=sync, clock=clock)
    record = await manager.create("tenant-a", "agents", {"name": "Bot"})
    await sync.drain()
    assert manager.read("tenant-a", "agents", record["id"]) == record
    await sync.aclose()
