"""Tests for the query-builder facade (chains, tenant resolution, facade equivalence)."""

import pytest

from sessionstore.application.services.auth_service import AuthService
from sessionstore.application.services.collection_manager import CollectionManager
from sessionstore.application.services.demo_data import seed
from sessionstore.infrastructure.query.client import QueryClient, parse_columns
from sessionstore.infrastructure.storage.collection_store import CollectionStore
from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage
from sessionstore.shared.utils.generators import synthesize_tenant_id

EMAIL = "demo@x.com"
PASSWORD = "Password123"


@pytest.fixture
async def signed_in(auth: AuthService) -> str:
    """Log in and return the tenant id."""
    await auth.login(EMAIL, PASSWORD)
    return synthesize_tenant_id(EMAIL)


@pytest.mark.parametrize(
    ("columns", "expected"),
    [
        ("*", None),
        ("id, name", ["id", "name"]),
        ("*, agent:agents(name)", None),
        ("id, agent:agents(name, voice)", ["id"]),
        ("agent:agents(name)", None),
    ],
)
def test_parse_columns(columns: str, expected: list[str] | None) -> None:
    assert parse_columns(columns) == expected


def test_anonymous_session_reads_demo_tenant(query: QueryClient) -> None:
    response = query.from_("agents").select().execute()
    assert response.error is None
    assert response.data == seed("agents")


def test_select_eq_single(query: QueryClient) -> None:
    response = query.from_("agents").select("*").eq("id", "agent_2").single().execute()
    assert response.data["name"] == "Dr. Michael Chen"


def test_single_without_match_is_none_not_error(query: QueryClient) -> None:
    response = query.from_("agents").select().eq("id", "missing").single().execute()
    assert response.data is None
    assert response.error is None


def test_order_desc_and_limit(query: QueryClient) -> None:
    response = query.from_("calls").select().order("started_at", desc=True).limit(2).execute()
    assert [r["id"] for r in response.data] == ["call_3", "call_2"]


def test_order_puts_missing_values_last(query: QueryClient) -> None:
    response = query.from_("calls").select().order("sentiment").execute()
    assert [r["sentiment"] for r in response.data] == ["neutral", "positive", None]


def test_filters_combine_with_and(query: QueryClient) -> None:
    response = (
        query.from_("calls")
        .select("*, agent:agents(name)")
        .eq("direction", "inbound")
        .eq("agent_id", "agent_1")
        .execute()
    )
    assert [r["id"] for r in response.data] == ["call_1", "call_3"]


def test_projection(query: QueryClient) -> None:
    response = query.from_("agents").select("id, name").limit(1).execute()
    assert response.data == [{"id": "agent_1", "name": "Dr. Sarah Johnson"}]


def test_snake_case_table_alias(query: QueryClient) -> None:
    response = query.table("compliance_scripts").select("id").execute()
    assert [r["id"] for r in response.data] == [r["id"] for r in seed("complianceScripts")]


@pytest.mark.asyncio
async def test_insert_select_single_visible_to_crud_list(
    query: QueryClient, manager: CollectionManager, signed_in: str
) -> None:
    response = await query.from_("agents").insert([{"name": "Bot"}]).select().single()
    row = response.data
    assert response.error is None
    assert row["id"].startswith("agent_")
    assert row["version"] == 1
    assert row["user_id"] == signed_in
    assert row["created_at"]
    assert manager.list(signed_in, "agents")[0] == row


@pytest.mark.asyncio
async def test_crud_create_visible_to_query(
    query: QueryClient, manager: CollectionManager, signed_in: str
) -> None:
    record = await manager.create(signed_in, "agents", {"name": "Bot"})
    response = query.from_("agents").select().eq("id", record["id"]).single().execute()
    assert response.data == record


def test_insert_without_select_returns_no_data(
    query: QueryClient, store: CollectionStore, settings
) -> None:
    response = query.from_("calls").insert({"agent_id": "agent_1", "direction": "outbound", "status": "started"}).execute()
    assert response.data is None
    assert response.error is None
    stored = store.load(settings.anonymous_tenant_id, "calls")
    assert stored[0]["status"] == "started"


def test_batch_insert_with_repeated_id_keeps_last_row(
    query: QueryClient, store: CollectionStore, settings
) -> None:
    response = (
        query.from_("agents")
        .insert([{"id": "dup", "name": "A"}, {"id": "dup", "name": "B"}])
        .select()
        .execute()
    )
    assert [r["name"] for r in response.data] == ["B"]
    ids = [r["id"] for r in store.load(settings.anonymous_tenant_id, "agents")]
    assert ids.count("dup") == 1
    assert len(ids) == len(seed("agents")) + 1


def test_negative_limit_is_an_error_result(query: QueryClient) -> None:
    response = query.from_("agents").select().limit(-1).execute()
    assert response.data is None
    assert response.error.code == "INVALID_QUERY"


def test_update_eq_select_single(query: QueryClient, clock) -> None:
    clock.advance(minutes=1)
    response = (
        query.from_("agents").update({"name": "Renamed"}).eq("id", "agent_1").select().single().execute()
    )
    assert response.data["name"] == "Renamed"
    assert response.data["version"] == 2
    assert response.data["updated_at"]
    check = query.from_("agents").select().eq("id", "agent_1").single().execute()
    assert check.data == response.data


def test_update_without_filter_changes_nothing(query: QueryClient) -> None:
    response = query.from_("agents").update({"name": "All"}).select().execute()
    assert response.data == []
    assert query.from_("agents").select().execute().data == seed("agents")


def test_delete_eq(query: QueryClient, store: CollectionStore, settings) -> None:
    response = query.from_("agents").delete().eq("id", "agent_1").execute()
    assert response.error is None
    ids = [r["id"] for r in store.load(settings.anonymous_tenant_id, "agents")]
    assert "agent_1" not in ids
    assert len(ids) == len(seed("agents")) - 1


def test_delete_without_filter_changes_nothing(query: QueryClient) -> None:
    query.from_("agents").delete().execute()
    assert query.from_("agents").select().execute().data == seed("agents")


@pytest.mark.asyncio
async def test_expired_session_returns_error(query: QueryClient, signed_in: str, clock) -> None:
    clock.advance(hours=25)
    response = query.from_("agents").select().execute()
    assert response.data is None
    assert response.error.code == "SESSION_EXPIRED"


def test_corrupt_data_returns_error(
    query: QueryClient, storage: MemorySessionStorage, settings
) -> None:
    storage.set(f"blvckwall_{settings.anonymous_tenant_id}_agents", "not json")
    response = query.from_("agents").select().execute()
    assert response.data is None
    assert response.error.code == "SERIALIZATION_ERROR"
    assert "blvckwall" not in response.error.message


def test_unexpected_error_is_generic(query: QueryClient) -> None:
    query.from_("notes").insert([{"id": "a", "rank": 1}, {"id": "b", "rank": "x"}]).execute()
    response = query.from_("notes").select().order("rank").execute()
    assert response.error.code == "INTERNAL_ERROR"
    assert response.error.message == "Something went wrong. Please try again."
