"""Generic create/read/update/delete/list over any named collection.

The tenant id is passed explicitly to every call. Writes validate first, then
run one load-mutate-save cycle through the shared CollectionStore, then hand
the mutation to remote sync without waiting for it.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sessionstore.application.services.collection_schemas import SchemaRegistry
from sessionstore.core.constants import IMMUTABLE_RECORD_FIELDS
from sessionstore.domain.enums import SyncMethod, canonical_collection
from sessionstore.domain.exceptions import ResourceNotFoundException
from sessionstore.shared.telemetry.tracing import add_span_attributes, traced
from sessionstore.shared.utils.datetime import to_iso, utc_now
from sessionstore.shared.utils.generators import generate_record_id

if TYPE_CHECKING:
    from sessionstore.application.interfaces.ports import IRemoteSync
    from sessionstore.infrastructure.storage.collection_store import CollectionStore

logger = logging.getLogger(__name__)

Record = dict[str, Any]

# Id prefixes for known collections; others drop a trailing "s".
_ID_PREFIXES = {
    "agents": "agent",
    "calls": "call",
    "complianceScripts": "script",
    "conversationFlows": "flow",
    "knowledgeBases": "kb",
    "videoSummaries": "video",
    "phoneNumbers": "phone",
}


def id_prefix(collection: str) -> str:
    """Singular id prefix for a collection (e.g. 'agents' -> 'agent')."""
    name = canonical_collection(collection)
    if name in _ID_PREFIXES:
        return _ID_PREFIXES[name]
    singular = name[:-1] if name.endswith("s") and len(name) > 1 else name
    return singular.replace("_", "-")


def next_timestamp(record: Mapping[str, Any], now: datetime) -> str:
    """ISO timestamp for an update: now, but never earlier than the record's last timestamp."""
    stamp = to_iso(now)
    previous = record.get("updated_at") or record.get("created_at")
    if isinstance(previous, str) and previous > stamp:
        return previous
    return stamp


def new_record(
    collection: str,
    data: Mapping[str, Any],
    tenant_id: str,
    now: datetime,
) -> Record:
    """Apply creation stamps: id and created_at if absent, version 1, owning tenant."""
    record: Record = dict(data)
    if not record.get("id"):
        record["id"] = generate_record_id(id_prefix(collection))
    if not record.get("created_at"):
        record["created_at"] = to_iso(now)
    record["version"] = 1
    record["user_id"] = tenant_id
    return record


def merge_patch(record: Mapping[str, Any], patch: Mapping[str, Any], now: datetime) -> Record:
    """Merge patch over record, keep id/created_at/user_id, stamp updated_at and bump version."""
    merged: Record = {**record}
    for field, value in patch.items():
        if field in IMMUTABLE_RECORD_FIELDS or field == "version":
            continue
        merged[field] = value
    previous_version = record.get("version")
    if not isinstance(previous_version, int) or isinstance(previous_version, bool) or previous_version < 1:
        previous_version = 1
    merged["version"] = previous_version + 1
    merged["updated_at"] = next_timestamp(record, now)
    return merged


class CollectionManager:
    """CRUD over named collections for an explicitly given tenant."""

    def __init__(
        self,
        store: CollectionStore,
        schemas: SchemaRegistry | None = None,
        remote_sync: IRemoteSync | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Shared namespaced collection engine.
            schemas: Registry used to validate writes; built-in schemas by default.
            remote_sync: Receives every successful mutation; None disables sync.
            clock: Source of "now" (injected in tests).
        """
        self.store = store
        self.schemas = schemas or SchemaRegistry()
        self._remote_sync = remote_sync
        self._clock = clock

    @traced("collection.create")
    async def create(self, tenant_id: str, collection: str, data: Mapping[str, Any]) -> Record:
        """Validate and prepend a new record.

        Returns:
            The stored record.

        Raises:
            ValidationException: If data fails the collection schema (nothing is written).
        """
        name = canonical_collection(collection)
        record = new_record(name, data, tenant_id, self._clock())
        self.schemas.ensure_valid(name, record)

        records = self.store.load(tenant_id, name)
        # Drop a stale row with the same caller-supplied id so ids stay unique.
        records = [r for r in records if r.get("id") != record["id"]]
        records.insert(0, record)
        self.store.save(tenant_id, name, records)
        add_span_attributes(collection=name, record_count=len(records))
        logger.debug("Created %s record %s", name, record["id"])

        self._sync(SyncMethod.POST, name, None, record)
        return copy.deepcopy(record)

    def read(self, tenant_id: str, collection: str, record_id: str) -> Record | None:
        """Return the record with record_id, or None when absent."""
        for record in self.store.load(tenant_id, collection):
            if record.get("id") == record_id:
                return record
        return None

    @traced("collection.update")
    async def update(
        self,
        tenant_id: str,
        collection: str,
        record_id: str,
        patch: Mapping[str, Any],
    ) -> Record:
        """Merge patch into an existing record and bump its version.

        Raises:
            ResourceNotFoundException: If no record has record_id.
            ValidationException: If the merged record fails the schema (nothing is written).
        """
        name = canonical_collection(collection)
        records = self.store.load(tenant_id, name)
        index = next((i for i, r in enumerate(records) if r.get("id") == record_id), None)
        if index is None:
            raise ResourceNotFoundException(name, record_id)

        updated = merge_patch(records[index], patch, self._clock())
        self.schemas.ensure_valid(name, updated)
        records[index] = updated
        self.store.save(tenant_id, name, records)
        logger.debug("Updated %s record %s to version %s", name, record_id, updated["version"])

        self._sync(SyncMethod.PATCH, name, record_id, dict(patch))
        return copy.deepcopy(updated)

    @traced("collection.delete")
    async def delete(self, tenant_id: str, collection: str, record_id: str) -> None:
        """Remove the record with record_id. Deleting an absent record is a no-op."""
        name = canonical_collection(collection)
        records = self.store.load(tenant_id, name)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) != len(records):
            self.store.save(tenant_id, name, remaining)
            logger.debug("Deleted %s record %s", name, record_id)
        self._sync(SyncMethod.DELETE, name, record_id, None)

    def list(self, tenant_id: str, collection: str) -> list[Record]:
        """Return every record of the collection, newest-first (seeded on first access)."""
        return self.store.load(tenant_id, collection)

    def clear(self, tenant_id: str) -> int:
        """Remove all of a tenant's collections; return the number of keys removed."""
        return self.store.clear_tenant(tenant_id)

    def _sync(
        self,
        method: SyncMethod,
        collection: str,
        record_id: str | None,
        payload: dict[str, Any] | None,
    ) -> None:
        if self._remote_sync is None:
            return
        try:
            self._remote_sync.dispatch(method, collection, record_id, payload)
        except Exception:
            logger.exception("Failed to schedule remote sync for %s", collection)
