"""Namespaced collection engine shared by the CRUD manager and the query client.

Each (tenant, collection) pair is one JSON array stored under
'<prefix>_<tenantId>_<collection>'. An absent key is seeded with demo data on
first read and written back. Both facades go through this class only, so they
always observe the same records.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

from sessionstore.application.interfaces.ports import StorageProtocol
from sessionstore.application.services import demo_data
from sessionstore.domain.enums import canonical_collection
from sessionstore.domain.exceptions import SerializationException
from sessionstore.infrastructure.exceptions import DecryptionException
from sessionstore.infrastructure.storage.keys import storage_key, tenant_namespace

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Seeder = Callable[[str], list[Record]]


class CollectionStore:
    """Load/save record arrays for a tenant through a storage substrate.

    Parsed arrays are cached per storage key together with the raw string they
    came from; a cache entry is only used while the substrate still holds that
    exact string. Callers always receive deep copies.
    """

    def __init__(
        self,
        storage: StorageProtocol,
        prefix: str,
        seeder: Seeder = demo_data.seed,
    ) -> None:
        """Initialize the engine.

        Args:
            storage: Substrate holding the JSON arrays.
            prefix: Fixed key prefix (settings.storage_prefix).
            seeder: Returns demo records for an absent collection.
        """
        self.storage = storage
        self.prefix = prefix
        self._seeder = seeder
        self._cache: dict[str, tuple[str, list[Record]]] = {}

    def key_for(self, tenant_id: str, collection: str) -> str:
        return storage_key(self.prefix, tenant_id, canonical_collection(collection))

    def load(self, tenant_id: str, collection: str, *, strict: bool = False) -> list[Record]:
        """Return the tenant's records for collection, seeding on first access.

        Args:
            tenant_id: Tenant whose namespace is read.
            collection: Collection or table name.
            strict: Raise instead of returning [] when stored data is corrupt.

        Returns:
            Records, newest-first.

        Raises:
            SerializationException: If stored data is corrupt and strict is True.
        """
        name = canonical_collection(collection)
        key = self.key_for(tenant_id, name)
        try:
            raw = self._read_raw(name, key)
            if raw is not None:
                cached = self._cache.get(key)
                if cached is not None and cached[0] == raw:
                    logger.debug("Collection cache hit: %s", name)
                    return copy.deepcopy(cached[1])
                records = self._decode(name, raw)
        except SerializationException as e:
            logger.error("Corrupt stored data for collection %s (tenant %s): %s", name, tenant_id, e.message)
            self._cache.pop(key, None)
            if strict:
                raise
            return []

        if raw is None:
            seeded = self._seeder(name)
            self._write(key, seeded)
            if seeded:
                logger.info("Seeded %d demo records into %s for tenant %s", len(seeded), name, tenant_id)
            return copy.deepcopy(seeded)
        self._cache[key] = (raw, records)
        return copy.deepcopy(records)

    def save(self, tenant_id: str, collection: str, records: list[Record]) -> None:
        """Serialize and write the full record array for a tenant's collection."""
        self._write(self.key_for(tenant_id, collection), records)

    def ensure_seeded(self, tenant_id: str, collections: Iterable[str]) -> list[str]:
        """Seed every listed collection whose key is absent.

        Collections that already have a stored value (even an empty or corrupt
        one) are left untouched.

        Returns:
            Names of the collections that were seeded.
        """
        seeded: list[str] = []
        for collection in collections:
            name = canonical_collection(collection)
            key = self.key_for(tenant_id, name)
            try:
                present = self.storage.get(key) is not None
            except DecryptionException:
                present = True
            if not present:
                self._write(key, self._seeder(name))
                seeded.append(name)
        if seeded:
            logger.info("Seeded collections for tenant %s: %s", tenant_id, ", ".join(seeded))
        return seeded

    def clear_tenant(self, tenant_id: str) -> int:
        """Remove every key in the tenant's namespace; return how many were removed."""
        namespace = tenant_namespace(self.prefix, tenant_id)
        removed = 0
        for key in self.storage.keys():
            if key.startswith(namespace):
                self.storage.remove(key)
                self._cache.pop(key, None)
                removed += 1
        logger.info("Cleared %d collection keys for tenant %s", removed, tenant_id)
        return removed

    def reset_cache(self) -> None:
        self._cache.clear()

    def _write(self, key: str, records: list[Record]) -> None:
        raw = json.dumps(records, ensure_ascii=False)
        self.storage.set(key, raw)
        self._cache[key] = (raw, copy.deepcopy(records))
        logger.debug("Saved %d records under collection key", len(records))

    def _read_raw(self, collection: str, key: str) -> str | None:
        """Stored string for key, or None when absent. Undecryptable values are corrupt."""
        try:
            return self.storage.get(key)
        except DecryptionException as e:
            raise SerializationException(collection, "value could not be decrypted") from e

    @staticmethod
    def _decode(collection: str, raw: str) -> list[Record]:
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise SerializationException(collection, f"invalid JSON ({e.msg})") from e
        if not isinstance(value, list):
            raise SerializationException(collection, f"expected a list, got {type(value).__name__}")
        if not all(isinstance(item, dict) for item in value):
            raise SerializationException(collection, "every record must be an object")
        return value
