"""Storage substrates, key layout and the namespaced collection engine."""

from sessionstore.infrastructure.storage.collection_store import CollectionStore
from sessionstore.infrastructure.storage.encrypted_storage import EncryptedStorage
from sessionstore.infrastructure.storage.factory import StorageFactory
from sessionstore.infrastructure.storage.keys import storage_key, tenant_namespace
from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage
from sessionstore.infrastructure.storage.redis_storage import RedisSessionStorage

__all__ = [
    "CollectionStore",
    "EncryptedStorage",
    "MemorySessionStorage",
    "RedisSessionStorage",
    "StorageFactory",
    "storage_key",
    "tenant_namespace",
]
