"""Pytest configuration and fixtures for sessionstore.

Every fixture builds on a fresh in-memory substrate and a controllable clock,
so tests never touch Redis or the network.
"""

from datetime import UTC, datetime, timedelta

import pytest

from sessionstore.application.services.auth_service import AuthService
from sessionstore.application.services.collection_manager import CollectionManager
from sessionstore.application.use_cases.data_store import DataStore, create_data_store
from sessionstore.core.config import Settings, get_settings
from sessionstore.infrastructure.query.client import QueryClient
from sessionstore.infrastructure.storage.collection_store import CollectionStore
from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"
DEMO_EMAIL = "demo@x.com"
DEMO_PASSWORD = "Password123"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemorySessionStorage:
    return MemorySessionStorage()


@pytest.fixture
def store(storage: MemorySessionStorage, settings: Settings) -> CollectionStore:
    return CollectionStore(storage, settings.storage_prefix)


@pytest.fixture
def manager(store: CollectionStore, clock: FakeClock) -> CollectionManager:
    return CollectionManager(store, clock=clock)


@pytest.fixture
def auth(
    storage: MemorySessionStorage,
    store: CollectionStore,
    settings: Settings,
    clock: FakeClock,
) -> AuthService:
    return AuthService(storage, store, settings, clock=clock)


@pytest.fixture
def query(store: CollectionStore, auth: AuthService, clock: FakeClock) -> QueryClient:
    return QueryClient(store, auth, clock=clock)


@pytest.fixture
def data_store(
    settings: Settings, storage: MemorySessionStorage, clock: FakeClock
) -> DataStore:
    return create_data_store(settings, storage=storage, clock=clock)
