"""UI-facing data store: CRUD, reactive collection state and session actions.

DataStore resolves the active tenant from the auth service on every call and
delegates to the explicit-tenant CollectionManager. Every public operation
returns a result value; exceptions stop here.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from sessionstore.application.dtos.results import ErrorInfo, OperationResult, Record
from sessionstore.application.dtos.session import AuthResult, SessionSnapshot
from sessionstore.application.interfaces.ports import IRemoteSync, StorageProtocol
from sessionstore.application.services.auth_service import AuthService
from sessionstore.application.services.collection_manager import CollectionManager
from sessionstore.application.services.collection_schemas import SchemaRegistry
from sessionstore.application.services.demo_data import KNOWN_COLLECTIONS
from sessionstore.core.config import Settings, get_settings
from sessionstore.core.constants import GENERIC_ERROR_MESSAGE, INTERNAL_ERROR_CODE
from sessionstore.domain.enums import SessionState, canonical_collection
from sessionstore.domain.exceptions import SessionExpiredException, StoreException
from sessionstore.infrastructure.query.client import QueryBuilder, QueryClient
from sessionstore.infrastructure.storage.collection_store import CollectionStore
from sessionstore.infrastructure.storage.factory import StorageFactory
from sessionstore.infrastructure.sync.remote_sync import create_remote_sync
from sessionstore.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

CollectionsView = Mapping[str, tuple[Record, ...]]
Listener = Callable[[CollectionsView], None]


class NoActiveSessionException(StoreException):
    """Raised when no tenant can be resolved for the current session."""

    def __init__(self) -> None:
        super().__init__("No active session", "NO_SESSION")


class DataStore:
    """Composition of substrate, engine, CRUD manager, auth and query facade."""

    def __init__(
        self,
        settings: Settings,
        storage: StorageProtocol,
        store: CollectionStore,
        manager: CollectionManager,
        auth: AuthService,
        query: QueryClient,
        remote_sync: IRemoteSync,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.store = store
        self.manager = manager
        self.auth = auth
        self.query = query
        self.remote_sync = remote_sync
        self._collections: dict[str, tuple[Record, ...]] = {}
        self._listeners: list[Listener] = []

    # -- session -----------------------------------------------------------

    @property
    def session(self) -> SessionSnapshot:
        return self.auth.current_session()

    @property
    def is_authenticated(self) -> bool:
        return self.session.state == SessionState.AUTHENTICATED

    async def login(self, email: str, password: str) -> AuthResult:
        result = await self.auth.login(email, password)
        if result.success:
            self.refresh()
        return result

    async def signup(self, email: str, password: str, first_name: str, last_name: str) -> AuthResult:
        result = await self.auth.signup(email, password, first_name, last_name)
        if result.success:
            self.refresh()
        return result

    async def logout(self) -> AuthResult:
        result = await self.auth.logout()
        self.refresh()
        return result

    async def refresh_session(self) -> AuthResult:
        result = await self.auth.refresh_session()
        if result.success:
            self.refresh()
        return result

    # -- reactive state ----------------------------------------------------

    @property
    def collections(self) -> CollectionsView:
        """Read-only snapshot of every tracked collection for the active tenant."""
        return MappingProxyType(dict(self._collections))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with the collections view after every change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self, collection: str | None = None) -> None:
        """Reload one collection (or all tracked ones) for the active tenant and notify."""
        tenant_id = self.session.tenant_id
        names = [canonical_collection(collection)] if collection else self._tracked()
        for name in names:
            if tenant_id is None:
                self._collections[name] = ()
                continue
            try:
                self._collections[name] = tuple(self.store.load(tenant_id, name))
            except StoreException as e:
                logger.error("Could not refresh %s: %s", name, e.message)
                self._collections[name] = ()
        self._notify()

    def _tracked(self) -> list[str]:
        return list(dict.fromkeys([*KNOWN_COLLECTIONS, *self._collections]))

    def _notify(self) -> None:
        view = self.collections
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("Collection listener failed")

    # -- CRUD --------------------------------------------------------------

    async def add_item(self, collection: str, item: Mapping[str, Any]) -> OperationResult:
        return await self._mutate(
            collection, lambda tenant: self.manager.create(tenant, collection, item)
        )

    async def update_item(
        self, collection: str, record_id: str, patch: Mapping[str, Any]
    ) -> OperationResult:
        return await self._mutate(
            collection, lambda tenant: self.manager.update(tenant, collection, record_id, patch)
        )

    async def delete_item(self, collection: str, record_id: str) -> OperationResult:
        return await self._mutate(
            collection, lambda tenant: self.manager.delete(tenant, collection, record_id)
        )

    def get_item(self, collection: str, record_id: str) -> OperationResult:
        """Return the record (or None when absent) for the active tenant."""
        return self._guard(lambda: self.manager.read(self._tenant_id(), collection, record_id))

    def list_items(self, collection: str) -> OperationResult:
        return self._guard(lambda: self.manager.list(self._tenant_id(), collection))

    # -- query facade ------------------------------------------------------

    def from_(self, table: str) -> QueryBuilder:
        return self.query.from_(table)

    table = from_

    async def aclose(self) -> None:
        """Wait for pending remote sync calls and release resources."""
        await self.remote_sync.aclose()
        close = getattr(self.storage, "close", None)
        if callable(close):
            close()

    # -- internals ---------------------------------------------------------

    def _tenant_id(self) -> str:
        session = self.session
        if session.tenant_id is not None:
            return session.tenant_id
        if session.state == SessionState.EXPIRED:
            raise SessionExpiredException()
        raise NoActiveSessionException()

    async def _mutate(
        self,
        collection: str,
        operation: Callable[[str], Awaitable[Any]],
    ) -> OperationResult:
        try:
            data = await operation(self._tenant_id())
        except StoreException as e:
            logger.info("%s operation failed: %s", collection, e.error_code)
            return OperationResult.failure(ErrorInfo.from_exception(e))
        except Exception:
            logger.exception("Unexpected failure mutating %s", collection)
            return OperationResult.failure(ErrorInfo(INTERNAL_ERROR_CODE, GENERIC_ERROR_MESSAGE))
        self.refresh(collection)
        return OperationResult.success(data)

    def _guard(self, operation: Callable[[], Any]) -> OperationResult:
        try:
            return OperationResult.success(operation())
        except StoreException as e:
            return OperationResult.failure(ErrorInfo.from_exception(e))
        except Exception:
            logger.exception("Unexpected failure reading collection")
            return OperationResult.failure(ErrorInfo(INTERNAL_ERROR_CODE, GENERIC_ERROR_MESSAGE))


def create_data_store(
    settings: Settings | None = None,
    storage: StorageProtocol | None = None,
    remote_sync: IRemoteSync | None = None,
    clock: Callable[[], datetime] = utc_now,
    schemas: SchemaRegistry | None = None,
) -> DataStore:
    """Build a DataStore and restore any session already in the substrate.

    Args:
        settings: Defaults to get_settings().
        storage: Substrate; built by StorageFactory from settings when omitted.
        remote_sync: Defaults to the configured remote sync (or a no-op).
        clock: Source of "now" for timestamps and session expiry.
        schemas: Schema registry; built-in schemas when omitted.

    Returns:
        Ready DataStore with its collections view loaded.
    """
    settings = settings or get_settings()
    storage = storage if storage is not None else StorageFactory.create_storage(settings)
    remote_sync = remote_sync if remote_sync is not None else create_remote_sync(settings)
    store = CollectionStore(storage, settings.storage_prefix)
    manager = CollectionManager(store, schemas=schemas, remote_sync=remote_sync, clock=clock)
    auth = AuthService(storage, store, settings, clock=clock)
    query = QueryClient(store, auth, clock=clock)
    data_store = DataStore(settings, storage, store, manager, auth, query, remote_sync)
    try:
        auth.restore()
    except StoreException as e:
        logger.error("Session restore failed, starting anonymous: %s", e.message)
    data_store.refresh()
    return data_store
