"""Session-scoped, tenant-namespaced document store with CRUD and query-builder facades."""

from sessionstore.application.use_cases.data_store import DataStore, create_data_store
from sessionstore.core.config import Settings, get_settings

__all__ = ["DataStore", "Settings", "create_data_store", "get_settings"]

__version__ = "1.0.0"
