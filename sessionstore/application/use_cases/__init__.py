"""Use cases: the UI-facing data store."""

from sessionstore.application.use_cases.data_store import DataStore, create_data_store

__all__ = ["DataStore", "create_data_store"]
