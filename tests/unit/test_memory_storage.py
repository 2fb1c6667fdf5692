"""Tests for the in-memory storage substrate."""

import pytest

from sessionstore.infrastructure.storage.memory_storage import MemorySessionStorage


def test_get_absent_returns_none() -> None:
    assert MemorySessionStorage().get("missing") is None


def test_set_get_remove() -> None:
    storage = MemorySessionStorage()
    storage.set("k", "v")
    assert storage.get("k") == "v"
    storage.set("k", "v2")
    assert storage.get("k") == "v2"
    storage.remove("k")
    assert storage.get("k") is None


def test_remove_absent_is_noop() -> None:
    storage = MemorySessionStorage()
    storage.remove("nothing")
    assert len(storage) == 0


def test_keys_and_clear() -> None:
    storage = MemorySessionStorage({"a": "1", "b": "2"})
    assert sorted(storage.keys()) == ["a", "b"]
    storage.clear()
    assert storage.keys() == []


def test_rejects_non_string_values() -> None:
    with pytest.raises(TypeError):
        MemorySessionStorage().set("k", 1)  # type: ignore[arg-type]
