"""Tests for the deterministic demo data seeder."""

from sessionstore.application.services.collection_schemas import SchemaRegistry
from sessionstore.application.services.demo_data import KNOWN_COLLECTIONS, seed
from sessionstore.domain.enums import CollectionName


def test_known_collections_match_enum() -> None:
    assert set(KNOWN_COLLECTIONS) == set(CollectionName.values())


def test_seed_is_deterministic_and_fresh() -> None:
    first = seed("agents")
    second = seed("agents")
    assert first == second
    assert first is not second
    first[0]["name"] = "mutated"
    assert seed("agents")[0]["name"] != "mutated"


def test_every_known_collection_has_records() -> None:
    for name in KNOWN_COLLECTIONS:
        assert seed(name), name


def test_unknown_collection_is_empty() -> None:
    assert seed("events") == []


def test_seed_records_carry_conventions_and_unique_ids() -> None:
    for name in KNOWN_COLLECTIONS:
        records = seed(name)
        ids = [r["id"] for r in records]
        assert len(ids) == len(set(ids)), name
        for record in records:
            assert record["created_at"]
            assert record["version"] == 1


def test_seed_records_pass_their_schemas() -> None:
    registry = SchemaRegistry()
    for name in KNOWN_COLLECTIONS:
        for record in seed(name):
            assert registry.validate(name, record) == [], (name, record["id"])


def test_alias_resolves_to_canonical_seed() -> None:
    assert seed("phone_numbers") == seed("phoneNumbers")
