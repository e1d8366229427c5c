"""Mini README: Tests for the key/value store JSON helpers and the file store."""

from __future__ import annotations

from pathlib import Path

import pytest

from shopbill.storage import InMemoryKeyValueStore, JsonFileKeyValueStore


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(tmp_path / "storage.json")


def test_get_returns_fallback_for_missing_null_and_invalid(store) -> None:
    store.write_raw("nulled", "null")
    store.write_raw("broken", "{not json")
    store.write_raw("empty", "")

    assert store.get("missing", "fallback") == "fallback"
    assert store.get("nulled", []) == []
    assert store.get("broken", {}) == {}
    assert store.get("empty", 0) == 0


def test_set_and_remove_round_trip(store) -> None:
    store.set("products", [{"name": "Oil", "price": 250}])

    assert store.get("products") == [{"name": "Oil", "price": 250}]
    assert "products" in store

    store.remove("products")
    store.remove("products")
    assert store.read_raw("products") is None


def test_set_swallows_serialisation_errors(store) -> None:
    store.set("cart", {"bad": object()})

    assert store.read_raw("cart") is None


def test_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    JsonFileKeyValueStore(path).set("shopName", "Corner Store")

    assert JsonFileKeyValueStore(path).get("shopName") == "Corner Store"
    assert list(JsonFileKeyValueStore(path).keys()) == ["shopName"]


def test_corrupt_file_is_treated_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2", encoding="utf-8")
    store = JsonFileKeyValueStore(path)

    assert store.get("pin", "none") == "none"
    store.set("pin", "1234")
    assert store.get("pin") == "1234"


def test_non_finite_values_are_neither_written_nor_read(store) -> None:
    store.set("accounts", {"income": [{"amount": float("inf")}]})
    store.write_raw("cart", "[NaN]")

    assert store.read_raw("accounts") is None
    assert store.get("cart", []) == []
