"""Mini README: Tests for the key-value persistence backends."""

from __future__ import annotations

import pytest

from cashflow.storage import InMemoryStore, JsonFileStore


def test_in_memory_store_round_trip() -> None:
    store = InMemoryStore()

    assert store.get("transactions") is None
    store.set("transactions", "[]")
    assert store.get("transactions") == "[]"


def test_json_file_store_persists_between_instances(tmp_path) -> None:
    JsonFileStore(tmp_path / "data").set("transactions", '[{"id": 1}]')

    reopened = JsonFileStore(tmp_path / "data")
    assert reopened.get("transactions") == '[{"id": 1}]'
    assert (tmp_path / "data" / "transactions.json").exists()
    assert not (tmp_path / "data" / "transactions.json.tmp").exists()


def test_json_file_store_rejects_path_like_keys(tmp_path) -> None:
    store = JsonFileStore(tmp_path)

    with pytest.raises(ValueError):
        store.set("../escape", "[]")
