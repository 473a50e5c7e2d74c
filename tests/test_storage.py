"""Tests for key-value stores."""

import pytest

from ssh_uptime_monitor.storage import JsonFileStore, MemoryStore, StorageError


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "state")


class TestStoreContract:
    def test_missing_key(self, any_store):
        assert any_store.get("monitoring:status:srv1") is None

    def test_set_get_delete(self, any_store):
        any_store.set("monitoring:status:srv1", {"status": "online"})
        assert any_store.get("monitoring:status:srv1") == {"status": "online"}

        any_store.delete("monitoring:status:srv1")
        any_store.delete("monitoring:status:srv1")
        assert any_store.get("monitoring:status:srv1") is None

    def test_keys_by_prefix(self, any_store):
        any_store.set("monitoring:status:a", {})
        any_store.set("monitoring:status:b/c", {})
        any_store.set("monitoring:history:a", [])

        assert any_store.keys("monitoring:status:") == [
            "monitoring:status:a",
            "monitoring:status:b/c",
        ]

    def test_values_are_copies(self, any_store):
        value = [1, 2]
        any_store.set("k", value)
        value.append(3)
        fetched = any_store.get("k")
        fetched.append(4)

        assert any_store.get("k") == [1, 2]


class TestJsonFileStore:
    def test_creates_directory_lazily(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "state")
        assert store.keys() == []

        store.set("k", {"a": 1})
        assert (tmp_path / "nested" / "state").is_dir()

    def test_keys_do_not_escape_directory(self, tmp_path):
        store = JsonFileStore(tmp_path / "state")
        store.set("../../etc/passwd", "nope")

        assert [p.parent for p in (tmp_path / "state").iterdir()] == [tmp_path / "state"]
        assert store.get("../../etc/passwd") == "nope"

    def test_no_temp_file_left(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("k", {"a": 1})
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        store = JsonFileStore(tmp_path)
        (tmp_path / "k.json").write_text("{not json")

        with pytest.raises(StorageError):
            store.get("k")

    def test_unserializable_value_raises_storage_error(self, tmp_path):
        store = JsonFileStore(tmp_path)
        with pytest.raises(StorageError):
            store.set("k", {"when": object()})
