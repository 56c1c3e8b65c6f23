"""
Storage backend tests
"""

import json

import pytest
import redis

from copilot.infrastructure.storage import (
    FileStorage,
    InMemoryStorage,
    RedisStorage,
    StorageError,
    get_storage,
)


def test_in_memory_round_trip():
    storage = InMemoryStorage()
    storage.set_item("a", "1")

    assert storage.get_item("a") == "1"
    assert storage.get_item("missing") is None
    assert storage.keys() == ["a"]

    storage.remove_item("a")
    storage.remove_item("a")  # removing twice is fine
    assert storage.keys() == []


def test_in_memory_quota_rejects_oversized_write():
    storage = InMemoryStorage(quota=10)
    storage.set_item("k", "12345")

    with pytest.raises(StorageError):
        storage.set_item("big", "x" * 20)

    assert storage.get_item("big") is None
    assert storage.get_item("k") == "12345"


def test_in_memory_quota_counts_overwrite_once():
    storage = InMemoryStorage(quota=10)
    storage.set_item("k", "123456789")
    # Replacing the same key must not count the old value against the quota
    storage.set_item("k", "987654321")
    assert storage.get_item("k") == "987654321"


def test_file_storage_persists_across_instances(tmp_path):
    path = tmp_path / "cache.json"
    FileStorage(path).set_item("offline_cache_customers", '{"data": [], "timestamp": 1}')

    reopened = FileStorage(path)
    assert reopened.get_item("offline_cache_customers") == '{"data": [], "timestamp": 1}'
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "offline_cache_customers": '{"data": [], "timestamp": 1}'
    }


def test_file_storage_remove(tmp_path):
    path = tmp_path / "cache.json"
    storage = FileStorage(path)
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    storage.remove_item("a")

    assert sorted(FileStorage(path).keys()) == ["b"]


def test_file_storage_starts_empty_on_corrupt_file(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")

    assert FileStorage(path).keys() == []


def test_file_storage_failed_flush_keeps_memory_consistent(tmp_path, monkeypatch):
    storage = FileStorage(tmp_path / "cache.json")
    storage.set_item("a", "1")

    def broken_flush():
        raise StorageError("disk full")

    monkeypatch.setattr(storage, "_flush", broken_flush)

    with pytest.raises(StorageError):
        storage.set_item("a", "2")
    with pytest.raises(StorageError):
        storage.set_item("b", "3")
    with pytest.raises(StorageError):
        storage.remove_item("a")

    assert storage.get_item("a") == "1"
    assert storage.get_item("b") is None


class _BrokenRedis:
    def get(self, key):
        raise redis.ConnectionError("connection refused")

    def set(self, key, value):
        raise redis.ConnectionError("connection refused")

    def delete(self, key):
        raise redis.ConnectionError("connection refused")

    def scan_iter(self, match="*", count=100):
        raise redis.ConnectionError("connection refused")


def test_redis_errors_become_storage_errors():
    storage = RedisStorage(client=_BrokenRedis())

    with pytest.raises(StorageError):
        storage.get_item("a")
    with pytest.raises(StorageError):
        storage.set_item("a", "1")
    with pytest.raises(StorageError):
        storage.remove_item("a")
    with pytest.raises(StorageError):
        storage.keys()


def test_get_storage_factory(tmp_path):
    assert isinstance(get_storage("memory"), InMemoryStorage)
    assert isinstance(get_storage("file", path=str(tmp_path / "c.json")), FileStorage)
