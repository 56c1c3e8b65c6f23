"""
Offline cache tests
===================
Round trip, 24h expiry, namespace isolation and swallowed failures.
"""

import json
import logging
from datetime import datetime, timezone

import pytest

from copilot.infrastructure.storage import InMemoryStorage
from copilot.offline import cache as cache_module
from copilot.offline.cache import CACHE_EXPIRY_MS, CACHE_PREFIX, OfflineCache

from conftest import HOUR_MS, START_MS


def test_set_then_get_returns_same_value(cache):
    rows = [{"id": "c1", "name": "Asha"}, {"id": "c2", "name": "Ravi"}]
    cache.set("customers", rows)

    assert cache.get("customers") == rows


def test_entry_layout_in_storage(cache, storage):
    cache.set("rates", {"usd": 83})

    raw = storage.get_item(f"{CACHE_PREFIX}rates")
    assert json.loads(raw) == {"data": {"usd": 83}, "timestamp": START_MS}


def test_missing_key_is_a_miss(cache):
    assert cache.get("nothing-here") is None
    assert cache.get_entry("nothing-here") is None


def test_overwrite_refreshes_timestamp(cache, clock):
    cache.set("rates", {"usd": 80})
    clock.advance(23 * HOUR_MS)
    cache.set("rates", {"usd": 83})
    clock.advance(2 * HOUR_MS)

    entry = cache.get_entry("rates")
    assert entry.data == {"usd": 83}
    assert entry.timestamp == START_MS + 23 * HOUR_MS


def test_entry_at_exactly_ttl_is_still_valid(cache, clock):
    cache.set("rates", {"usd": 83})
    clock.advance(CACHE_EXPIRY_MS)

    assert cache.get("rates") == {"usd": 83}


def test_entry_older_than_ttl_is_a_miss(cache, clock, storage):
    cache.set("rates", {"usd": 83})
    clock.advance(CACHE_EXPIRY_MS + 1)

    assert cache.get("rates") is None
    # Expiry is lazy: nothing is deleted on read
    assert storage.get_item(f"{CACHE_PREFIX}rates") is not None


def test_updated_at_reflects_write_time(cache):
    entry = cache.set("rates", {"usd": 83})

    assert entry.updated_at == datetime.fromtimestamp(START_MS / 1000, tz=timezone.utc)


def test_datetimes_are_serialized(cache):
    when = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
    cache.set("event", {"at": when})

    assert cache.get("event") == {"at": "2026-10-19T09:30:00+00:00"}


def test_clear_single_key(cache):
    cache.set("customers", [1])
    cache.set("itineraries", [2])

    assert cache.clear("customers") == 1
    assert cache.get("customers") is None
    assert cache.get("itineraries") == [2]


def test_clear_missing_key_is_a_no_op(cache):
    assert cache.clear("never-written") == 0


def test_clear_all_only_touches_namespace(cache, storage):
    storage.set_item("preferred_language:agent-1", "hi")
    cache.set("customers", [1])
    cache.set("itineraries", [2])

    assert cache.clear() == 2
    assert cache.get("customers") is None
    assert cache.get("itineraries") is None
    assert storage.get_item("preferred_language:agent-1") == "hi"


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"data": [1]}),
        json.dumps({"timestamp": START_MS}),
        json.dumps({"data": [1], "timestamp": "yesterday"}),
        json.dumps({"data": [1], "timestamp": True}),
    ],
)
def test_corrupt_entry_is_a_miss(cache, storage, raw, caplog):
    storage.set_item(f"{CACHE_PREFIX}customers", raw)

    with caplog.at_level(logging.WARNING, logger="copilot.offline.cache"):
        assert cache.get("customers") is None

    assert any(getattr(r, "error_kind", None) == "deserialization" for r in caplog.records)


def test_unserializable_value_is_not_written(cache, storage, caplog):
    with caplog.at_level(logging.WARNING, logger="copilot.offline.cache"):
        assert cache.set("bad", {"handle": object()}) is None

    assert storage.keys() == []
    assert any(getattr(r, "error_kind", None) == "serialization" for r in caplog.records)


def test_write_failure_is_swallowed(clock, caplog):
    storage = InMemoryStorage(quota=40)
    cache = OfflineCache(storage, clock=clock)

    with caplog.at_level(logging.WARNING, logger="copilot.offline.cache"):
        result = cache.set("customers", ["x" * 100])

    assert result is None
    assert cache.get("customers") is None
    assert any(getattr(r, "error_kind", None) == "storage_write" for r in caplog.records)


def test_write_failure_keeps_previous_entry(clock):
    storage = InMemoryStorage(quota=120)
    cache = OfflineCache(storage, clock=clock)
    cache.set("customers", ["a"])

    cache.set("customers", ["x" * 200])

    assert cache.get("customers") == ["a"]


def test_custom_prefix_isolates_caches(storage, clock):
    first = OfflineCache(storage, prefix="one_", clock=clock)
    second = OfflineCache(storage, prefix="two_", clock=clock)
    first.set("k", 1)
    second.set("k", 2)

    assert first.clear() == 1
    assert second.get("k") == 2


def test_module_helpers_use_default_cache(storage, clock):
    cache_module.set_default_cache(OfflineCache(storage, clock=clock))
    try:
        cache_module.cache_item("rates", {"usd": 83})
        assert cache_module.get_cached_item("rates") == {"usd": 83}
        assert cache_module.clear_cache("rates") == 1
        assert cache_module.get_cached_item("rates") is None
    finally:
        cache_module.set_default_cache(None)


def test_set_with_explicit_timestamp_keeps_age(cache, clock):
    cache.set("customers", [1])
    written_at = cache.get_entry("customers").timestamp
    clock.advance(20 * HOUR_MS)

    cache.set("customers", [1, 2], timestamp=written_at)
    clock.advance(5 * HOUR_MS)

    assert cache.get("customers") is None
