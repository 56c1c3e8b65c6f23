# copilot/offline/cache.py
"""
Offline Cache
=============

Namespaced, expiring key/value cache on top of a KeyValueStorage.

Every entry is stored as JSON ``{"data": ..., "timestamp": <epoch millis>}``
under ``prefix + key``. Expiry is checked lazily on read; nothing is swept in
the background. None of the public operations raise: failures are logged with
a CacheErrorKind and treated as a miss (reads) or a lost write (writes).
"""

import json
import logging
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from copilot.infrastructure.storage import InMemoryStorage, KeyValueStorage
from copilot.offline.errors import CacheErrorKind, log_swallowed

logger = logging.getLogger(__name__)

T = TypeVar("T")

CACHE_PREFIX = "offline_cache_"
CACHE_EXPIRY_MS = 24 * 60 * 60 * 1000  # 24 hours


def now_ms() -> int:
    return int(time.time() * 1000)


class CacheJSONEncoder(json.JSONEncoder):
    """Encodes datetimes and pydantic models found in cached payloads."""

    def default(self, obj):
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json")
        return super().default(obj)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: int

    def age_ms(self, now: int) -> int:
        return now - self.timestamp

    def is_expired(self, now: int, ttl_ms: int = CACHE_EXPIRY_MS) -> bool:
        return self.age_ms(now) > ttl_ms

    @property
    def updated_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


class OfflineCache:
    """
    Local cache store for offline browsing.

    Args:
        storage: Durable key/value substrate
        prefix: Namespace prefix isolating cache entries from other keys
        ttl_ms: Maximum entry age, fixed for every key
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        prefix: str = CACHE_PREFIX,
        ttl_ms: int = CACHE_EXPIRY_MS,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage
        self.prefix = prefix
        self.ttl_ms = ttl_ms
        self.clock = clock

    def namespaced(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry if it exists, parses and is younger than the TTL."""
        try:
            raw = self.storage.get_item(self.namespaced(key))
        except Exception as e:
            log_swallowed(logger, CacheErrorKind.STORAGE_READ, "[OfflineCache] Error loading from cache", key=key, exc=e)
            return None

        if raw is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        try:
            entry = _decode_entry(raw)
        except (ValueError, TypeError) as e:
            log_swallowed(logger, CacheErrorKind.DESERIALIZATION, "[OfflineCache] Error loading from cache", key=key, exc=e)
            return None

        if entry.is_expired(self.clock(), self.ttl_ms):
            logger.debug(f"Cache EXPIRED: {key} (age={entry.age_ms(self.clock())}ms)")
            return None

        logger.debug(f"Cache HIT: {key}")
        return entry

    def get(self, key: str) -> Optional[Any]:
        entry = self.get_entry(key)
        return entry.data if entry is not None else None

    def set(self, key: str, data: Any, timestamp: Optional[int] = None) -> Optional[CacheEntry]:
        """
        Write ``data`` with the current timestamp, overwriting any previous entry.
        Pass ``timestamp`` to keep the age of data that was edited locally
        rather than refetched.

        Returns:
            The written entry, or None when the write was lost
        """
        entry = CacheEntry(data=data, timestamp=self.clock() if timestamp is None else timestamp)
        try:
            raw = json.dumps({"data": entry.data, "timestamp": entry.timestamp}, cls=CacheJSONEncoder)
        except (TypeError, ValueError) as e:
            log_swallowed(logger, CacheErrorKind.SERIALIZATION, "[OfflineCache] Error saving to cache", key=key, exc=e)
            return None

        try:
            self.storage.set_item(self.namespaced(key), raw)
        except Exception as e:
            log_swallowed(logger, CacheErrorKind.STORAGE_WRITE, "[OfflineCache] Error saving to cache", key=key, exc=e)
            return None

        logger.debug(f"Cache SET: {key}")
        return entry

    def clear(self, key: Optional[str] = None) -> int:
        """
        Delete one namespaced entry, or every namespaced entry when no key is given.
        Keys outside the namespace are never touched.

        Returns:
            Number of entries removed
        """
        try:
            if key is not None:
                namespaced = self.namespaced(key)
                existed = self.storage.get_item(namespaced) is not None
                self.storage.remove_item(namespaced)
                return int(existed)

            removed = 0
            for stored_key in self.storage.keys():
                if stored_key.startswith(self.prefix):
                    self.storage.remove_item(stored_key)
                    removed += 1
            logger.info(f"[OfflineCache] Cleared {removed} cached entries")
            return removed
        except Exception as e:
            log_swallowed(logger, CacheErrorKind.STORAGE_WRITE, "[OfflineCache] Error clearing cache", key=key or "*", exc=e)
            return 0


def _decode_entry(raw: str) -> CacheEntry:
    payload = json.loads(raw)
    if not isinstance(payload, dict) or "data" not in payload or "timestamp" not in payload:
        raise ValueError("cache entry missing 'data' or 'timestamp'")
    timestamp = payload["timestamp"]
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise TypeError(f"cache entry timestamp is {type(timestamp).__name__}, expected number")
    return CacheEntry(data=payload["data"], timestamp=int(timestamp))


# ============================================================
# DEFAULT CACHE + ITEM HELPERS
# ============================================================

_default_cache: Optional[OfflineCache] = None


def set_default_cache(cache: Optional[OfflineCache]) -> None:
    global _default_cache
    _default_cache = cache


def get_default_cache() -> OfflineCache:
    """Process-wide cache, in-memory until the application installs a durable one."""
    global _default_cache
    if _default_cache is None:
        _default_cache = OfflineCache(InMemoryStorage())
    return _default_cache


def cache_item(key: str, data: Any) -> None:
    get_default_cache().set(key, data)


def get_cached_item(key: str) -> Optional[Any]:
    return get_default_cache().get(key)


def clear_cache(key: Optional[str] = None) -> int:
    return get_default_cache().clear(key)


__all__ = [
    "CACHE_PREFIX",
    "CACHE_EXPIRY_MS",
    "CacheEntry",
    "OfflineCache",
    "get_default_cache",
    "set_default_cache",
    "cache_item",
    "get_cached_item",
    "clear_cache",
]
