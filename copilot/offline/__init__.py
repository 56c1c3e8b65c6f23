# copilot/offline/__init__.py
"""
Offline Module
Expiring local cache and the cached-fetch coordinator built on it.
"""

from copilot.offline.cache import OfflineCache, CacheEntry, cache_item, get_cached_item, clear_cache
from copilot.offline.cached_fetch import CachedFetch, CachedFetchState, cached_fetch
from copilot.offline.errors import CacheErrorKind

__all__ = [
    "OfflineCache",
    "CacheEntry",
    "cache_item",
    "get_cached_item",
    "clear_cache",
    "CachedFetch",
    "CachedFetchState",
    "cached_fetch",
    "CacheErrorKind",
]
