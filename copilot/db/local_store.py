# copilot/db/local_store.py
"""
Process-wide offline layer
==========================

Singleton durable storage, offline cache and connectivity monitor shared by
every request. Initialized lazily, or explicitly from the app lifespan.
"""

import logging
from typing import Optional

from copilot.core.config import settings
from copilot.infrastructure.connectivity import (
    ConnectivityMonitor,
    ConnectivitySource,
    HttpProbeConnectivitySource,
    ManualConnectivitySource,
)
from copilot.infrastructure.storage import KeyValueStorage, get_storage
from copilot.offline.cache import OfflineCache, set_default_cache

logger = logging.getLogger(__name__)

_storage: Optional[KeyValueStorage] = None
_cache: Optional[OfflineCache] = None
_source: Optional[ConnectivitySource] = None
_monitor: Optional[ConnectivityMonitor] = None


def get_storage_backend() -> KeyValueStorage:
    global _storage
    if _storage is None:
        _storage = get_storage(
            settings.OFFLINE_CACHE_BACKEND,
            path=settings.OFFLINE_CACHE_PATH,
            redis_url=settings.get_redis_url,
        )
        logger.info(f"Offline storage initialized ({settings.OFFLINE_CACHE_BACKEND})")
    return _storage


def get_offline_cache() -> OfflineCache:
    global _cache
    if _cache is None:
        _cache = OfflineCache(get_storage_backend(), prefix=settings.OFFLINE_CACHE_PREFIX)
        set_default_cache(_cache)
    return _cache


def get_connectivity_source() -> ConnectivitySource:
    global _source
    if _source is None:
        if settings.CONNECTIVITY_PROBE_URL:
            _source = HttpProbeConnectivitySource(
                settings.CONNECTIVITY_PROBE_URL,
                interval=settings.CONNECTIVITY_PROBE_INTERVAL,
                timeout=settings.CONNECTIVITY_PROBE_TIMEOUT,
            )
        else:
            _source = ManualConnectivitySource(online=True)
    return _source


def get_connectivity_monitor() -> ConnectivityMonitor:
    global _monitor
    if _monitor is None:
        _monitor = ConnectivityMonitor(get_connectivity_source()).start()
    return _monitor


async def init_offline_layer() -> None:
    """Call during app startup."""
    get_offline_cache()
    monitor = get_connectivity_monitor()
    source = get_connectivity_source()
    if isinstance(source, HttpProbeConnectivitySource):
        await source.probe_once()
        source.start()
    logger.info(f"✅ Offline layer ready ({'offline' if monitor.is_offline else 'online'})")


async def close_offline_layer() -> None:
    """Call during app shutdown."""
    global _storage, _cache, _source, _monitor

    if _monitor is not None:
        _monitor.stop()
    if isinstance(_source, HttpProbeConnectivitySource):
        await _source.stop()

    set_default_cache(None)
    _storage = _cache = _source = _monitor = None
    logger.info("✅ Offline layer closed")
