# copilot/offline/cached_fetch.py
"""
Cached-Fetch Coordinator
========================

Cache-first render, network refresh when online, cache fallback otherwise.

Flow per trigger (mount, offline→online transition, manual refetch):
1. Offline  → surface the cache (or None), no producer call, no error
2. Online   → await the producer
   - success → write through to the cache, surface the fresh value
   - failure → log it, surface the cache (or None)

Exactly one producer call per trigger. No retries, no timeout, no cancellation:
overlapping refreshes both complete and the later resolution wins.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

from copilot.infrastructure.connectivity import ConnectivityMonitor, Unsubscribe
from copilot.offline.cache import OfflineCache
from copilot.offline.errors import CacheErrorKind, log_swallowed

logger = logging.getLogger(__name__)

T = TypeVar("T")

Producer = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class CachedFetchState(Generic[T]):
    data: Optional[T]
    loading: bool
    is_offline: bool
    last_updated: Optional[datetime]
    source: Optional[str]  # "cache", "network" or None


class CachedFetch(Generic[T]):
    """
    Coordinates one cache key with one producer function.

    Args:
        key: Logical cache key; uniqueness across consumers is the caller's job
        fetch_fn: Zero-argument coroutine function yielding fresh data
        cache: Offline cache store
        monitor: Shared connectivity monitor
        on_change: Called with this coordinator after every state change
    """

    def __init__(
        self,
        key: str,
        fetch_fn: Producer,
        *,
        cache: OfflineCache,
        monitor: ConnectivityMonitor,
        on_change: Optional[Callable[["CachedFetch"], None]] = None,
    ):
        self.key = key
        self.fetch_fn = fetch_fn
        self.cache = cache
        self.monitor = monitor
        self.on_change = on_change

        self.data: Optional[T] = None
        self.loading: bool = True
        self.last_updated: Optional[datetime] = None
        self.source: Optional[str] = None

        self._unsubscribe: Optional[Unsubscribe] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def is_offline(self) -> bool:
        return self.monitor.is_offline

    def snapshot(self) -> CachedFetchState:
        return CachedFetchState(
            data=self.data,
            loading=self.loading,
            is_offline=self.is_offline,
            last_updated=self.last_updated,
            source=self.source,
        )

    # ---------------------------------------------------------------------
    # CACHE ACCESS
    # ---------------------------------------------------------------------

    def _load_from_cache(self) -> Optional[T]:
        entry = self.cache.get_entry(self.key)
        if entry is None:
            return None
        self.last_updated = entry.updated_at
        return entry.data

    def save_to_cache(self, data: T) -> None:
        """Write ``data`` through to the cache and surface it as current."""
        entry = self.cache.set(self.key, data)
        self.data = data
        self.source = "network"
        self.last_updated = entry.updated_at if entry is not None else datetime.now(timezone.utc)
        self._notify()

    def _surface_cache(self, cached: Optional[T]) -> None:
        self.data = cached
        self.source = "cache" if cached is not None else None
        if cached is None:
            self.last_updated = None

    # ---------------------------------------------------------------------
    # LIFECYCLE
    # ---------------------------------------------------------------------

    async def start(self) -> CachedFetchState:
        """
        Mount: surface the cache immediately, then refresh from the network
        when online. Subscribes to connectivity transitions until ``close()``.
        """
        if self._unsubscribe is None:
            self._unsubscribe = self.monitor.subscribe(self._on_connectivity_change)

        cached = self._load_from_cache()
        if cached is not None:
            self._surface_cache(cached)
            self.loading = False
            self._notify()

        if self.monitor.is_offline:
            self.loading = False
            self._notify()
            return self.snapshot()

        return await self.refetch()

    async def refetch(self) -> CachedFetchState:
        """Run one fetch attempt; never raises."""
        self.loading = True
        self._notify()

        if self.monitor.is_offline:
            logger.debug(f"[CachedFetch] Offline, serving cache for '{self.key}'")
            self._surface_cache(self._load_from_cache())
            self.loading = False
            self._notify()
            return self.snapshot()

        try:
            fresh = await self.fetch_fn()
        except Exception as e:
            log_swallowed(logger, CacheErrorKind.PRODUCER, "[CachedFetch] Error fetching data", key=self.key, exc=e)
            self._surface_cache(self._load_from_cache())
        else:
            self.save_to_cache(fresh)
        finally:
            self.loading = False

        self._notify()
        return self.snapshot()

    def _on_connectivity_change(self, is_offline: bool) -> None:
        if is_offline:
            self._notify()
            return

        logger.info(f"[CachedFetch] Back online, refreshing '{self.key}'")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"[CachedFetch] No running event loop, skipping refresh of '{self.key}'")
            return
        task = loop.create_task(self.refetch())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self) -> None:
        """Wait for background refreshes triggered by connectivity changes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def __aenter__(self) -> "CachedFetch[T]":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change(self)
        except Exception as e:
            logger.error(f"[CachedFetch] on_change callback failed for '{self.key}': {e}", exc_info=True)


async def cached_fetch(
    key: str,
    fetch_fn: Callable[[], Awaitable[Any]],
    *,
    cache: OfflineCache,
    monitor: ConnectivityMonitor,
) -> CachedFetchState:
    """One-shot helper: mount a coordinator, settle it, and detach."""
    async with CachedFetch(key, fetch_fn, cache=cache, monitor=monitor) as fetcher:
        return fetcher.snapshot()


__all__ = ["CachedFetch", "CachedFetchState", "cached_fetch"]
