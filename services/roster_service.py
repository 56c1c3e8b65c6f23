# services/roster_service.py
"""
Shared plumbing for agent-scoped record rosters (customers, itineraries,
conversations): reads go through the cached-fetch coordinator, writes go
straight to the hosted database and then patch the cached roster so offline
reads see them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from copilot.infrastructure.connectivity import ConnectivityMonitor
from copilot.offline.cache import OfflineCache
from copilot.offline.cached_fetch import CachedFetch, CachedFetchState
from services.backend_client import BackendClient, Record
from services.exceptions import OfflineError

logger = logging.getLogger(__name__)


class RosterService:
    TABLE: str = ""
    ORDER_BY: str = "created_at"
    ASCENDING: bool = False

    def __init__(
        self,
        client: BackendClient,
        cache: OfflineCache,
        monitor: ConnectivityMonitor,
        agent_id: str,
    ):
        self.client = client
        self.cache = cache
        self.monitor = monitor
        self.agent_id = agent_id

    @classmethod
    def cache_key_for(cls, agent_id: str) -> str:
        return f"{cls.TABLE}_{agent_id}"

    @property
    def cache_key(self) -> str:
        return self.cache_key_for(self.agent_id)

    async def _fetch_rows(self) -> List[Record]:
        return await self.client.select(
            self.TABLE,
            filters={"agent_id": self.agent_id},
            order=self.ORDER_BY,
            ascending=self.ASCENDING,
        )

    def fetcher(self) -> CachedFetch:
        return CachedFetch(self.cache_key, self._fetch_rows, cache=self.cache, monitor=self.monitor)

    async def load(self) -> CachedFetchState:
        async with self.fetcher() as fetcher:
            return fetcher.snapshot()

    def _require_online(self, action: str) -> None:
        if self.monitor.is_offline:
            raise OfflineError(f"Cannot {action} while offline")

    def _patch_cache(self, mutate: Callable[[List[Record]], List[Record]]) -> None:
        """Apply a local mutation to the cached roster, if one is cached. The entry keeps its fetch time."""
        entry = self.cache.get_entry(self.cache_key)
        if entry is None or not isinstance(entry.data, list):
            return
        self.cache.set(self.cache_key, mutate(entry.data), timestamp=entry.timestamp)

    def _cache_prepend(self, row: Record) -> None:
        self._patch_cache(lambda rows: [row] + [r for r in rows if r.get("id") != row.get("id")])

    def _cache_merge(self, row_id: str, changes: Dict[str, Any]) -> None:
        self._patch_cache(lambda rows: [{**r, **changes} if r.get("id") == row_id else r for r in rows])

    def _cache_remove(self, row_id: str) -> None:
        self._patch_cache(lambda rows: [r for r in rows if r.get("id") != row_id])
