# copilot/infrastructure/connectivity.py
"""
Connectivity Monitor
====================

One shared online/offline flag for the whole process.

Sources emit platform signals (``True`` = online). The monitor initializes from
the source when started, forwards every real transition to its subscribers
immediately (no debouncing) and ignores signals that do not change the state.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

import httpx

logger = logging.getLogger(__name__)

Listener = Callable[[bool], None]
Unsubscribe = Callable[[], None]

OFFLINE_MESSAGE = "You're offline - using cached data"
ONLINE_MESSAGE = "Back online"
ONLINE_NOTICE_SECONDS = 3.0


def _call_listeners(listeners: List[Listener], value: bool) -> None:
    for listener in list(listeners):
        try:
            listener(value)
        except Exception as e:
            logger.error(f"[Connectivity] Listener {listener!r} failed: {e}", exc_info=True)


# ============================================================
# SOURCES
# ============================================================

class ConnectivitySource:
    """Host-provided 'currently online' query plus change notifications"""

    def __init__(self, online: bool = True):
        self._online = online
        self._listeners: List[Listener] = []

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, online: bool) -> None:
        self._online = online
        _call_listeners(self._listeners, online)


class ManualConnectivitySource(ConnectivitySource):
    """Source driven explicitly, for tests and operator overrides."""

    def set_online(self, online: bool) -> None:
        logger.info(f"[Connectivity] Manual signal: {'online' if online else 'offline'}")
        self._emit(online)


class HttpProbeConnectivitySource(ConnectivitySource):
    """
    Reachability probe against an HTTP endpoint.

    Any response below 500 counts as online; timeouts, transport errors and
    5xx responses count as offline. ``start()`` runs ``probe_once()`` every
    ``interval`` seconds on the running event loop.
    """

    def __init__(
        self,
        url: str,
        interval: float = 15.0,
        timeout: float = 3.0,
        online: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(online=online)
        self.url = url
        self.interval = interval
        self.timeout = timeout
        self._client = client
        self._task: Optional[asyncio.Task] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def probe_once(self) -> bool:
        client = await self._get_client()
        try:
            resp = await client.head(self.url)
            online = resp.status_code < 500
        except (httpx.TimeoutException, httpx.TransportError) as e:
            logger.debug(f"[Connectivity] Probe to {self.url} failed: {e}")
            online = False

        if online != self._online:
            self._emit(online)
        return online

    async def _run(self) -> None:
        while True:
            await self.probe_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())
            logger.info(f"[Connectivity] Probing {self.url} every {self.interval}s")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._client is not None:
            await self._client.aclose()
            self._client = None


# ============================================================
# MONITOR
# ============================================================

class ConnectivityMonitor:
    """
    Owns the process-wide ``is_offline`` flag.
    Subscribers receive the new ``is_offline`` value on every transition.
    """

    def __init__(self, source: ConnectivitySource, clock: Callable[[], float] = time.monotonic):
        self.source = source
        self.clock = clock
        self._is_offline = not source.is_online()
        self.changed_at: Optional[float] = None
        self._listeners: List[Listener] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def is_offline(self) -> bool:
        return self._is_offline

    @property
    def is_online(self) -> bool:
        return not self._is_offline

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    def start(self) -> "ConnectivityMonitor":
        if self._unsubscribe is None:
            self._is_offline = not self.source.is_online()
            self._unsubscribe = self.source.subscribe(self._handle_signal)
            logger.info(f"[Connectivity] Monitor started ({'offline' if self._is_offline else 'online'})")
        return self

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("[Connectivity] Monitor stopped")

    def __enter__(self) -> "ConnectivityMonitor":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _handle_signal(self, online: bool) -> None:
        is_offline = not online
        if is_offline == self._is_offline:
            return
        self._is_offline = is_offline
        self.changed_at = self.clock()
        if is_offline:
            logger.warning("[Connectivity] Went offline")
        else:
            logger.info("[Connectivity] Back online")
        _call_listeners(self._listeners, is_offline)


def indicator_status(monitor: ConnectivityMonitor, now: Optional[float] = None) -> dict:
    """
    Banner state for clients: shown while offline, and for a short while
    after coming back online.
    """
    if monitor.is_offline:
        return {"visible": True, "is_offline": True, "message": OFFLINE_MESSAGE}

    now = monitor.clock() if now is None else now
    if monitor.changed_at is not None and now - monitor.changed_at < ONLINE_NOTICE_SECONDS:
        return {"visible": True, "is_offline": False, "message": ONLINE_MESSAGE}

    return {"visible": False, "is_offline": False, "message": None}


__all__ = [
    "ConnectivitySource",
    "ManualConnectivitySource",
    "HttpProbeConnectivitySource",
    "ConnectivityMonitor",
    "indicator_status",
    "OFFLINE_MESSAGE",
    "ONLINE_MESSAGE",
]
