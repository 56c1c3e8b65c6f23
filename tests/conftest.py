"""
Shared fixtures: in-memory storage, a controllable clock and a manually
driven connectivity monitor.
"""

import pytest

from copilot.infrastructure.connectivity import ConnectivityMonitor, ManualConnectivitySource
from copilot.infrastructure.storage import InMemoryStorage
from copilot.offline.cache import OfflineCache

HOUR_MS = 60 * 60 * 1000
START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def cache(storage, clock):
    return OfflineCache(storage, clock=clock)


@pytest.fixture
def source():
    return ManualConnectivitySource(online=True)


@pytest.fixture
def monitor(source):
    monitor = ConnectivityMonitor(source).start()
    yield monitor
    monitor.stop()


class FakeBackend:
    """
    In-memory stand-in for BackendClient: tables of dict rows, equality filters.
    Set ``fail`` to an exception to make every call raise it.
    """

    def __init__(self, tables=None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.calls = []
        self.fail = None
        self._next_id = 1

    def _check(self, op, table):
        self.calls.append((op, table))
        if self.fail is not None:
            raise self.fail

    @staticmethod
    def _matches(row, filters):
        return all(row.get(k) == v for k, v in (filters or {}).items())

    async def select(self, table, *, filters=None, columns="*", order=None, ascending=True):
        self._check("select", table)
        rows = [dict(r) for r in self.tables.get(table, []) if self._matches(r, filters)]
        if order:
            rows.sort(key=lambda r: r.get(order) or "", reverse=not ascending)
        return rows

    async def insert(self, table, record):
        self._check("insert", table)
        row = {"id": f"{table[:-1]}-{self._next_id}", "created_at": f"2026-10-19T00:00:{self._next_id:02d}Z", **record}
        row.setdefault("updated_at", row["created_at"])
        self._next_id += 1
        self.tables.setdefault(table, []).append(row)
        return dict(row)

    async def update(self, table, values, *, filters):
        self._check("update", table)
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def delete(self, table, *, filters):
        self._check("delete", table)
        self.tables[table] = [r for r in self.tables.get(table, []) if not self._matches(r, filters)]
