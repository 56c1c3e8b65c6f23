# copilot/infrastructure/__init__.py
"""
Infrastructure Module
Contains adapters for host-provided storage and connectivity signals.
"""

from copilot.infrastructure.storage import KeyValueStorage, InMemoryStorage, FileStorage, RedisStorage
from copilot.infrastructure.connectivity import (
    ConnectivitySource,
    ManualConnectivitySource,
    HttpProbeConnectivitySource,
    ConnectivityMonitor,
)

__all__ = [
    "KeyValueStorage",
    "InMemoryStorage",
    "FileStorage",
    "RedisStorage",
    "ConnectivitySource",
    "ManualConnectivitySource",
    "HttpProbeConnectivitySource",
    "ConnectivityMonitor",
]
