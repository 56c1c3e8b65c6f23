# copilot/infrastructure/storage.py
"""
Durable Key-Value Storage
Narrow string-keyed, string-valued storage interface used by the offline cache
and agent preferences. Swappable backends: in-memory, JSON file, Redis.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Union

import redis

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised by a storage backend when the substrate refuses a read or write."""


class KeyValueStorage:
    """
    Abstract interface for durable storage.
    All operations are synchronous, like a browser's localStorage.
    """

    def get_item(self, key: str) -> Optional[str]:
        """Get value by key, None if missing"""
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, overwriting"""
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        """Remove key if present"""
        raise NotImplementedError

    def keys(self) -> List[str]:
        """Enumerate all stored keys"""
        raise NotImplementedError


class InMemoryStorage(KeyValueStorage):
    """
    Dict-backed storage for testing/development.
    Optional quota (in characters) mimics browser storage limits.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota: Optional[int] = None):
        self._store: Dict[str, str] = dict(initial or {})
        self.quota = quota

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(k) + len(v) for k, v in self._store.items() if k != key)
            if used + len(key) + len(value) > self.quota:
                raise StorageError(f"Storage quota exceeded writing '{key}'")
        self._store[key] = value

    def remove_item(self, key: str) -> None:
        self._store.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._store.keys())


class FileStorage(KeyValueStorage):
    """
    JSON-file storage on local disk.
    The whole file is one flat {key: value} object, rewritten atomically on every change.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._store: Dict[str, str] = self._load()
        logger.debug(f"FileStorage initialized at {self.path} ({len(self._store)} keys)")

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"[FileStorage] Could not read {self.path}, starting empty: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.error(f"[FileStorage] {self.path} is not a JSON object, starting empty")
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(self._store), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            previous = self._store.get(key)
            self._store[key] = value
            try:
                self._flush()
            except StorageError:
                # Keep memory consistent with disk
                if previous is None:
                    self._store.pop(key, None)
                else:
                    self._store[key] = previous
                raise

    def remove_item(self, key: str) -> None:
        with self._lock:
            if key not in self._store:
                return
            previous = self._store.pop(key)
            try:
                self._flush()
            except StorageError:
                self._store[key] = previous
                raise

    def keys(self) -> List[str]:
        return list(self._store.keys())


class RedisStorage(KeyValueStorage):
    """
    Redis-backed storage.
    Keys are written without a server-side TTL; expiry is enforced by the caller.
    """

    def __init__(self, client: Optional[redis.Redis] = None, url: str = "redis://localhost:6379/0"):
        self.redis = client or redis.Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        logger.debug("✓ RedisStorage initialized")

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(key)
        except redis.RedisError as e:
            raise StorageError(f"Redis get failed for '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self.redis.set(key, value)
        except redis.RedisError as e:
            raise StorageError(f"Redis set failed for '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self.redis.delete(key)
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed for '{key}': {e}") from e

    def keys(self) -> List[str]:
        try:
            return list(self.redis.scan_iter(match="*", count=100))
        except redis.RedisError as e:
            raise StorageError(f"Redis scan failed: {e}") from e


# ============================================================
# FACTORY FUNCTION
# ============================================================

def get_storage(backend: str = "file", *, path: str = ".offline_cache.json", redis_url: str = "") -> KeyValueStorage:
    """
    Factory function to get the configured storage backend.

    Args:
        backend: "file", "redis" or "memory"
        path: JSON file location for the file backend
        redis_url: Connection URL for the redis backend

    Returns:
        KeyValueStorage instance
    """
    if backend == "redis":
        return RedisStorage(url=redis_url or "redis://localhost:6379/0")
    if backend == "memory":
        logger.warning("⚠️  Using InMemoryStorage - offline cache will not survive restarts")
        return InMemoryStorage()
    return FileStorage(path)


__all__ = [
    "StorageError",
    "KeyValueStorage",
    "InMemoryStorage",
    "FileStorage",
    "RedisStorage",
    "get_storage",
]
