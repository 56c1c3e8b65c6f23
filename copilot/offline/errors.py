# copilot/offline/errors.py

import logging
from enum import Enum


class CacheErrorKind(str, Enum):
    """Classification attached to every failure the offline layer swallows"""
    DESERIALIZATION = "deserialization"   # corrupt or schema-mismatched entry
    SERIALIZATION = "serialization"       # payload not JSON-serializable
    STORAGE_READ = "storage_read"
    STORAGE_WRITE = "storage_write"       # quota, permission, connection
    PRODUCER = "producer"                 # network/service error from a fetch function


def log_swallowed(logger: logging.Logger, kind: CacheErrorKind, message: str, *, key: str, exc: BaseException) -> None:
    """Log a failure that is handled internally and never reaches the caller."""
    logger.warning(
        f"{message} [{kind.value}] key='{key}': {exc}",
        extra={"error_kind": kind.value, "cache_key": key},
        exc_info=exc if kind is CacheErrorKind.PRODUCER else None,
    )
