from datetime import datetime
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class CachedResponse(BaseModel, Generic[T]):
    """Read result as surfaced by the cached-fetch coordinator."""
    data: Optional[T] = None
    loading: bool = False
    is_offline: bool = False
    last_updated: Optional[datetime] = None
    source: Optional[str] = None


class ConnectivityStatus(BaseModel):
    is_offline: bool
    indicator_visible: bool
    indicator_message: Optional[str] = None
    probe_url: Optional[str] = None


class ConnectivityOverride(BaseModel):
    online: bool


class CacheClearResult(BaseModel):
    removed: int
    key: Optional[str] = None
