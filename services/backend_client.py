# services/backend_client.py
"""
Hosted Backend Client
=====================
Generic record CRUD against the hosted database's PostgREST endpoint
(``{BACKEND_URL}/rest/v1/{table}``), authenticated as the calling agent.

Only equality filters are needed by the consumers: ``{"agent_id": "..."}``
becomes ``?agent_id=eq....``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from copilot.core.config import settings
from services.base_api_service import BaseAPIService
from services.exceptions import BackendServiceError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def _eq_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, bool):
            params[column] = f"eq.{str(value).lower()}"
        else:
            params[column] = f"eq.{value}"
    return params


class BackendClient(BaseAPIService):
    """Record reads/writes against named collections (customers, itineraries, conversations)."""

    def __init__(
        self,
        access_token: str,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_s: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        key = api_key if api_key is not None else settings.BACKEND_ANON_KEY
        super().__init__(
            base_url=f"{(base_url or settings.BACKEND_URL).rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout_s=timeout_s or settings.BACKEND_TIMEOUT,
            transport=transport,
        )

    async def select(
        self,
        table: str,
        *,
        filters: Optional[Dict[str, Any]] = None,
        columns: str = "*",
        order: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Record]:
        params = {"select": columns, **_eq_filters(filters)}
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"

        rows = await self._get(f"/{table}", params=params)
        logger.debug(f"[Backend] SELECT {table} -> {len(rows or [])} rows")
        return rows or []

    async def insert(self, table: str, record: Record) -> Record:
        rows = await self._post(
            f"/{table}",
            json=record,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise BackendServiceError(f"Insert into {table} returned no row")
        logger.debug(f"[Backend] INSERT {table}")
        return rows[0] if isinstance(rows, list) else rows

    async def update(self, table: str, values: Record, *, filters: Dict[str, Any]) -> List[Record]:
        rows = await self._patch(
            f"/{table}",
            json=values,
            params=_eq_filters(filters),
            headers={"Prefer": "return=representation"},
        )
        logger.debug(f"[Backend] UPDATE {table} -> {len(rows or [])} rows")
        return rows or []

    async def delete(self, table: str, *, filters: Dict[str, Any]) -> None:
        await self._delete(f"/{table}", params=_eq_filters(filters))
        logger.debug(f"[Backend] DELETE {table} {filters}")
