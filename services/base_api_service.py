#services/base_api_service.py



from __future__ import annotations
import logging
from typing import Any, Dict, Optional


import httpx


from services.exceptions import BackendServiceError, BackendTimeoutError




class BaseAPIService:
    """
    Thin httpx wrapper shared by the hosted-backend and LLM gateway clients.
    One attempt per call: callers own fallback behaviour.
    """
    DEFAULT_TIMEOUT_S = 15.0


    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout_s: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout_s = timeout_s or self.DEFAULT_TIMEOUT_S
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logging.getLogger(self.__class__.__name__)


    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout_s, headers=self.headers, transport=self._transport
            )
        return self._client


    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None


    async def __aenter__(self):
        return self


    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        ) -> Any:
        url = f"{self.base_url}{endpoint}"

        try:
            client = await self._get_client()
            resp = await client.request(method, url, params=params, json=json, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.logger.error("HTTP error %s on %s %s: %s", status, method, url, e.response.text[:500])
            raise BackendServiceError(f"{method} {endpoint} failed with {status}", status_code=status) from e
        except httpx.TimeoutException as e:
            self.logger.error("Timeout on %s %s: %s", method, url, e)
            raise BackendTimeoutError(f"{method} {endpoint} timed out") from e
        except httpx.TransportError as e:
            self.logger.error("Transport error on %s %s: %s", method, url, e)
            raise BackendServiceError(f"{method} {endpoint} unreachable: {e}") from e

        if not resp.content:
            return None
        return resp.json()


    async def _get(self, endpoint: str, *, params: Optional[Dict[str, Any]] = None, **kw) -> Any:
        return await self._request("GET", endpoint, params=params, **kw)


    async def _post(self, endpoint: str, *, json: Any = None, **kw) -> Any:
        return await self._request("POST", endpoint, json=json, **kw)


    async def _patch(self, endpoint: str, *, json: Any = None, **kw) -> Any:
        return await self._request("PATCH", endpoint, json=json, **kw)


    async def _delete(self, endpoint: str, **kw) -> Any:
        return await self._request("DELETE", endpoint, **kw)
