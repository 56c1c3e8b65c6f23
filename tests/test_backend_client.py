"""
Hosted backend client tests (httpx MockTransport)
"""

import json

import httpx
import pytest

from services.backend_client import BackendClient
from services.exceptions import BackendServiceError, BackendTimeoutError


def _client(handler) -> BackendClient:
    return BackendClient(
        "agent-token",
        base_url="https://backend.test/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_select_builds_postgrest_query():
    captured = {}

    def handler(request: httpx.Request):
        captured["request"] = request
        return httpx.Response(200, json=[{"id": "c1"}])

    async with _client(handler) as client:
        rows = await client.select(
            "customers", filters={"agent_id": "agent-1"}, order="created_at", ascending=False
        )

    request = captured["request"]
    assert rows == [{"id": "c1"}]
    assert request.url.path == "/rest/v1/customers"
    assert request.url.params["agent_id"] == "eq.agent-1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["select"] == "*"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["authorization"] == "Bearer agent-token"


@pytest.mark.asyncio
async def test_null_and_bool_filters():
    captured = {}

    def handler(request: httpx.Request):
        captured["params"] = request.url.params
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        await client.select("itineraries", filters={"customer_id": None, "archived": False})

    assert captured["params"]["customer_id"] == "is.null"
    assert captured["params"]["archived"] == "eq.false"


@pytest.mark.asyncio
async def test_insert_returns_created_row():
    def handler(request: httpx.Request):
        assert request.method == "POST"
        assert request.headers["prefer"] == "return=representation"
        body = json.loads(request.content)
        return httpx.Response(201, json=[{"id": "c9", **body}])

    async with _client(handler) as client:
        row = await client.insert("customers", {"name": "Asha"})

    assert row == {"id": "c9", "name": "Asha"}


@pytest.mark.asyncio
async def test_insert_without_representation_is_an_error():
    async with _client(lambda request: httpx.Response(201)) as client:
        with pytest.raises(BackendServiceError):
            await client.insert("customers", {"name": "Asha"})


@pytest.mark.asyncio
async def test_update_and_delete_filter_by_id():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.method, request.url.params["id"]))
        if request.method == "PATCH":
            return httpx.Response(200, json=[{"id": "i1", "status": "sent"}])
        return httpx.Response(204)

    async with _client(handler) as client:
        rows = await client.update("itineraries", {"status": "sent"}, filters={"id": "i1"})
        await client.delete("itineraries", filters={"id": "i1"})

    assert rows == [{"id": "i1", "status": "sent"}]
    assert seen == [("PATCH", "eq.i1"), ("DELETE", "eq.i1")]


@pytest.mark.asyncio
async def test_http_error_is_mapped():
    async with _client(lambda request: httpx.Response(401, json={"message": "JWT expired"})) as client:
        with pytest.raises(BackendServiceError) as exc_info:
            await client.select("customers")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_single_attempt_on_server_error():
    calls = []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(503)

    async with _client(handler) as client:
        with pytest.raises(BackendServiceError):
            await client.select("customers")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_timeout_is_mapped():
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("too slow", request=request)

    async with _client(handler) as client:
        with pytest.raises(BackendTimeoutError):
            await client.select("customers")


@pytest.mark.asyncio
async def test_transport_error_is_mapped():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("dns failure", request=request)

    async with _client(handler) as client:
        with pytest.raises(BackendServiceError):
            await client.select("customers")
