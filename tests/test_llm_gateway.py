"""
LLM gateway tests (httpx MockTransport)
"""

import json

import httpx
import pytest

from copilot.conversation.llm_gateway import (
    EMPTY_REPLY,
    LLMCreditsExhaustedError,
    LLMGateway,
    LLMGatewayError,
    LLMRateLimitError,
)


def _gateway(handler) -> LLMGateway:
    return LLMGateway(
        api_key="llm-key",
        url="https://llm.test/v1/chat/completions",
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.mark.asyncio
async def test_complete_sends_system_prompt_and_history():
    captured = {}

    def handler(request: httpx.Request):
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("Here are 3 options"))

    reply = await _gateway(handler).complete(
        [{"role": "user", "content": "Mumbai to Delhi"}],
        language="hi",
        tradeoff_preference=80,
        travel_mode="train",
    )

    body = captured["body"]
    assert reply == "Here are 3 options"
    assert captured["headers"]["authorization"] == "Bearer llm-key"
    assert body["model"] == "test-model"
    assert body["messages"][0]["role"] == "system"
    assert "Hindi" in body["messages"][0]["content"]
    assert "80" in body["messages"][0]["content"]
    assert body["messages"][1] == {"role": "user", "content": "Mumbai to Delhi"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error",
    [(429, LLMRateLimitError), (402, LLMCreditsExhaustedError), (500, LLMGatewayError)],
)
async def test_error_statuses(status, error):
    gateway = _gateway(lambda request: httpx.Response(status, text="nope"))

    with pytest.raises(error) as exc_info:
        await gateway.complete([{"role": "user", "content": "hi"}])

    assert exc_info.value.status_code == (502 if status == 500 else status)


@pytest.mark.asyncio
async def test_empty_choices_give_apology():
    gateway = _gateway(lambda request: httpx.Response(200, json={"choices": []}))

    assert await gateway.complete([{"role": "user", "content": "hi"}]) == EMPTY_REPLY


@pytest.mark.asyncio
async def test_non_object_json_gives_apology():
    gateway = _gateway(lambda request: httpx.Response(200, json=["unexpected"]))

    assert await gateway.complete([{"role": "user", "content": "hi"}]) == EMPTY_REPLY


@pytest.mark.asyncio
async def test_invalid_json_is_gateway_error():
    gateway = _gateway(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(LLMGatewayError):
        await gateway.complete([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
async def test_network_failure_is_gateway_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LLMGatewayError):
        await _gateway(handler).complete([{"role": "user", "content": "hi"}])


@pytest.mark.asyncio
@pytest.mark.parametrize("choices", [{"0": {"message": {"content": "hi"}}}, ["not-a-dict"]])
async def test_malformed_choices_are_gateway_errors(choices):
    gateway = _gateway(lambda request: httpx.Response(200, json={"choices": choices}))

    with pytest.raises(LLMGatewayError):
        await gateway.complete([{"role": "user", "content": "hi"}])
