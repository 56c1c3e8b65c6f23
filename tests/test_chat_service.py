"""
Chat service tests
"""

from unittest.mock import AsyncMock

import pytest

from copilot.conversation.llm_gateway import LLMCreditsExhaustedError, LLMGatewayError, LLMRateLimitError
from schemas.chat import ChatMessageRequest
from services.chat_service import FALLBACK_REPLY, ChatService
from services.conversation_service import ConversationService

from conftest import FakeBackend

AGENT = "agent-1"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def conversations(backend, cache, monitor):
    return ConversationService(backend, cache, monitor, AGENT)


@pytest.mark.asyncio
async def test_new_conversation_is_created_and_persisted(conversations, backend):
    gateway = AsyncMock()
    gateway.complete.return_value = "OPTION 1: Budget Friendly"
    service = ChatService(conversations, gateway)

    conversation_id, reply, used_fallback = await service.send_message(
        ChatMessageRequest(message="Mumbai to Delhi for 2", tradeoff_preference=30, travel_mode="plane")
    )

    assert conversation_id is not None
    assert reply["role"] == "assistant"
    assert reply["content"] == "OPTION 1: Budget Friendly"
    assert used_fallback is False

    stored = backend.tables["conversations"][0]
    assert stored["title"] == "Mumbai to Delhi for 2"
    assert [m["role"] for m in stored["messages"]] == ["user", "assistant"]

    kwargs = gateway.complete.await_args.kwargs
    assert kwargs["tradeoff_preference"] == 30
    assert kwargs["travel_mode"] == "plane"


@pytest.mark.asyncio
async def test_history_is_sent_to_gateway(conversations):
    created = await conversations.create_conversation("Goa")
    await conversations.update_messages(
        created["id"],
        [
            {"id": "1", "role": "user", "content": "Goa for 4"},
            {"id": "2", "role": "assistant", "content": "Which dates?"},
        ],
    )
    gateway = AsyncMock()
    gateway.complete.return_value = "Here you go"

    await ChatService(conversations, gateway).send_message(
        ChatMessageRequest(message="Next weekend", conversation_id=created["id"])
    )

    sent = gateway.complete.await_args.args[0]
    assert [m["content"] for m in sent] == ["Goa for 4", "Which dates?", "Next weekend"]
    assert all(set(m) == {"role", "content"} for m in sent)


@pytest.mark.asyncio
async def test_gateway_outage_uses_fallback(conversations):
    gateway = AsyncMock()
    gateway.complete.side_effect = LLMGatewayError("AI gateway error: 500")

    _, reply, used_fallback = await ChatService(conversations, gateway).send_message(
        ChatMessageRequest(message="Anything")
    )

    assert used_fallback is True
    assert reply["content"] == FALLBACK_REPLY


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [LLMRateLimitError, LLMCreditsExhaustedError])
async def test_quota_errors_are_raised(conversations, error):
    gateway = AsyncMock()
    gateway.complete.side_effect = error(error.public_message)

    with pytest.raises(error):
        await ChatService(conversations, gateway).send_message(ChatMessageRequest(message="Anything"))


@pytest.mark.asyncio
async def test_offline_chat_still_answers_unsaved(conversations, backend, source):
    source.set_online(False)
    gateway = AsyncMock()
    gateway.complete.return_value = "Reply"

    conversation_id, reply, _ = await ChatService(conversations, gateway).send_message(
        ChatMessageRequest(message="Anything")
    )

    assert conversation_id is None
    assert reply["content"] == "Reply"
    assert backend.calls == []
