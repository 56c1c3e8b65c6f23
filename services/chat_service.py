# services/chat_service.py
"""
Chat Service
One chat turn: record the agent's message, ask the LLM gateway, record the
reply. Gateway outages fall back to a canned reply so the agent is never left
without an answer; quota errors are surfaced.
"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from copilot.conversation.llm_gateway import (
    LLMCreditsExhaustedError,
    LLMGateway,
    LLMGatewayError,
    LLMRateLimitError,
)
from schemas.chat import ChatMessageRequest
from services.conversation_service import ConversationService, conversation_title
from services.exceptions import BackendServiceError, OfflineError

logger = logging.getLogger(__name__)

FALLBACK_REPLY = """I've analyzed your travel request and generated 3 optimized options based on your preferences. Each option is tailored to different priorities - budget, balanced value, or premium comfort.

Here's what I considered:
- Your travel needs and preferences
- Flight timing and convenience
- Hotel quality and amenities
- Overall value for money

You can use the preference slider below to adjust the recommendations based on what matters most to you."""


def _message(role: str, content: str) -> Dict[str, str]:
    return {"id": f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}", "role": role, "content": content}


class ChatService:
    def __init__(self, conversations: ConversationService, gateway: LLMGateway):
        self.conversations = conversations
        self.gateway = gateway

    async def _load_history(self, conversation_id: Optional[str]) -> List[Dict[str, Any]]:
        if not conversation_id:
            return []
        conversation = await self.conversations.get_conversation(conversation_id)
        return list((conversation or {}).get("messages") or [])

    async def send_message(self, request: ChatMessageRequest) -> Tuple[Optional[str], Dict[str, str], bool]:
        """
        Returns:
            (conversation_id, assistant message, used_fallback)

        Raises:
            LLMRateLimitError / LLMCreditsExhaustedError: gateway quota problems
        """
        history = await self._load_history(request.conversation_id)
        messages = history + [_message("user", request.message)]

        conversation_id = request.conversation_id
        if not conversation_id:
            try:
                created = await self.conversations.create_conversation(conversation_title(request.message))
                conversation_id = created.get("id")
            except (BackendServiceError, OfflineError) as e:
                logger.warning(f"[Chat] Could not create conversation, continuing unsaved: {e}")

        used_fallback = False
        try:
            content = await self.gateway.complete(
                [{"role": m["role"], "content": m["content"]} for m in messages],
                language=request.language,
                tradeoff_preference=request.tradeoff_preference,
                travel_mode=request.travel_mode,
            )
        except (LLMRateLimitError, LLMCreditsExhaustedError):
            raise
        except LLMGatewayError as e:
            logger.error(f"[Chat] Gateway failed, using fallback reply: {e}")
            content = FALLBACK_REPLY
            used_fallback = True

        reply = _message("assistant", content)
        messages.append(reply)

        if conversation_id:
            try:
                await self.conversations.update_messages(conversation_id, messages)
            except (BackendServiceError, OfflineError) as e:
                logger.warning(f"[Chat] Could not persist conversation {conversation_id}: {e}")

        return conversation_id, reply, used_fallback
