# copilot/conversation/llm_gateway.py
"""
LLM Gateway Client
Single request/response call to an OpenAI-compatible chat completions endpoint:
system prompt + conversation history in, free-text recommendation out.
"""

import logging
from typing import Dict, List, Optional

import httpx

from copilot.conversation.prompts import build_system_prompt
from copilot.core.config import settings

logger = logging.getLogger(__name__)

EMPTY_REPLY = "I apologize, but I could not generate a response. Please try again."


class LLMGatewayError(Exception):
    status_code = 502
    public_message = "AI service unavailable"


class LLMRateLimitError(LLMGatewayError):
    status_code = 429
    public_message = "Rate limit exceeded. Please try again later."


class LLMCreditsExhaustedError(LLMGatewayError):
    status_code = 402
    public_message = "AI credits exhausted. Please add credits to continue."


class LLMGateway:
    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY
        self.url = url or settings.LLM_GATEWAY_URL
        self.model = model or settings.LLM_MODEL
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self.timeout = timeout or settings.LLM_TIMEOUT
        self._transport = transport

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        language: Optional[str] = None,
        tradeoff_preference: Optional[int] = None,
        travel_mode: Optional[str] = None,
    ) -> str:
        """
        Args:
            messages: Conversation history as [{"role": ..., "content": ...}]

        Returns:
            Assistant reply text

        Raises:
            LLMRateLimitError: gateway answered 429
            LLMCreditsExhaustedError: gateway answered 402
            LLMGatewayError: any other failure
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(language, tradeoff_preference, travel_mode)},
                *({"role": m["role"], "content": m["content"]} for m in messages),
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"[LLMGateway] Calling {self.model} with {len(messages)} messages")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"[LLMGateway] Request failed: {e}")
            raise LLMGatewayError(f"AI gateway request failed: {e}") from e

        if resp.status_code == 429:
            logger.warning("[LLMGateway] Rate limited")
            raise LLMRateLimitError(LLMRateLimitError.public_message)
        if resp.status_code == 402:
            logger.warning("[LLMGateway] Credits exhausted")
            raise LLMCreditsExhaustedError(LLMCreditsExhaustedError.public_message)
        if resp.status_code >= 400:
            logger.error(f"[LLMGateway] AI gateway error: {resp.status_code} {resp.text[:500]}")
            raise LLMGatewayError(f"AI gateway error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMGatewayError("AI gateway returned invalid JSON") from e

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            return EMPTY_REPLY
        if not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise LLMGatewayError("AI gateway returned malformed choices")

        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        return content or EMPTY_REPLY
