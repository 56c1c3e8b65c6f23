"""
Chat Endpoint
=============
Routes:
- POST /api/v1/chat/message - One chat turn with the travel copilot
- GET /api/v1/chat/booking-links - Transport/hotel/restaurant search links
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query

from copilot.api.v1.dependencies import get_chat_service
from copilot.conversation.prompts import get_booking_urls
from schemas.chat import ChatMessageRequest, ChatMessageResponse
from schemas.preferences import TravelMode
from services.chat_service import ChatService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/message", response_model=ChatMessageResponse)
async def send_chat_message(
    request: ChatMessageRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Append the agent's message, get the copilot's recommendations and persist
    the transcript. A new conversation is created when none is given.
    """
    start = time.time()
    conversation_id, reply, used_fallback = await service.send_message(request)
    logger.info(
        f"Chat turn done in {int((time.time() - start) * 1000)}ms "
        f"(conversation={conversation_id}, fallback={used_fallback})"
    )
    return ChatMessageResponse(conversation_id=conversation_id, message=reply, used_fallback=used_fallback)


@router.get("/booking-links")
def booking_links(
    origin: str = Query(..., min_length=1),
    destination: str = Query(..., min_length=1),
    travel_mode: Optional[TravelMode] = None,
):
    return get_booking_urls(travel_mode, origin, destination)
