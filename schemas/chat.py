from typing import Optional
from pydantic import BaseModel, Field

from schemas.conversations import ChatMessage
from schemas.preferences import TravelMode


class ChatMessageRequest(BaseModel):
    """Request body for a chat turn."""

    message: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="Agent's message to the travel copilot",
        example="2 adults from Mumbai to Delhi next Friday, back Sunday",
    )
    conversation_id: Optional[str] = Field(None, description="Existing conversation; a new one is created when omitted")
    language: str = Field("en", description="Language code for the reply")
    tradeoff_preference: int = Field(50, ge=0, le=100, description="0 = budget focused, 100 = comfort focused")
    travel_mode: Optional[TravelMode] = None


class ChatMessageResponse(BaseModel):
    conversation_id: Optional[str]
    message: ChatMessage
    used_fallback: bool = False
