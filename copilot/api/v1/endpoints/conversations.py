# copilot/api/v1/endpoints/conversations.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from copilot.api.v1.dependencies import get_conversation_service
from copilot.api.v1.endpoints.customers import to_response
from schemas.conversations import Conversation, ConversationCreate
from schemas.offline import CachedResponse
from services.conversation_service import ConversationService

router = APIRouter()


@router.get("/", response_model=CachedResponse[List[Conversation]])
async def list_conversations(service: ConversationService = Depends(get_conversation_service)):
    return to_response(await service.load())


@router.post("/", response_model=Conversation, status_code=201)
async def create_conversation(
    body: ConversationCreate,
    service: ConversationService = Depends(get_conversation_service),
):
    return await service.create_conversation(body.title)


@router.get("/{conversation_id}", response_model=Conversation)
async def get_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
):
    conversation = await service.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.delete("/{conversation_id}", status_code=204)
async def delete_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
):
    await service.delete_conversation(conversation_id)
    return Response(status_code=204)
