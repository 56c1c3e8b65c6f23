# copilot/api/v1/dependencies.py
"""
FastAPI dependencies
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from copilot.conversation.llm_gateway import LLMGateway
from copilot.core.config import settings
from copilot.db.local_store import get_connectivity_monitor, get_offline_cache, get_storage_backend
from copilot.infrastructure.connectivity import ConnectivityMonitor
from copilot.infrastructure.storage import KeyValueStorage
from copilot.offline.cache import OfflineCache
from services.backend_client import BackendClient
from services.chat_service import ChatService
from services.conversation_service import ConversationService
from services.customer_service import CustomerService
from services.itinerary_service import ItineraryService
from services.preference_service import PreferenceService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Agent:
    id: str
    access_token: str


async def get_current_agent(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Agent:
    """
    Validate the hosted auth service's access token.

    Raises:
        HTTPException: 401 if token is missing, invalid or has no subject
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not settings.BACKEND_JWT_SECRET:
        logger.error("BACKEND_JWT_SECRET is not set, refusing to authenticate")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured",
        )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    token = credentials.credentials
    try:
        payload = jwt.decode(
            token,
            settings.BACKEND_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.BACKEND_JWT_AUDIENCE,
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise credentials_exception

    agent_id = payload.get("sub")
    if not agent_id:
        logger.warning("Token missing 'sub' claim")
        raise credentials_exception

    return Agent(id=str(agent_id), access_token=token)


async def get_backend_client(agent: Agent = Depends(get_current_agent)) -> AsyncIterator[BackendClient]:
    client = BackendClient(agent.access_token)
    try:
        yield client
    finally:
        await client.close()


def get_llm_gateway() -> LLMGateway:
    return LLMGateway()


def get_customer_service(
    agent: Agent = Depends(get_current_agent),
    client: BackendClient = Depends(get_backend_client),
    cache: OfflineCache = Depends(get_offline_cache),
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
) -> CustomerService:
    return CustomerService(client, cache, monitor, agent.id)


def get_itinerary_service(
    agent: Agent = Depends(get_current_agent),
    client: BackendClient = Depends(get_backend_client),
    cache: OfflineCache = Depends(get_offline_cache),
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
) -> ItineraryService:
    return ItineraryService(client, cache, monitor, agent.id)


def get_conversation_service(
    agent: Agent = Depends(get_current_agent),
    client: BackendClient = Depends(get_backend_client),
    cache: OfflineCache = Depends(get_offline_cache),
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
) -> ConversationService:
    return ConversationService(client, cache, monitor, agent.id)


def get_chat_service(
    conversations: ConversationService = Depends(get_conversation_service),
    gateway: LLMGateway = Depends(get_llm_gateway),
) -> ChatService:
    return ChatService(conversations, gateway)


def get_preference_service(
    agent: Agent = Depends(get_current_agent),
    storage: KeyValueStorage = Depends(get_storage_backend),
) -> PreferenceService:
    return PreferenceService(storage, agent.id)
