# services/conversation_service.py
"""
Conversation Service
Stores chat transcripts between an agent and the travel copilot.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from services.backend_client import Record
from services.exceptions import NotFoundError
from services.roster_service import RosterService

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 50


def conversation_title(first_message: str) -> str:
    text = first_message.strip()
    return text[:TITLE_MAX_CHARS] + ("..." if len(text) > TITLE_MAX_CHARS else "")


class ConversationService(RosterService):
    TABLE = "conversations"
    ORDER_BY = "updated_at"

    async def create_conversation(self, title: str) -> Record:
        self._require_online("create conversation")
        row = await self.client.insert(
            self.TABLE, {"agent_id": self.agent_id, "title": title, "messages": []}
        )
        self._cache_prepend(row)
        logger.info(f"Conversation {row.get('id')} created for agent {self.agent_id}")
        return row

    async def update_messages(self, conversation_id: str, messages: List[Dict[str, Any]]) -> Record:
        self._require_online("update conversation")
        values = {"messages": messages, "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self.client.update(
            self.TABLE, values, filters={"id": conversation_id, "agent_id": self.agent_id}
        )
        if not rows:
            raise NotFoundError(f"Conversation {conversation_id} not found")
        self._cache_merge(conversation_id, values)
        return rows[0]

    async def get_conversation(self, conversation_id: str) -> Optional[Record]:
        """Look the conversation up in the (possibly cached) roster."""
        state = await self.load()
        for row in state.data or []:
            if row.get("id") == conversation_id:
                return row
        return None

    async def delete_conversation(self, conversation_id: str) -> None:
        self._require_online("delete conversation")
        await self.client.delete(self.TABLE, filters={"id": conversation_id, "agent_id": self.agent_id})
        self._cache_remove(conversation_id)
