# services/itinerary_service.py
"""
Saved itineraries for a travel agent.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from schemas.itineraries import Itinerary
from services.backend_client import Record
from services.exceptions import NotFoundError
from services.roster_service import RosterService

logger = logging.getLogger(__name__)


def itinerary_title(itinerary: Itinerary) -> str:
    """e.g. 'Budget - Mumbai to Delhi'"""
    kind = itinerary.type[:1].upper() + itinerary.type[1:]
    return f"{kind} - {itinerary.flight.departure.city} to {itinerary.flight.arrival.city}"


class ItineraryService(RosterService):
    TABLE = "itineraries"

    async def save_itinerary(
        self,
        itinerary: Itinerary,
        conversation_id: Optional[str] = None,
        customer_id: Optional[str] = None,
    ) -> Record:
        self._require_online("save itinerary")

        row = await self.client.insert(
            self.TABLE,
            {
                "agent_id": self.agent_id,
                "title": itinerary_title(itinerary),
                "itinerary_type": itinerary.type,
                "details": itinerary.model_dump(mode="json"),
                "total_cost": itinerary.total_cost,
                "status": "saved",
                "conversation_id": conversation_id or None,
                "customer_id": customer_id or None,
            },
        )
        self._cache_prepend(row)
        logger.info(f"Itinerary {row.get('id')} saved for agent {self.agent_id}")
        return row

    async def _update(self, itinerary_id: str, changes: Dict[str, Any]) -> Record:
        self._require_online("update itinerary")

        values = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self.client.update(
            self.TABLE, values, filters={"id": itinerary_id, "agent_id": self.agent_id}
        )
        if not rows:
            raise NotFoundError(f"Itinerary {itinerary_id} not found")
        self._cache_merge(itinerary_id, values)
        return rows[0]

    async def update_status(self, itinerary_id: str, status: str) -> Record:
        return await self._update(itinerary_id, {"status": status})

    async def update_customer(self, itinerary_id: str, customer_id: Optional[str]) -> Record:
        return await self._update(itinerary_id, {"customer_id": customer_id})

    async def delete_itinerary(self, itinerary_id: str) -> None:
        self._require_online("delete itinerary")
        await self.client.delete(self.TABLE, filters={"id": itinerary_id, "agent_id": self.agent_id})
        self._cache_remove(itinerary_id)
