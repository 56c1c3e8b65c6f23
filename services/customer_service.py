# services/customer_service.py
"""
Customer roster for a travel agent.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from schemas.customers import CustomerCreate
from services.backend_client import Record
from services.exceptions import NotFoundError, ValidationFailedError
from services.roster_service import RosterService

logger = logging.getLogger(__name__)


class CustomerService(RosterService):
    TABLE = "customers"

    def _payload(self, customer: CustomerCreate) -> Dict[str, Any]:
        name = customer.name.strip()
        if not name:
            raise ValidationFailedError("Please enter a customer name")
        return {
            "agent_id": self.agent_id,
            "name": name,
            "email": customer.email or None,
            "phone": customer.phone or None,
            "notes": customer.notes or None,
            "preferences": customer.preferences.model_dump(),
        }

    async def create_customer(self, customer: CustomerCreate) -> Record:
        payload = self._payload(customer)
        self._require_online("add customer")

        row = await self.client.insert(self.TABLE, payload)
        self._cache_prepend(row)
        logger.info(f"Customer {row.get('id')} added for agent {self.agent_id}")
        return row

    async def update_customer(self, customer_id: str, customer: CustomerCreate) -> Record:
        payload = self._payload(customer)
        self._require_online("update customer")

        rows = await self.client.update(
            self.TABLE, payload, filters={"id": customer_id, "agent_id": self.agent_id}
        )
        if not rows:
            raise NotFoundError(f"Customer {customer_id} not found")
        self._cache_merge(customer_id, rows[0])
        return rows[0]

    async def delete_customer(self, customer_id: str) -> None:
        self._require_online("delete customer")
        await self.client.delete(self.TABLE, filters={"id": customer_id, "agent_id": self.agent_id})
        self._cache_remove(customer_id)
        logger.info(f"Customer {customer_id} deleted for agent {self.agent_id}")


def search_customers(customers: List[Record], query: str) -> List[Record]:
    """Case-insensitive match on name, email or phone."""
    q = (query or "").strip().lower()
    if not q:
        return list(customers)
    return [
        c for c in customers
        if any(q in (c.get(field) or "").lower() for field in ("name", "email", "phone"))
    ]
