"""
PreferenceService

Agent-level preferences (reply language, travel mode) kept in the same
durable storage as the offline cache, under plain keys outside the cache
namespace, so clearing the cache never resets them.
"""

from __future__ import annotations

import logging
from typing import Optional

from copilot.core.localization import DEFAULT_LANGUAGE, is_supported_language
from copilot.infrastructure.storage import KeyValueStorage, StorageError
from schemas.preferences import AgentPreferences, AgentPreferencesUpdate
from services.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

TRAVEL_MODES = ("bus", "train", "plane")


class PreferenceService:
    """
    Facade over the storage keys:
    - preferred_language / has_selected_language
    - preferred_travel_mode / has_selected_travel_mode
    Keys are suffixed with the agent id so several agents can share one store.
    """

    def __init__(self, storage: KeyValueStorage, agent_id: str) -> None:
        self._storage = storage
        self.agent_id = agent_id

    def _key(self, name: str) -> str:
        return f"{name}:{self.agent_id}"

    def _read(self, name: str) -> Optional[str]:
        try:
            return self._storage.get_item(self._key(name))
        except StorageError as e:
            logger.warning(f"[Preferences] Read of {name} failed: {e}")
            return None

    def get_preferences(self) -> AgentPreferences:
        mode = self._read("preferred_travel_mode")
        return AgentPreferences(
            language=self._read("preferred_language") or DEFAULT_LANGUAGE,
            has_selected_language=self._read("has_selected_language") == "true",
            travel_mode=mode if mode in TRAVEL_MODES else None,
            has_selected_travel_mode=self._read("has_selected_travel_mode") == "true",
        )

    def update_preferences(self, update: AgentPreferencesUpdate) -> AgentPreferences:
        """
        Raises:
            ValidationFailedError: unsupported language code
            StorageError: the store refused the write
        """
        if update.language is not None:
            if not is_supported_language(update.language):
                raise ValidationFailedError(f"Unsupported language: {update.language}")
            self._storage.set_item(self._key("preferred_language"), update.language)
            self._storage.set_item(self._key("has_selected_language"), "true")

        if update.travel_mode is not None:
            self._storage.set_item(self._key("preferred_travel_mode"), update.travel_mode)
            self._storage.set_item(self._key("has_selected_travel_mode"), "true")

        logger.info(f"[Preferences] Updated for agent {self.agent_id}")
        return self.get_preferences()
