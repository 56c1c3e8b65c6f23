# copilot/api/v1/endpoints/preferences.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from copilot.api.v1.dependencies import get_preference_service
from copilot.core.localization import group_by_region, search_languages
from schemas.preferences import AgentPreferences, AgentPreferencesUpdate
from services.preference_service import PreferenceService

router = APIRouter()


@router.get("/", response_model=AgentPreferences)
def get_preferences(service: PreferenceService = Depends(get_preference_service)):
    return service.get_preferences()


@router.put("/", response_model=AgentPreferences)
def update_preferences(
    body: AgentPreferencesUpdate,
    service: PreferenceService = Depends(get_preference_service),
):
    return service.update_preferences(body)


@router.get("/languages")
def list_languages(q: Optional[str] = Query(None, description="Search by name, native name or region")):
    return group_by_region(search_languages(q or ""))
