from typing import Literal, Optional
from pydantic import BaseModel

TravelMode = Literal["bus", "train", "plane"]


class AgentPreferences(BaseModel):
    language: str = "en"
    has_selected_language: bool = False
    travel_mode: Optional[TravelMode] = None
    has_selected_travel_mode: bool = False


class AgentPreferencesUpdate(BaseModel):
    language: Optional[str] = None
    travel_mode: Optional[TravelMode] = None
