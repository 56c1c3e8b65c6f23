from typing import Literal, Optional
from pydantic import BaseModel

from schemas.itineraries import Itinerary

Channel = Literal["email", "whatsapp"]
TemplateKind = Literal["itinerary", "follow_up", "confirmation"]


class TemplateRenderRequest(BaseModel):
    channel: Channel = "email"
    kind: TemplateKind = "itinerary"
    itinerary: Optional[Itinerary] = None
    customer_name: str = "[Customer Name]"
    customer_email: str = ""
    agent_name: str = "Your Travel Agent"


class RenderedTemplate(BaseModel):
    channel: Channel
    kind: TemplateKind
    content: str
