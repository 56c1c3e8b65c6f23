from typing import List, Literal, Optional
from pydantic import BaseModel, Field

ItineraryType = Literal["budget", "balanced", "comfort"]
ItineraryStatus = Literal["saved", "sent", "booked", "cancelled"]


# --- Itinerary Sub-Schemas ---

class FlightEndpoint(BaseModel):
    city: str
    airport: str
    time: str
    date: str


class Flight(BaseModel):
    id: str
    airline: str
    flight_no: str
    departure: FlightEndpoint
    arrival: FlightEndpoint
    duration: str
    price: float
    stops: int = 0
    layover_duration: Optional[str] = None
    is_red_eye: bool = False
    comfort_score: int = Field(0, ge=0, le=10)


class Hotel(BaseModel):
    id: str
    name: str
    city: str
    rating: float
    price_per_night: float
    amenities: List[str] = Field(default_factory=list)
    room_type: str
    comfort_score: int = Field(0, ge=0, le=10)


class Itinerary(BaseModel):
    """A proposed flight + hotel option."""
    id: str
    type: ItineraryType
    flight: Flight
    hotel: Hotel
    total_cost: float
    total_duration: str
    explanation: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    price_trend: Literal["rising", "stable", "dropping"] = "stable"
    confidence_score: int = Field(0, ge=0, le=100)


# --- Request Body Schemas ---

class ItinerarySaveRequest(BaseModel):
    itinerary: Itinerary
    conversation_id: Optional[str] = None
    customer_id: Optional[str] = None


class ItineraryStatusUpdate(BaseModel):
    status: ItineraryStatus


class ItineraryCustomerUpdate(BaseModel):
    customer_id: Optional[str] = None


class SavedItinerary(BaseModel):
    id: str
    title: str
    itinerary_type: str
    details: Itinerary
    total_cost: Optional[float] = None
    status: Optional[str] = None
    customer_id: Optional[str] = None
    conversation_id: Optional[str] = None
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True
