from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class CustomerPreferences(BaseModel):
    """Travel preferences an agent records for a customer."""
    budget_sensitivity: int = Field(50, ge=0, le=100, description="0 = very price-conscious, 100 = budget flexible")
    preferred_airlines: List[str] = Field(default_factory=list)
    hotel_type: Literal["budget", "standard", "luxury", "any"] = "any"
    comfort_priority: int = Field(50, ge=0, le=100, description="0 = cost over comfort, 100 = comfort over cost")
    meal_preference: str = "any"
    seat_preference: str = "any"
    special_needs: List[str] = Field(default_factory=list)


AIRLINE_OPTIONS = ["IndiGo", "Air India", "Vistara", "SpiceJet", "GoAir", "AirAsia"]
SPECIAL_NEEDS_OPTIONS = ["Wheelchair", "Senior Citizen", "Infant", "Vegetarian Meals", "Medical Assistance"]


# Properties to receive via API on customer creation / update
class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    preferences: CustomerPreferences = Field(default_factory=CustomerPreferences)


class Customer(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    preferences: Optional[CustomerPreferences] = None
    created_at: Optional[str] = None

    class Config:
        from_attributes = True
