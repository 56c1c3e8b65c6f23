# copilot/api/v1/endpoints/itineraries.py
from typing import List

from fastapi import APIRouter, Depends, Response

from copilot.api.v1.dependencies import get_itinerary_service
from copilot.api.v1.endpoints.customers import to_response
from schemas.itineraries import (
    ItineraryCustomerUpdate,
    ItinerarySaveRequest,
    ItineraryStatusUpdate,
    SavedItinerary,
)
from schemas.offline import CachedResponse
from services.itinerary_service import ItineraryService

router = APIRouter()


@router.get("/", response_model=CachedResponse[List[SavedItinerary]])
async def list_itineraries(service: ItineraryService = Depends(get_itinerary_service)):
    """Saved itineraries, newest first, with offline fallback."""
    return to_response(await service.load())


@router.post("/", response_model=SavedItinerary, status_code=201)
async def save_itinerary(
    body: ItinerarySaveRequest,
    service: ItineraryService = Depends(get_itinerary_service),
):
    return await service.save_itinerary(body.itinerary, body.conversation_id, body.customer_id)


@router.patch("/{itinerary_id}/status", response_model=SavedItinerary)
async def update_itinerary_status(
    itinerary_id: str,
    body: ItineraryStatusUpdate,
    service: ItineraryService = Depends(get_itinerary_service),
):
    return await service.update_status(itinerary_id, body.status)


@router.patch("/{itinerary_id}/customer", response_model=SavedItinerary)
async def update_itinerary_customer(
    itinerary_id: str,
    body: ItineraryCustomerUpdate,
    service: ItineraryService = Depends(get_itinerary_service),
):
    return await service.update_customer(itinerary_id, body.customer_id)


@router.delete("/{itinerary_id}", status_code=204)
async def delete_itinerary(
    itinerary_id: str,
    service: ItineraryService = Depends(get_itinerary_service),
):
    await service.delete_itinerary(itinerary_id)
    return Response(status_code=204)
