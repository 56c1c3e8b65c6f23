# copilot/api/v1/endpoints/customers.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from copilot.api.v1.dependencies import get_customer_service
from copilot.offline.cached_fetch import CachedFetchState
from schemas.customers import AIRLINE_OPTIONS, SPECIAL_NEEDS_OPTIONS, Customer, CustomerCreate
from schemas.offline import CachedResponse
from services.customer_service import CustomerService, search_customers

router = APIRouter()


def to_response(state: CachedFetchState, **overrides) -> dict:
    return {
        "data": state.data,
        "loading": state.loading,
        "is_offline": state.is_offline,
        "last_updated": state.last_updated,
        "source": state.source,
        **overrides,
    }


@router.get("/", response_model=CachedResponse[List[Customer]])
async def list_customers(
    q: Optional[str] = Query(None, description="Filter by name, email or phone"),
    service: CustomerService = Depends(get_customer_service),
):
    """
    Customer roster, newest first.
    Served from the offline cache when the backend is unreachable.
    """
    state = await service.load()
    if q and state.data is not None:
        return to_response(state, data=search_customers(state.data, q))
    return to_response(state)


@router.get("/options")
def customer_preference_options():
    return {"airlines": AIRLINE_OPTIONS, "special_needs": SPECIAL_NEEDS_OPTIONS}


@router.post("/", response_model=Customer, status_code=201)
async def create_customer(
    customer: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.create_customer(customer)


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(
    customer_id: str,
    customer: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    return await service.update_customer(customer_id, customer)


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
):
    await service.delete_customer(customer_id)
    return Response(status_code=204)
