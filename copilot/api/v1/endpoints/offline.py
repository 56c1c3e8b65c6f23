# copilot/api/v1/endpoints/offline.py
"""
Offline layer status and maintenance.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from copilot.api.v1.dependencies import Agent, get_current_agent
from copilot.db.local_store import get_connectivity_monitor, get_connectivity_source, get_offline_cache
from copilot.infrastructure.connectivity import (
    ConnectivityMonitor,
    ConnectivitySource,
    HttpProbeConnectivitySource,
    ManualConnectivitySource,
    indicator_status,
)
from copilot.offline.cache import OfflineCache
from schemas.offline import CacheClearResult, ConnectivityOverride, ConnectivityStatus
from services.conversation_service import ConversationService
from services.customer_service import CustomerService
from services.itinerary_service import ItineraryService

logger = logging.getLogger(__name__)
router = APIRouter()

ROSTERS = (CustomerService, ItineraryService, ConversationService)


@router.get("/status", response_model=ConnectivityStatus)
def connectivity_status(
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
    source: ConnectivitySource = Depends(get_connectivity_source),
):
    indicator = indicator_status(monitor)
    return ConnectivityStatus(
        is_offline=monitor.is_offline,
        indicator_visible=indicator["visible"],
        indicator_message=indicator["message"],
        probe_url=source.url if isinstance(source, HttpProbeConnectivitySource) else None,
    )


@router.post("/connectivity", response_model=ConnectivityStatus, dependencies=[Depends(get_current_agent)])
def override_connectivity(
    body: ConnectivityOverride,
    monitor: ConnectivityMonitor = Depends(get_connectivity_monitor),
    source: ConnectivitySource = Depends(get_connectivity_source),
):
    """Flip the manual connectivity signal. Not available when a probe is configured."""
    if not isinstance(source, ManualConnectivitySource):
        raise HTTPException(status_code=409, detail="Connectivity is driven by a reachability probe")
    source.set_online(body.online)
    return connectivity_status(monitor, source)


@router.delete("/cache", response_model=CacheClearResult)
def clear_offline_cache(
    key: Optional[str] = Query(
        None, description="Roster to drop (customers, itineraries, conversations); all of the caller's when omitted"
    ),
    agent: Agent = Depends(get_current_agent),
    cache: OfflineCache = Depends(get_offline_cache),
):
    """Drop the caller's cached rosters. Other agents' entries are never touched."""
    own_keys = {roster.TABLE: roster.cache_key_for(agent.id) for roster in ROSTERS}

    if key is None:
        removed = sum(cache.clear(cache_key) for cache_key in own_keys.values())
    else:
        cache_key = own_keys.get(key)
        if cache_key is None and key in own_keys.values():
            cache_key = key
        if cache_key is None:
            raise HTTPException(status_code=403, detail="Cache key does not belong to this agent")
        removed = cache.clear(cache_key)
        key = cache_key

    logger.info(f"Offline cache cleared for agent {agent.id} (key={key or '*'}, removed={removed})")
    return CacheClearResult(removed=removed, key=key)
