"""
Feed routes: read-only passthrough to the external inventory feed.
Version: 1.0.0
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from inventory_sync.container import get_feed_service
from inventory_sync.core.exceptions import (
    ConfigurationError,
    FeedUnavailable,
    InventorySyncException,
    ItemProcessingError,
    RateLimitExceeded,
)
from inventory_sync.schemas.feed import FeedItemsResponse, FeedLocationsResponse, NormalizedEquipment

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/feed", tags=["feed"])


def _to_http(exc: InventorySyncException) -> HTTPException:
    if isinstance(exc, RateLimitExceeded):
        status_code = 429
    elif isinstance(exc, (FeedUnavailable, ItemProcessingError)):
        status_code = 502
    else:
        status_code = 500
    logger.error("[API] feed error status=%s detail=%s", status_code, exc)
    return HTTPException(status_code=status_code, detail=str(exc))


@router.get("/items", response_model=FeedItemsResponse)
async def list_feed_items(location_ids: Optional[List[int]] = Query(None)):
    """All feed items, normalized to the local equipment shape."""
    try:
        items = await get_feed_service().list_items(location_ids)
    except (ConfigurationError, FeedUnavailable, RateLimitExceeded) as exc:
        raise _to_http(exc) from exc
    return FeedItemsResponse(items=items, count=len(items))


@router.get("/items/{external_id}", response_model=NormalizedEquipment)
async def get_feed_item(external_id: int):
    try:
        return await get_feed_service().get_item(external_id)
    except (ConfigurationError, FeedUnavailable, RateLimitExceeded, ItemProcessingError) as exc:
        raise _to_http(exc) from exc


@router.get("/locations", response_model=FeedLocationsResponse)
async def list_feed_locations():
    try:
        locations = await get_feed_service().list_locations()
    except (ConfigurationError, FeedUnavailable, RateLimitExceeded) as exc:
        raise _to_http(exc) from exc
    return FeedLocationsResponse(locations=locations, count=len(locations))
