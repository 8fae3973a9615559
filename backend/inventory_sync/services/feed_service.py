"""
Feed service: read-only views of the external inventory for callers.
Version: 1.0.0
"""
import logging
from typing import Callable, List, Optional

from inventory_sync.clients.feed_client import InventoryFeedClient
from inventory_sync.core.constants.sync import DEFAULT_ITEM_NAME
from inventory_sync.schemas.feed import FeedItem, FeedLocation, NormalizedEquipment
from inventory_sync.utils.attribute_heuristics import (
    derive_sku,
    extract_unit_price,
    item_unit_type,
    total_quantity,
)

logger = logging.getLogger("feed_service")


def normalize_feed_item(item: FeedItem) -> NormalizedEquipment:
    """Shape a feed item like local equipment, without touching the store."""
    return NormalizedEquipment(
        id=f"feed-{item.external_id}",
        name=item.name or DEFAULT_ITEM_NAME,
        sku=derive_sku(item),
        description=item.memo or None,
        price_per_unit=extract_unit_price(item.attributes),
        unit_type=item_unit_type(item).value,
        quantity=total_quantity(item),
        external_id=item.external_id,
        photo_url=item.photo_url,
        quantities=item.quantities,
    )


class FeedService:
    def __init__(self, feed_client_factory: Callable[[], InventoryFeedClient]) -> None:
        self._feed_client_factory = feed_client_factory

    async def list_items(self, location_ids: Optional[List[int]] = None) -> List[NormalizedEquipment]:
        items = await self._feed_client_factory().fetch_all(location_ids)
        return [normalize_feed_item(item) for item in items]

    async def get_item(self, external_id: int) -> NormalizedEquipment:
        item = await self._feed_client_factory().fetch_item(external_id)
        return normalize_feed_item(item)

    async def list_locations(self) -> List[FeedLocation]:
        return await self._feed_client_factory().fetch_locations()
