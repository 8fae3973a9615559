"""
Lazy DI container: singleton access to stores and services.

Works in both FastAPI (async) and Celery (sync) contexts. The feed client is
not cached: each sync run or feed request builds its own.
Version: 1.0.0
"""

from functools import lru_cache

from inventory_sync.core.config import get_settings
from inventory_sync.clients.feed_client import InventoryFeedClient
from inventory_sync.clients.supabase_client import SupabaseClient
from inventory_sync.db.equipment_store import EquipmentStore
from inventory_sync.services.feed_service import FeedService
from inventory_sync.services.sync_service import InventorySyncService


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(get_settings())


def new_feed_client():
    return InventoryFeedClient(get_settings())


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_equipment_store():
    return EquipmentStore(get_supabase_client())


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_sync_service():
    return InventorySyncService(
        settings=get_settings(),
        store=get_equipment_store(),
        feed_client_factory=new_feed_client,
    )


@lru_cache(maxsize=1)
def get_feed_service():
    return FeedService(feed_client_factory=new_feed_client)
