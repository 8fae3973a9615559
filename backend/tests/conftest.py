"""
Pytest configuration and shared fixtures for the inventory sync tests.

Provides settings, a chained Supabase table mock, feed item payloads and
local equipment records.
Version: 1.0.0
"""
import os

# Keep the app from forking Celery workers when main is imported in tests
os.environ.setdefault("AUTO_START_CELERY", "false")

import pytest
from unittest.mock import AsyncMock, MagicMock

from inventory_sync.core.config import Settings
from inventory_sync.schemas.equipment import EquipmentRecord, UnitType
from inventory_sync.schemas.feed import FeedItem


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-service-role-key",
        inventory_feed_base_url="https://feed.test",
        inventory_feed_api_token="test-feed-token",
        inventory_feed_page_limit=2,
        inventory_feed_max_pages=100,
        inventory_feed_min_interval_ms=0,
        inventory_feed_max_retries=3,
        inventory_feed_retry_delay_ms=0,
        sync_chunk_size=100,
        sync_max_workers=10,
        redis_url="redis://localhost:6379/15",
    )


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_table():
    """Chainable query builder; every filter returns the builder itself."""
    table = MagicMock()
    for name in ("select", "insert", "upsert", "update", "eq", "in_", "order", "range", "limit", "is_"):
        getattr(table, name).return_value = table
    table.not_ = table
    table.execute.return_value = MagicMock(data=[], count=0)
    return table


@pytest.fixture
def mock_supabase_client(mock_table):
    """SupabaseClient wrapper whose .client.table() returns mock_table."""
    supabase_client = MagicMock()
    supabase_client.client.table.return_value = mock_table
    return supabase_client


@pytest.fixture
def mock_equipment_store():
    """EquipmentStore with every coroutine replaced by an AsyncMock."""
    store = MagicMock()
    store.list_equipment = AsyncMock(return_value=[])
    store.update_equipment = AsyncMock(return_value=None)
    store.upsert_inventory = AsyncMock(return_value=None)
    store.create_equipment_with_inventory = AsyncMock(return_value="new-id")
    store.archive_equipment = AsyncMock(side_effect=lambda ids, synced_at=None: len(set(ids)))
    store.count_equipment = AsyncMock(return_value=0)
    store.get_last_synced_at = AsyncMock(return_value=None)
    return store


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_raw_item():
    """One item as the feed returns it."""
    return {
        "id": 101,
        "name": "Cordless Drill",
        "barcode": "DRL-001",
        "sku": None,
        "memo": "18V with two batteries",
        "photo_url": "https://cdn.test/drill.png",
        "attributes": {"Unit_Price": "$129.99", "unit_type": "EA"},
        "quantities": [
            {"location_id": 1, "location_name": "Main", "quantity": 4},
            {"location_id": 2, "location_name": "Truck", "quantity": 1},
        ],
        "created_at": "2026-01-05T10:00:00Z",
        "updated_at": "2026-03-01T08:30:00Z",
    }


@pytest.fixture
def sample_feed_item(sample_raw_item):
    return FeedItem.model_validate(sample_raw_item)


def make_item(external_id, name="Item", barcode=None, **extra) -> FeedItem:
    """Build a FeedItem with only the fields a test cares about."""
    payload = {"id": external_id, "name": name, "barcode": barcode}
    payload.update(extra)
    return FeedItem.model_validate(payload)


def make_record(record_id, sku, external_id=None, is_archived=False, **extra) -> EquipmentRecord:
    """Build a local EquipmentRecord."""
    return EquipmentRecord(
        id=record_id,
        sku=sku,
        name=extra.pop("name", f"Equipment {record_id}"),
        external_id=external_id,
        is_archived=is_archived,
        unit_type=extra.pop("unit_type", UnitType.UNIT),
        **extra,
    )


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def record_factory():
    return make_record
