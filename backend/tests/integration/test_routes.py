"""
Integration tests for the HTTP routes.

Runs the FastAPI app through TestClient with the service getters patched.

Tests cover:
- GET /health
- POST /api/sync/run success, partial failure and fatal failure (500 with body)
- GET /api/sync/status
- POST /api/sync/enqueue queues the Celery task
- GET /api/feed/items, /items/{id}, /locations and error status mapping

Version: 1.0.0
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from inventory_sync.core.exceptions import (
    ConfigurationError,
    FeedUnavailable,
    PersistenceError,
    RateLimitExceeded,
)
from inventory_sync.schemas.feed import FeedLocation
from inventory_sync.schemas.sync import SyncResult, SyncStatsResponse
from inventory_sync.services.feed_service import normalize_feed_item


SYNCED_AT = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def client():
    from inventory_sync.main import app
    return TestClient(app)


@pytest.fixture
def sync_service():
    service = MagicMock()
    service.run_sync = AsyncMock()
    service.get_sync_stats = AsyncMock()
    with patch("inventory_sync.routes.sync.get_sync_service", return_value=service):
        yield service


@pytest.fixture
def feed_service():
    service = MagicMock()
    service.list_items = AsyncMock(return_value=[])
    service.get_item = AsyncMock()
    service.list_locations = AsyncMock(return_value=[])
    with patch("inventory_sync.routes.feed.get_feed_service", return_value=service):
        yield service


@pytest.mark.integration
class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert set(body) == {"status", "feed_configured", "sync_enabled"}


@pytest.mark.integration
class TestSyncRun:

    def test_success(self, client, sync_service):
        sync_service.run_sync.return_value = SyncResult(
            success=True, created=2, updated=5, archived=1, errors=[], synced_at=SYNCED_AT
        )

        response = client.post("/api/sync/run")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert (body["created"], body["updated"], body["archived"]) == (2, 5, 1)

    def test_partial_failure_is_200(self, client, sync_service):
        sync_service.run_sync.return_value = SyncResult(
            success=True, created=99, errors=["Failed to create equipment sku X (external id 1): boom"],
            synced_at=SYNCED_AT,
        )

        response = client.post("/api/sync/run")

        assert response.status_code == 200
        assert len(response.json()["errors"]) == 1

    def test_fatal_failure_is_500_with_result_body(self, client, sync_service):
        sync_service.run_sync.return_value = SyncResult(
            success=False, errors=["Sync failed: InventoryFeed unavailable after 4 attempts: HTTP 503"],
            synced_at=SYNCED_AT,
        )

        response = client.post("/api/sync/run")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["created"] == 0
        assert body["errors"][0].startswith("Sync failed:")

    def test_unconfigured_store_is_500_with_result_body(self, client):
        with patch(
            "inventory_sync.routes.sync.get_sync_service",
            side_effect=ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set"),
        ):
            response = client.post("/api/sync/run")

        assert response.status_code == 500
        assert response.json()["success"] is False


@pytest.mark.integration
class TestSyncStatus:

    def test_status(self, client, sync_service):
        sync_service.get_sync_stats.return_value = SyncStatsResponse(
            total_equipment=10, synced_from_feed=8, archived_count=2, last_synced_at=SYNCED_AT
        )

        response = client.get("/api/sync/status")

        assert response.status_code == 200
        assert response.json()["synced_from_feed"] == 8

    def test_status_store_error(self, client, sync_service):
        sync_service.get_sync_stats.side_effect = PersistenceError("Supabase count on equipment", "down")
        assert client.get("/api/sync/status").status_code == 500


@pytest.mark.integration
class TestSyncEnqueue:

    def test_enqueue(self, client):
        task = MagicMock(id="task-123")
        with patch("inventory_sync.celery_app.tasks.sync_inventory.run_inventory_sync.delay", return_value=task):
            response = client.post("/api/sync/enqueue")

        assert response.status_code == 200
        assert response.json()["status"] == "queued"
        assert response.json()["task_id"] == "task-123"


@pytest.mark.integration
class TestFeedRoutes:

    def test_list_items(self, client, feed_service, sample_feed_item):
        feed_service.list_items.return_value = [normalize_feed_item(sample_feed_item)]

        response = client.get("/api/feed/items", params=[("location_ids", "1"), ("location_ids", "2")])

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["items"][0]["id"] == "feed-101"
        feed_service.list_items.assert_awaited_once_with([1, 2])

    def test_get_item(self, client, feed_service, sample_feed_item):
        feed_service.get_item.return_value = normalize_feed_item(sample_feed_item)

        response = client.get("/api/feed/items/101")

        assert response.status_code == 200
        assert response.json()["sku"] == "DRL-001"

    def test_locations(self, client, feed_service):
        feed_service.list_locations.return_value = [FeedLocation(id=1, name="Main")]

        response = client.get("/api/feed/locations")

        assert response.json() == {"locations": [{"id": 1, "name": "Main"}], "count": 1}

    @pytest.mark.parametrize("error,status", [
        (RateLimitExceeded("InventoryFeed", attempts=4), 429),
        (FeedUnavailable("InventoryFeed", "HTTP 503", attempts=4), 502),
        (ConfigurationError("INVENTORY_FEED_API_TOKEN is not configured"), 500),
    ])
    def test_error_mapping(self, client, feed_service, error, status):
        feed_service.list_items.side_effect = error
        response = client.get("/api/feed/items")
        assert response.status_code == status
        assert response.json()["detail"] == str(error)
