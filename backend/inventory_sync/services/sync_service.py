"""
Inventory sync service: run one full feed-to-local reconciliation.

Stages run strictly in sequence:
    fetch (feed client) -> snapshot -> reconcile -> apply -> result

A fresh feed client (and with it a fresh request pacer) is built for every
run and discarded when the run ends.
Version: 1.0.0
"""
import logging
from typing import Callable, Optional

from inventory_sync.clients.feed_client import InventoryFeedClient
from inventory_sync.core.config import Settings
from inventory_sync.core.exceptions import (
    ConfigurationError,
    FeedUnavailable,
    RateLimitExceeded,
    SnapshotError,
)
from inventory_sync.db.equipment_store import EquipmentStore
from inventory_sync.schemas.sync import SyncResult, SyncStatsResponse
from inventory_sync.services.batch_executor import BatchExecutor
from inventory_sync.services.reconciler import reconcile
from inventory_sync.services.result_aggregator import SyncResultAggregator
from inventory_sync.services.snapshot_loader import SnapshotLoader

logger = logging.getLogger("sync_service")

FATAL_ERRORS = (ConfigurationError, FeedUnavailable, RateLimitExceeded, SnapshotError)


class InventorySyncService:
    def __init__(
        self,
        settings: Settings,
        store: EquipmentStore,
        feed_client_factory: Optional[Callable[[], InventoryFeedClient]] = None,
        executor: Optional[BatchExecutor] = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._feed_client_factory = feed_client_factory or (lambda: InventoryFeedClient(settings))
        self._loader = SnapshotLoader(store)
        self._executor = executor or BatchExecutor.from_settings(store, settings)

    async def run_sync(self) -> SyncResult:
        """
        Synchronize the external feed into local equipment and inventory.

        Always returns a SyncResult. success is False only when the run could
        not be performed (missing credentials, feed unreachable or rate
        limited through every retry, local snapshot unreadable); nothing is
        written in those cases. Otherwise success is True and any item or
        write failures are listed in errors.
        """
        aggregator = SyncResultAggregator()
        logger.info("[Sync] Starting inventory sync")

        try:
            if not self._settings.inventory_feed_api_token:
                raise ConfigurationError("INVENTORY_FEED_API_TOKEN is not configured")

            feed = self._feed_client_factory()
            items = await feed.fetch_all()
            logger.info(f"[Sync] Fetched {len(items)} items from feed")
            aggregator.add_errors(feed.rejected_items)

            snapshot = await self._loader.load_known()
        except FATAL_ERRORS as exc:
            return aggregator.fail(exc)

        plan = reconcile(items, snapshot.by_external_id, snapshot.known_skus, snapshot.legacy)
        aggregator.add_errors(plan.item_errors)
        logger.info(
            f"[Sync] Prepared {len(plan.to_update)} updates, {len(plan.to_create)} creates, "
            f"{len(plan.to_archive_ids)} archives"
        )

        outcome = await self._executor.apply(
            plan.to_create, plan.to_update, plan.to_archive_ids, synced_at=aggregator.synced_at
        )
        aggregator.record_apply(outcome)
        return aggregator.complete()

    async def get_sync_stats(self) -> SyncStatsResponse:
        """Active, feed-sourced and archived equipment counts plus last sync time."""
        total = await self._store.count_equipment(archived=False)
        synced = await self._store.count_equipment(archived=False, sourced_only=True)
        archived = await self._store.count_equipment(archived=True)
        last_synced_at = await self._store.get_last_synced_at()
        return SyncStatsResponse(
            total_equipment=total,
            synced_from_feed=synced,
            archived_count=archived,
            last_synced_at=last_synced_at,
        )
