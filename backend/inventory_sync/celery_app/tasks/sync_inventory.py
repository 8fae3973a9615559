"""
Inventory sync task: scheduled and queued sync runs.

Tasks:
- run_inventory_sync: takes the Redis run lease, runs one sync, releases it
Version: 1.0.0
"""
import logging

from inventory_sync.celery_app.celery_config import celery_app
from inventory_sync.celery_app.tasks.base import BaseTask, run_async
from inventory_sync.core.exceptions import ConfigurationError
from inventory_sync.services.result_aggregator import SyncResultAggregator
from inventory_sync.utils.sync_lock import acquire_sync_lock, release_sync_lock

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    base=BaseTask,
    name="tasks.sync_inventory.run_inventory_sync",
    max_retries=0,
)
def run_inventory_sync(self):
    """
    Run one inventory sync under the Redis lease.

    Returns the SyncResult as a JSON-ready dict, or a "skipped" status when
    another run currently holds the lease.
    """
    # Lazy import: container builds clients at call time, after worker fork
    from inventory_sync.container import get_sync_service

    token = acquire_sync_lock(holder=self.request.id or "manual")
    if token is None:
        return {"status": "skipped", "reason": "sync_in_progress"}

    try:
        try:
            service = get_sync_service()
        except ConfigurationError as exc:
            result = SyncResultAggregator().fail(exc)
        else:
            result = run_async(service.run_sync())
    finally:
        release_sync_lock(token)

    if not result.success:
        logger.error(f"Inventory sync did not run: {result.errors}")
    else:
        logger.info(
            f"Inventory sync done: created={result.created} updated={result.updated} "
            f"archived={result.archived} errors={len(result.errors)}"
        )
    return result.model_dump(mode="json")
