"""
Sync routes: on-demand sync trigger and sync statistics.
Version: 1.0.0
"""
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from inventory_sync.container import get_sync_service
from inventory_sync.core.exceptions import ConfigurationError, PersistenceError
from inventory_sync.schemas.sync import SyncResult, SyncStatsResponse
from inventory_sync.services.result_aggregator import SyncResultAggregator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/sync", tags=["sync"])


def _failed(result: SyncResult) -> JSONResponse:
    return JSONResponse(status_code=500, content=result.model_dump(mode="json"))


@router.post("/run", response_model=SyncResult)
async def run_sync():
    """Run one feed-to-local sync and return its summary."""
    logger.info("[API] Inventory sync triggered")
    try:
        service = get_sync_service()
    except ConfigurationError as exc:
        return _failed(SyncResultAggregator().fail(exc))

    result = await service.run_sync()
    if not result.success:
        return _failed(result)
    return result


@router.get("/status", response_model=SyncStatsResponse)
async def get_sync_status():
    """Equipment counts and the last sync time."""
    try:
        return await get_sync_service().get_sync_stats()
    except (ConfigurationError, PersistenceError) as exc:
        logger.error("[API] sync status error=%s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/enqueue")
async def enqueue_sync():
    """Queue a sync on the Celery worker instead of running it in-request."""
    from inventory_sync.celery_app.tasks.sync_inventory import run_inventory_sync

    task = run_inventory_sync.delay()
    return {
        "status": "queued",
        "task_id": task.id,
        "message": "Sync queued. It is skipped if another sync is already running.",
    }
