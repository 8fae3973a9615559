"""
Celery configuration: broker, task routes, beat schedule.

Configures the Redis broker, the sync queue and the periodic sync schedule.

Note: On Windows, Celery's prefork pool doesn't work properly.
Use --pool=solo or --pool=threads on Windows.

=============================================================================
RUNNING WORKERS
=============================================================================
    Worker:
        celery -A inventory_sync.celery_app worker -Q sync --concurrency=1 -l info -n sync@%h

    Beat (scheduler):
        celery -A inventory_sync.celery_app beat -l info

IMPORTANT: When running workers manually, set AUTO_START_CELERY=false in your
.env file. Otherwise FastAPI will auto-start a duplicate worker.

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================
    SYNC_ENABLED: "true" or "false": master on/off for scheduled sync (default: true)
    SYNC_INTERVAL_MINUTES: Minutes between scheduled runs (default: 60)
    SYNC_LOCK_TTL_SECONDS: Expiry of the run lease in Redis (default: 900)
Version: 1.0.0
"""
import logging
import platform
from datetime import timedelta

from celery import Celery
from celery.schedules import crontab, schedule
from kombu import Queue

from inventory_sync.core.config import settings

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

SYNC_ENABLED = settings.sync_enabled
SYNC_INTERVAL_MINUTES = settings.sync_interval_minutes


def _interval_schedule(minutes: int):
    """
    Beat schedule for an every-N-minutes interval.

    Intervals that divide the hour or the day evenly are aligned to the clock
    with crontab. Any other interval runs every N minutes from beat start.
    """
    if minutes <= 0:
        logger.warning(f"Invalid SYNC_INTERVAL_MINUTES '{minutes}', defaulting to 60")
        minutes = 60
    if minutes < 60 and 60 % minutes == 0:
        return crontab(minute=f"*/{minutes}")
    if minutes % 60 == 0 and 24 % (minutes // 60) == 0:
        return crontab(minute=0, hour=f"*/{minutes // 60}")
    logger.info(f"SYNC_INTERVAL_MINUTES={minutes} is not clock-aligned, scheduling every {minutes} minutes")
    return schedule(run_every=timedelta(minutes=minutes))


def _build_beat_schedule() -> dict:
    """Build Celery Beat schedule based on the sync enabled setting."""
    if not SYNC_ENABLED:
        logger.info("Scheduled sync disabled (SYNC_ENABLED=false)")
        return {}

    return {
        "scheduled-inventory-sync": {
            "task": "tasks.sync_inventory.run_inventory_sync",
            "schedule": _interval_schedule(SYNC_INTERVAL_MINUTES),
            "options": {"queue": "sync"},
        },
    }


celery_app = Celery(
    "inventory_sync",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "inventory_sync.celery_app.tasks.sync_inventory",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    task_queues=(
        Queue("sync"),
    ),
    task_routes={
        "tasks.sync_inventory.*": {"queue": "sync"},
    },

    beat_schedule=_build_beat_schedule(),

    # Result expiration
    result_expires=3600,  # 1 hour

    # Worker pool configuration for Windows compatibility
    worker_pool="solo" if IS_WINDOWS else "prefork",

    # Visibility timeout
    broker_transport_options={"visibility_timeout": 3600},

    # Custom log format
    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s] %(message)s",
)
