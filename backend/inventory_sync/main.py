import asyncio
import logging
import os
import platform
import signal
import subprocess
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_sync.core.config import settings
from inventory_sync.routes.feed import router as feed_router
from inventory_sync.routes.health import router as health_router
from inventory_sync.routes.sync import router as sync_router

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

# Directory that contains the inventory_sync package
BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Worker runs one sync at a time; beat only enqueues
CELERY_ROLES = (
    ("worker", [f"--pool={'solo' if IS_WINDOWS else 'prefork'}", "-Q", "sync", "--concurrency=1"]),
    ("beat", []),
)

_celery_processes: List[subprocess.Popen] = []


def _spawn_celery(role: str, extra_args: List[str]) -> Optional[subprocess.Popen]:
    cmd = [sys.executable, "-m", "celery", "-A", "inventory_sync.celery_app", role, *extra_args, "-l", "info"]
    kwargs = {"cwd": BACKEND_DIR}
    if IS_WINDOWS:
        kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
    try:
        process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, **kwargs)
    except OSError as e:
        logger.error(f"Failed to start Celery {role}: {e}")
        return None
    logger.info(f"Celery {role} started (PID: {process.pid})")
    return process


def _terminate(process: subprocess.Popen) -> None:
    if process.poll() is not None:
        return
    logger.info(f"Stopping Celery process (PID: {process.pid})...")
    if IS_WINDOWS:
        process.terminate()
    else:
        process.send_signal(signal.SIGTERM)
    try:
        process.wait(timeout=10)
    except subprocess.TimeoutExpired:
        logger.warning(f"Force killing Celery process {process.pid}")
        process.kill()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Start a sync worker and beat alongside the API when AUTO_START_CELERY
    is true, and stop them on shutdown.
    """
    logger.info("=== Inventory Sync Starting ===")

    if os.getenv("AUTO_START_CELERY", "true").lower() == "true":
        for role, extra_args in CELERY_ROLES:
            process = _spawn_celery(role, extra_args)
            if process:
                _celery_processes.append(process)
            if role == "worker":
                # Let the worker register the sync queue before beat fires
                await asyncio.sleep(2)
        logger.info(f"Started {len(_celery_processes)} Celery processes")
    else:
        logger.info("Celery auto-start disabled (AUTO_START_CELERY=false)")

    if not settings.inventory_feed_api_token:
        logger.warning("INVENTORY_FEED_API_TOKEN is not set; sync runs will fail until it is configured")
    if not settings.sync_enabled:
        logger.info("Scheduled sync disabled (SYNC_ENABLED=false); only on-demand runs will happen")

    yield

    logger.info("=== Inventory Sync Shutting Down ===")
    for process in _celery_processes:
        _terminate(process)
    _celery_processes.clear()


app = FastAPI(title="Inventory Sync Backend", lifespan=lifespan)
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(sync_router)
app.include_router(feed_router)
