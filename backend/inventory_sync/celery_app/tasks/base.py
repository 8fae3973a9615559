"""
Base task for sync workers: lifecycle logging and the async bridge.
Version: 1.0.0
"""
import asyncio
import logging
from celery import Task

logger = logging.getLogger(__name__)


def _summarize(retval) -> str:
    if not isinstance(retval, dict):
        return ""
    if retval.get("status") == "skipped":
        return f" (skipped: {retval.get('reason')})"
    if "success" in retval:
        return (
            f" (success={retval['success']} created={retval.get('created', 0)} "
            f"updated={retval.get('updated', 0)} archived={retval.get('archived', 0)} "
            f"errors={len(retval.get('errors') or [])})"
        )
    return ""


class BaseTask(Task):
    """Sync tasks do not retry; the next scheduled run picks up where this one failed."""

    abstract = True
    max_retries = 0
    track_started = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}")

    def on_success(self, retval, task_id, args, kwargs):
        logger.info(f"Task {self.name}[{task_id}] finished{_summarize(retval)}")


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop (Celery workers are sync)."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
