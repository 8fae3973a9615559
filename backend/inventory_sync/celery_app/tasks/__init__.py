"""
Celery tasks package.
Version: 1.0.0
"""
from inventory_sync.celery_app.tasks.sync_inventory import run_inventory_sync

__all__ = [
    "run_inventory_sync",
]
