"""
Health routes: liveness check with sync configuration flags.
Version: 1.0.0
"""
from fastapi import APIRouter

from inventory_sync.core.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness plus whether the feed token is set and scheduled sync is on."""
    settings = get_settings()
    return {
        "status": "healthy",
        "feed_configured": bool(settings.inventory_feed_api_token),
        "sync_enabled": settings.sync_enabled,
    }
