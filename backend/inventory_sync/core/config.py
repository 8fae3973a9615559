import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel

from inventory_sync.core.constants.sync import DEFAULT_PAGE_LIMIT, MAX_PAGES


load_dotenv()


class Settings(BaseModel):
    # Supabase (local system-of-record)
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # External inventory feed
    inventory_feed_base_url: str = os.getenv(
        "INVENTORY_FEED_BASE_URL",
        "https://rest.boxhero-app.com",
    )
    inventory_feed_api_token: Optional[str] = os.getenv("INVENTORY_FEED_API_TOKEN")
    inventory_feed_page_limit: int = int(os.getenv("INVENTORY_FEED_PAGE_LIMIT", str(DEFAULT_PAGE_LIMIT)))
    inventory_feed_max_pages: int = int(os.getenv("INVENTORY_FEED_MAX_PAGES", str(MAX_PAGES)))
    inventory_feed_timeout_seconds: float = float(os.getenv("INVENTORY_FEED_TIMEOUT_SECONDS", "30"))

    # Rate floor and retry envelope for feed requests
    inventory_feed_min_interval_ms: int = int(os.getenv("INVENTORY_FEED_MIN_INTERVAL_MS", "200"))
    inventory_feed_max_retries: int = int(os.getenv("INVENTORY_FEED_MAX_RETRIES", "3"))
    inventory_feed_retry_delay_ms: int = int(os.getenv("INVENTORY_FEED_RETRY_DELAY_MS", "1000"))

    @property
    def inventory_feed_min_interval(self) -> float:
        """Minimum seconds between consecutive feed requests."""
        return self.inventory_feed_min_interval_ms / 1000

    @property
    def inventory_feed_retry_delay(self) -> float:
        """Default backoff in seconds when no reset hint is returned."""
        return self.inventory_feed_retry_delay_ms / 1000

    # Batch executor
    sync_chunk_size: int = int(os.getenv("SYNC_CHUNK_SIZE", "100"))
    sync_max_workers: int = int(os.getenv("SYNC_MAX_WORKERS", "10"))

    # Scheduler
    sync_enabled: bool = os.getenv("SYNC_ENABLED", "true").lower() == "true"
    sync_interval_minutes: int = int(os.getenv("SYNC_INTERVAL_MINUTES", "60"))
    sync_lock_ttl_seconds: int = int(os.getenv("SYNC_LOCK_TTL_SECONDS", "900"))

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
