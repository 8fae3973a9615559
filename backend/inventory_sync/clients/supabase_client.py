"""
Supabase client: process-wide SDK client for the equipment and inventory tables.
Version: 1.0.0
"""
import logging

from supabase import create_client, Client

from inventory_sync.core.config import Settings
from inventory_sync.core.exceptions import ConfigurationError

logger = logging.getLogger("supabase_client")


class SupabaseClient:
    """
    Holds the service-role credentials and lazily creates one shared SDK client.

    Credentials are checked on construction so a misconfigured deployment
    fails before any sync stage runs.
    """

    _instance: Client | None = None

    def __init__(self, settings: Settings) -> None:
        self._url = settings.supabase_url
        self._key = settings.supabase_service_role_key

        missing = [
            name for name, value in (
                ("SUPABASE_URL", self._url),
                ("SUPABASE_SERVICE_ROLE_KEY", self._key),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(f"{' and '.join(missing)} must be set for the local equipment store")

    def get_client(self) -> Client:
        if SupabaseClient._instance is None:
            SupabaseClient._instance = create_client(self._url, self._key)
            logger.info("supabase client initialized url=%s", self._url)
        return SupabaseClient._instance

    @property
    def client(self) -> Client:
        return self.get_client()
