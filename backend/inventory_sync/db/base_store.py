"""
Base store: shared Supabase client access for all stores.

All domain-specific stores inherit from this class to get
standardised insert / upsert / update primitives. The SDK is synchronous;
every query executes in a worker thread.
Version: 1.0.0
"""

import asyncio
import logging
from typing import Any, Dict, List

import httpx
from postgrest.exceptions import APIError

from inventory_sync.core.config import settings
from inventory_sync.core.exceptions import PersistenceError
from inventory_sync.clients.supabase_client import SupabaseClient

logger = logging.getLogger("base_store")


class BaseStore:
    """Base class for all Supabase stores providing shared CRUD operations."""

    def __init__(self, supabase_client: SupabaseClient | None = None) -> None:
        self._supabase_client = supabase_client or SupabaseClient(settings)

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    async def _execute(self, query, operation: str, table: str):
        """Run a built query off the event loop, mapping SDK errors."""
        try:
            return await asyncio.to_thread(query.execute)
        except (APIError, httpx.HTTPError) as e:
            logger.info("supabase error table=%s operation=%s detail=%s", table, operation, str(e))
            raise PersistenceError(f"Supabase {operation} on {table}", str(e)) from e

    async def _insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows into a table and return the inserted rows."""
        if not rows:
            return []
        response = await self._execute(self._client.table(table).insert(rows), "insert", table)
        return response.data or []

    async def _upsert(
        self, table: str, rows: List[Dict[str, Any]], on_conflict: str | None = None
    ) -> None:
        """Upsert rows into a table (insert or update on conflict)."""
        if not rows:
            return
        if on_conflict:
            query = self._client.table(table).upsert(rows, on_conflict=on_conflict)
        else:
            query = self._client.table(table).upsert(rows)
        await self._execute(query, "upsert", table)

    async def _update(
        self, table: str, filters: Dict[str, Any], payload: Dict[str, Any]
    ) -> None:
        """Update rows in a table matching the filters."""
        query = self._client.table(table).update(payload)
        for key, value in filters.items():
            query = query.eq(key, value)
        await self._execute(query, "update", table)
