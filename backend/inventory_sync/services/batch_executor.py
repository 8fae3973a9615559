"""
Batch executor: apply a reconciliation plan to the local store in chunks.

Operations are split into fixed-size chunks. Items inside a chunk run
concurrently, bounded by a semaphore; the next chunk starts only after the
current one has finished. There is no run-wide transaction: a failed item is
recorded and the rest of its chunk carries on, and the next scheduled run
repairs anything left behind.

Counts reflect confirmed successes only. An item whose write raised is not
counted, so `created + len(create errors) == len(to_create)` holds after
every run (and likewise for updates).
Version: 1.0.0
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence

from inventory_sync.core.constants.sync import CHUNK_SIZE, MAX_WORKERS
from inventory_sync.core.exceptions import PersistenceError
from inventory_sync.db.equipment_store import EquipmentStore
from inventory_sync.schemas.sync import ApplyOutcome, EquipmentCreate, EquipmentUpdate
from inventory_sync.utils.batch_grouping import calculate_batch_groups

logger = logging.getLogger("batch_executor")


class BatchExecutor:
    def __init__(
        self,
        store: EquipmentStore,
        chunk_size: int = CHUNK_SIZE,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        self._store = store
        self._chunk_size = max(1, chunk_size)
        self._max_workers = max(1, max_workers)

    @classmethod
    def from_settings(cls, store: EquipmentStore, settings) -> "BatchExecutor":
        return cls(store, chunk_size=settings.sync_chunk_size, max_workers=settings.sync_max_workers)

    async def _apply_update(self, update: EquipmentUpdate, synced_at: datetime) -> None:
        await self._store.update_equipment(update, synced_at)
        await self._store.upsert_inventory(update.equipment_id, update.quantity)

    async def _apply_create(self, create: EquipmentCreate, synced_at: datetime) -> None:
        await self._store.create_equipment_with_inventory(create, synced_at)

    @staticmethod
    def _describe_failure(kind: str, op, exc: BaseException) -> str:
        if isinstance(op, EquipmentUpdate):
            target = f"equipment {op.equipment_id} (sku {op.sku}, external id {op.external_id})"
        else:
            target = f"equipment sku {op.sku} (external id {op.external_id})"
        return f"Failed to {kind} {target}: {exc}"

    async def _run_chunks(
        self,
        kind: str,
        operations: Sequence,
        handler: Callable[..., Awaitable[None]],
        errors: List[str],
        synced_at: datetime,
    ) -> int:
        """Apply operations chunk by chunk; return the number that succeeded."""
        if not operations:
            return 0

        semaphore = asyncio.Semaphore(self._max_workers)

        async def guarded(op) -> None:
            async with semaphore:
                await handler(op, synced_at)

        succeeded = 0
        processed = 0
        for chunk in calculate_batch_groups(operations, self._chunk_size):
            results = await asyncio.gather(*(guarded(op) for op in chunk), return_exceptions=True)
            for op, result in zip(chunk, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    message = self._describe_failure(kind, op, result)
                    logger.error(message)
                    errors.append(message)
                else:
                    succeeded += 1
            processed += len(chunk)
            logger.info(f"[Sync] {kind} progress {processed}/{len(operations)} ({succeeded} ok)")

        return succeeded

    async def apply(
        self,
        to_create: Sequence[EquipmentCreate],
        to_update: Sequence[EquipmentUpdate],
        to_archive_ids: Sequence[str],
        synced_at: Optional[datetime] = None,
    ) -> ApplyOutcome:
        """
        Apply updates, then creates, then the bulk archive.

        Returns:
            ApplyOutcome with confirmed counts and one error string per failure
        """
        synced_at = synced_at or datetime.now(timezone.utc)
        outcome = ApplyOutcome()

        outcome.updated = await self._run_chunks(
            "update", to_update, self._apply_update, outcome.errors, synced_at
        )
        outcome.created = await self._run_chunks(
            "create", to_create, self._apply_create, outcome.errors, synced_at
        )

        if to_archive_ids:
            try:
                outcome.archived = await self._store.archive_equipment(to_archive_ids, synced_at)
                logger.info(f"[Sync] Archived {outcome.archived} equipment rows")
            except PersistenceError as exc:
                message = f"Failed to archive {len(to_archive_ids)} equipment rows: {exc}"
                logger.error(message)
                outcome.errors.append(message)

        return outcome
