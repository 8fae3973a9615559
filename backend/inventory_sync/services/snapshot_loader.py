"""
Snapshot loader: one consistent read of local equipment state for a sync run.
Version: 1.0.0
"""
import logging

from inventory_sync.core.exceptions import PersistenceError, SnapshotError
from inventory_sync.db.equipment_store import EquipmentStore
from inventory_sync.schemas.sync import LocalSnapshot

logger = logging.getLogger("snapshot_loader")


class SnapshotLoader:
    def __init__(self, store: EquipmentStore) -> None:
        self._store = store

    async def load_known(self) -> LocalSnapshot:
        """
        Index local equipment by external id and collect every known SKU.

        SKUs come from active and archived rows alike, since the uniqueness
        constraint covers both. Legacy rows (no external id, not archived)
        are returned separately. Writes later in the same run do not refresh
        this snapshot.

        Raises:
            SnapshotError: the equipment table could not be read
        """
        try:
            records = await self._store.list_equipment()
        except PersistenceError as exc:
            raise SnapshotError(f"Failed to load local equipment: {exc}") from exc

        snapshot = LocalSnapshot()
        for record in records:
            snapshot.known_skus.add(record.sku)
            if record.external_id is not None:
                if record.external_id in snapshot.by_external_id:
                    logger.warning(
                        "duplicate external_id=%s kept=%s ignored=%s",
                        record.external_id, snapshot.by_external_id[record.external_id].id, record.id,
                    )
                    continue
                snapshot.by_external_id[record.external_id] = record
            elif not record.is_archived:
                snapshot.legacy.append(record)

        logger.info(
            "snapshot loaded sourced=%s legacy=%s skus=%s",
            len(snapshot.by_external_id), len(snapshot.legacy), len(snapshot.known_skus),
        )
        return snapshot
