"""
Equipment store: equipment and inventory table operations for the sync engine.

Tables:
    equipment (id, external_id, sku UNIQUE, name, description, price_per_unit,
               unit_type, photo_url, last_synced_at, is_archived)
    inventory (equipment_id UNIQUE -> equipment.id, quantity)
Version: 1.0.0
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from inventory_sync.core.constants.sync import SNAPSHOT_PAGE_SIZE
from inventory_sync.core.exceptions import PersistenceError
from inventory_sync.db.base_store import BaseStore
from inventory_sync.schemas.equipment import EquipmentRecord, InventoryRecord
from inventory_sync.schemas.sync import EquipmentCreate, EquipmentUpdate

logger = logging.getLogger("equipment_store")

EQUIPMENT_TABLE = "equipment"
INVENTORY_TABLE = "inventory"
EQUIPMENT_COLUMNS = (
    "id,external_id,sku,name,description,price_per_unit,unit_type,"
    "photo_url,last_synced_at,is_archived"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _equipment_payload(write, synced_at: datetime) -> Dict[str, Any]:
    """Columns shared by create and update writes."""
    return {
        "name": write.name,
        "description": write.description,
        "price_per_unit": write.price_per_unit,
        "unit_type": write.unit_type.value,
        "photo_url": write.photo_url,
        "external_id": write.external_id,
        "last_synced_at": synced_at.isoformat(),
        "is_archived": False,
    }


class EquipmentStore(BaseStore):
    """CRUD for the equipment and inventory tables."""

    async def list_equipment(self, page_size: int = SNAPSHOT_PAGE_SIZE) -> List[EquipmentRecord]:
        """Read every equipment row (active and archived), paging by id."""
        records: List[EquipmentRecord] = []
        offset = 0
        while True:
            query = (
                self._client.table(EQUIPMENT_TABLE)
                .select(EQUIPMENT_COLUMNS)
                .order("id")
                .range(offset, offset + page_size - 1)
            )
            response = await self._execute(query, "select", EQUIPMENT_TABLE)
            rows = response.data or []
            for row in rows:
                try:
                    records.append(EquipmentRecord.model_validate(row))
                except ValidationError as e:
                    raise PersistenceError(
                        f"Supabase select on {EQUIPMENT_TABLE}",
                        f"unreadable row: {e}",
                        reference=f"row {row.get('id')}",
                    ) from e
            if len(rows) < page_size:
                break
            offset += page_size
        logger.info("equipment rows loaded=%s", len(records))
        return records

    async def update_equipment(self, update: EquipmentUpdate, synced_at: Optional[datetime] = None) -> None:
        """Overwrite a row from the feed and clear its archived flag. SKU is left untouched."""
        payload = _equipment_payload(update, synced_at or _utc_now())
        await self._update(EQUIPMENT_TABLE, {"id": update.equipment_id}, payload)

    async def upsert_inventory(self, equipment_id: str, quantity: float) -> None:
        await self._upsert(
            INVENTORY_TABLE,
            [InventoryRecord(equipment_id=equipment_id, quantity=quantity).model_dump()],
            on_conflict="equipment_id",
        )

    async def create_equipment_with_inventory(
        self, create: EquipmentCreate, synced_at: Optional[datetime] = None
    ) -> str:
        """Insert the equipment row, then its paired inventory row. Returns the new id."""
        row = _equipment_payload(create, synced_at or _utc_now())
        row["id"] = str(uuid.uuid4())
        row["sku"] = create.sku

        inserted = await self._insert(EQUIPMENT_TABLE, [row])
        equipment_id = (inserted[0].get("id") if inserted else None) or row["id"]

        try:
            record = InventoryRecord(equipment_id=equipment_id, quantity=create.quantity)
            await self._insert(INVENTORY_TABLE, [record.model_dump()])
        except PersistenceError as exc:
            raise PersistenceError(
                "Inventory insert", str(exc), reference=f"equipment {equipment_id} (sku {create.sku})"
            ) from exc
        return equipment_id

    async def archive_equipment(self, equipment_ids: Sequence[str], synced_at: Optional[datetime] = None) -> int:
        """Archive every listed row in one bulk update. Returns the number of ids submitted."""
        ids = list(dict.fromkeys(equipment_ids))
        if not ids:
            return 0
        payload = {
            "is_archived": True,
            "last_synced_at": (synced_at or _utc_now()).isoformat(),
        }
        query = self._client.table(EQUIPMENT_TABLE).update(payload).in_("id", ids)
        await self._execute(query, "update", EQUIPMENT_TABLE)
        return len(ids)

    # -- Statistics --------------------------------------------------------

    async def count_equipment(self, archived: bool, sourced_only: bool = False) -> int:
        query = (
            self._client.table(EQUIPMENT_TABLE)
            .select("id", count="exact")
            .eq("is_archived", archived)
        )
        if sourced_only:
            query = query.not_.is_("external_id", "null")
        response = await self._execute(query, "count", EQUIPMENT_TABLE)
        return response.count or 0

    async def get_last_synced_at(self) -> Optional[datetime]:
        query = (
            self._client.table(EQUIPMENT_TABLE)
            .select("last_synced_at")
            .not_.is_("last_synced_at", "null")
            .order("last_synced_at", desc=True)
            .limit(1)
        )
        response = await self._execute(query, "select", EQUIPMENT_TABLE)
        rows = response.data or []
        if not rows or not rows[0].get("last_synced_at"):
            return None
        return datetime.fromisoformat(rows[0]["last_synced_at"].replace("Z", "+00:00"))
