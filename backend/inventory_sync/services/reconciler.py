"""
Reconciler: diff the external feed against the local snapshot.

Pure and synchronous: takes canonical feed items plus the local snapshot and
classifies every item as a create or an update, then lists the local rows to
archive. Nothing here touches the network or the store.

Rules:
- A known external id becomes an update that keeps the local SKU.
- A new external id becomes a create. If its SKU collides with any known SKU,
  including ones assigned earlier in the same pass, it gets an
  "-EXT<external_id>" suffix (plus a counter if that is taken too).
- Local rows whose external id was not seen this pass are archived, and so is
  every non-archived legacy row without an external id.
- An item that fails to process is reported in item_errors and skipped.
Version: 1.0.0
"""
import logging
from typing import Iterable, Mapping, MutableSet, Optional, Sequence, Set

from inventory_sync.core.constants.sync import DEFAULT_ITEM_NAME, SKU_CONFLICT_SUFFIX
from inventory_sync.core.exceptions import ItemProcessingError
from inventory_sync.schemas.equipment import EquipmentRecord
from inventory_sync.schemas.feed import FeedItem
from inventory_sync.schemas.sync import EquipmentCreate, EquipmentUpdate, ReconcilePlan
from inventory_sync.utils.attribute_heuristics import (
    derive_sku,
    extract_unit_price,
    item_unit_type,
    total_quantity,
)

logger = logging.getLogger("reconciler")


def resolve_sku_conflict(sku: str, external_id: int, taken: MutableSet[str]) -> str:
    """Return a SKU not in `taken` and claim it."""
    candidate = sku
    if candidate in taken:
        candidate = f"{sku}{SKU_CONFLICT_SUFFIX}{external_id}"
        counter = 2
        while candidate in taken:
            candidate = f"{sku}{SKU_CONFLICT_SUFFIX}{external_id}-{counter}"
            counter += 1
        logger.info("sku conflict resolved original=%s assigned=%s", sku, candidate)
    taken.add(candidate)
    return candidate


def _item_label(item) -> tuple:
    return getattr(item, "external_id", None), getattr(item, "name", None)


def reconcile(
    items: Iterable[FeedItem],
    known: Mapping[int, EquipmentRecord],
    skus: Set[str],
    legacy: Optional[Sequence[EquipmentRecord]] = None,
) -> ReconcilePlan:
    """
    Build the create/update/archive plan for one sync pass.

    Args:
        items: Canonical feed items for this pass
        known: Local equipment keyed by external id
        skus: Every SKU already used locally (active and archived); not mutated
        legacy: Non-archived local rows without an external id

    Returns:
        ReconcilePlan with to_create, to_update, to_archive_ids, item_errors
    """
    plan = ReconcilePlan()
    taken: Set[str] = set(skus)
    seen: Set[int] = set()

    for item in items:
        try:
            external_id = item.external_id
            if external_id in seen:
                raise ValueError(f"duplicate external id {external_id} in feed")

            sku = derive_sku(item)
            fields = {
                "external_id": external_id,
                "name": item.name or DEFAULT_ITEM_NAME,
                "description": item.memo or None,
                "price_per_unit": extract_unit_price(item.attributes),
                "unit_type": item_unit_type(item),
                "photo_url": item.photo_url or None,
                "quantity": total_quantity(item),
            }

            existing = known.get(external_id)
            if existing is not None:
                plan.to_update.append(EquipmentUpdate(equipment_id=existing.id, sku=existing.sku, **fields))
            else:
                plan.to_create.append(EquipmentCreate(sku=resolve_sku_conflict(sku, external_id, taken), **fields))

            seen.add(external_id)
        except Exception as exc:
            external_id, name = _item_label(item)
            error = ItemProcessingError(external_id, name, str(exc))
            logger.error("reconcile %s", error)
            plan.item_errors.append(str(error))

    vanished = [
        record.id for ext_id, record in known.items()
        if ext_id not in seen and not record.is_archived
    ]
    legacy_ids = [record.id for record in legacy or () if record.external_id is None and not record.is_archived]
    plan.to_archive_ids = list(dict.fromkeys(vanished + legacy_ids))

    logger.info(
        "reconcile complete creates=%s updates=%s archives=%s (vanished=%s legacy=%s) errors=%s",
        len(plan.to_create), len(plan.to_update), len(plan.to_archive_ids),
        len(vanished), len(legacy_ids), len(plan.item_errors),
    )
    return plan
