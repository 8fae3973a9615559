"""
Sync schemas: reconciliation plan, apply outcome and run result.

Defines the data handed between the sync stages and the response models
for the sync routes.
Version: 1.0.0
"""
from datetime import datetime
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field

from inventory_sync.schemas.equipment import EquipmentRecord, UnitType


class LocalSnapshot(BaseModel):
    """Local equipment state read once at the start of a run."""
    by_external_id: Dict[int, EquipmentRecord] = Field(default_factory=dict)
    known_skus: Set[str] = Field(default_factory=set)
    legacy: List[EquipmentRecord] = Field(default_factory=list)


class EquipmentWrite(BaseModel):
    """Fields written to an equipment row, plus its inventory quantity."""
    external_id: int
    sku: str
    name: str
    description: Optional[str] = None
    price_per_unit: float = 0.0
    unit_type: UnitType = UnitType.UNIT
    photo_url: Optional[str] = None
    quantity: float = 0


class EquipmentCreate(EquipmentWrite):
    pass


class EquipmentUpdate(EquipmentWrite):
    """Update for an existing row; sku is the pinned local SKU."""
    equipment_id: str


class ReconcilePlan(BaseModel):
    to_create: List[EquipmentCreate] = Field(default_factory=list)
    to_update: List[EquipmentUpdate] = Field(default_factory=list)
    to_archive_ids: List[str] = Field(default_factory=list)
    item_errors: List[str] = Field(default_factory=list)


class ApplyOutcome(BaseModel):
    """Confirmed write counts and per-item failures from the executor."""
    created: int = 0
    updated: int = 0
    archived: int = 0
    errors: List[str] = Field(default_factory=list)


class SyncResult(BaseModel):
    success: bool = False
    created: int = 0
    updated: int = 0
    archived: int = 0
    errors: List[str] = Field(default_factory=list)
    synced_at: datetime


class SyncStatsResponse(BaseModel):
    """Equipment counts and last sync time."""
    total_equipment: int
    synced_from_feed: int
    archived_count: int
    last_synced_at: Optional[datetime] = None
