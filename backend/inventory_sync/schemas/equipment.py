"""
Equipment schemas: local equipment and inventory records.
Version: 1.0.0
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class UnitType(str, Enum):
    UNIT = "UNIT"
    BOX = "BOX"
    CASE = "CASE"
    PALLET = "PALLET"
    FOOT = "FOOT"
    YARD = "YARD"
    POUND = "POUND"
    OTHER = "OTHER"


class EquipmentRecord(BaseModel):
    id: str
    external_id: Optional[int] = None
    sku: str
    name: str
    description: Optional[str] = None
    price_per_unit: float = 0.0
    unit_type: UnitType = UnitType.UNIT
    photo_url: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    is_archived: bool = False

    @property
    def is_legacy(self) -> bool:
        """Never sourced from the external feed."""
        return self.external_id is None


class InventoryRecord(BaseModel):
    """One inventory row per equipment row; quantity summed across locations."""
    equipment_id: str
    quantity: float = 0
