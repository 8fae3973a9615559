"""
Feed schemas: canonical items and locations from the external inventory API.
Version: 1.0.0
"""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FeedQuantity(BaseModel):
    location_id: Optional[int] = None
    location_name: Optional[str] = None
    quantity: float = 0


class FeedItem(BaseModel):
    """One item as reported by the external feed."""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    external_id: int = Field(..., alias="id")
    name: Optional[str] = None
    barcode: Optional[str] = None
    sku: Optional[str] = None
    memo: Optional[str] = None
    photo_url: Optional[str] = None
    attributes: Dict[str, Union[str, int, float, None]] = Field(default_factory=dict)
    quantities: List[FeedQuantity] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FeedLocation(BaseModel):
    id: int
    name: Optional[str] = None


class NormalizedEquipment(BaseModel):
    """Read-only view of a feed item shaped like local equipment."""
    id: str
    name: str
    sku: str
    description: Optional[str] = None
    price_per_unit: float = 0.0
    unit_type: str
    quantity: float = 0
    source: str = "feed"
    external_id: int
    photo_url: Optional[str] = None
    quantities: List[FeedQuantity] = Field(default_factory=list)


class FeedItemsResponse(BaseModel):
    items: List[NormalizedEquipment]
    count: int


class FeedLocationsResponse(BaseModel):
    locations: List[FeedLocation]
    count: int
