"""
Attribute heuristics: SKU, quantity, price and unit extraction for feed items.

Pure functions used by the reconciler. None of them raise for unexpected
attribute content; they fall back to documented defaults instead.
Version: 1.0.0
"""
import logging
from typing import Any, Mapping, Optional

from inventory_sync.core.constants.pricing import (
    DEFAULT_PRICE,
    PRICE_ATTRIBUTE_KEYS,
    PRICE_KEY_HINTS,
)
from inventory_sync.core.constants.sync import SYNTHETIC_SKU_PREFIX
from inventory_sync.core.constants.units import UNIT_ATTRIBUTE_KEY, UOM_MAPPING
from inventory_sync.schemas.equipment import UnitType
from inventory_sync.schemas.feed import FeedItem
from inventory_sync.utils.type_converters import parse_numeric

logger = logging.getLogger("attribute_heuristics")

_SKU_ATTRIBUTE_KEYS = ("sku", "SKU", "Sku")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def derive_sku(item: FeedItem) -> str:
    """
    SKU for a feed item: barcode, then an explicit sku field or attribute,
    then a synthesized EXT-<external_id>.
    """
    if not _is_blank(item.barcode):
        return item.barcode.strip()
    if not _is_blank(item.sku):
        return item.sku.strip()
    for key in _SKU_ATTRIBUTE_KEYS:
        value = item.attributes.get(key)
        if not _is_blank(value):
            return str(value).strip()
    return f"{SYNTHETIC_SKU_PREFIX}{item.external_id}"


def total_quantity(item: FeedItem) -> float:
    """Sum of per-location quantities; 0 when none are reported."""
    if not item.quantities:
        return 0
    return sum(q.quantity for q in item.quantities)


def extract_unit_price(attributes: Optional[Mapping[str, Any]]) -> float:
    """
    Unit price from free-form item attributes.

    Precedence:
    1. Exact match on a known spelling (PRICE_ATTRIBUTE_KEYS, in order)
       whose value parses as a number.
    2. First attribute whose key contains "price" or "cost"
       (case-insensitive) and whose value parses as a number.
    3. DEFAULT_PRICE.
    """
    if not attributes:
        return DEFAULT_PRICE

    for key in PRICE_ATTRIBUTE_KEYS:
        value = attributes.get(key)
        if _is_blank(value):
            continue
        parsed = parse_numeric(value)
        if parsed is not None:
            return parsed

    for key, value in attributes.items():
        lower_key = str(key).lower()
        if not any(hint in lower_key for hint in PRICE_KEY_HINTS) or _is_blank(value):
            continue
        parsed = parse_numeric(value)
        if parsed is not None:
            return parsed

    return DEFAULT_PRICE


def map_unit_type(unit: Any) -> UnitType:
    """Map an external unit-of-measure string to a canonical UnitType."""
    if _is_blank(unit):
        return UnitType.UNIT

    mapped = UOM_MAPPING.get(str(unit).strip().upper())
    if mapped is None:
        logger.debug("unit not mapped, using OTHER unit=%s", unit)
        return UnitType.OTHER
    return UnitType(mapped)


def item_unit_type(item: FeedItem) -> UnitType:
    """Canonical unit for a feed item, read from its unit_type attribute."""
    return map_unit_type(item.attributes.get(UNIT_ATTRIBUTE_KEY))
