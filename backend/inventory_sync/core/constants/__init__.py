"""
Constants package: re-exports from domain-specific modules.

Usage:
    from inventory_sync.core.constants.units import UOM_MAPPING
    # or import everything:
    from inventory_sync.core.constants import pricing, sync, units
Version: 1.0.0
"""

from inventory_sync.core.constants import pricing, sync, units
from inventory_sync.core.constants.pricing import (
    PRICE_ATTRIBUTE_KEYS,
    PRICE_KEY_HINTS,
    DEFAULT_PRICE,
)
from inventory_sync.core.constants.sync import (
    FEED_SERVICE_NAME,
    DEFAULT_PAGE_LIMIT,
    MAX_PAGES,
    MIN_REQUEST_INTERVAL,
    DEFAULT_RETRY_DELAY,
    MAX_RETRIES,
    RATE_LIMIT_RESET_HEADER,
    CHUNK_SIZE,
    MAX_WORKERS,
    SNAPSHOT_PAGE_SIZE,
    SYNTHETIC_SKU_PREFIX,
    SKU_CONFLICT_SUFFIX,
    DEFAULT_ITEM_NAME,
)
from inventory_sync.core.constants.units import (
    UNIT_ATTRIBUTE_KEY,
    UOM_MAPPING,
)

__all__ = [
    "pricing",
    "sync",
    "units",
    "PRICE_ATTRIBUTE_KEYS",
    "PRICE_KEY_HINTS",
    "DEFAULT_PRICE",
    "FEED_SERVICE_NAME",
    "DEFAULT_PAGE_LIMIT",
    "MAX_PAGES",
    "MIN_REQUEST_INTERVAL",
    "DEFAULT_RETRY_DELAY",
    "MAX_RETRIES",
    "RATE_LIMIT_RESET_HEADER",
    "CHUNK_SIZE",
    "MAX_WORKERS",
    "SNAPSHOT_PAGE_SIZE",
    "SYNTHETIC_SKU_PREFIX",
    "SKU_CONFLICT_SUFFIX",
    "DEFAULT_ITEM_NAME",
    "UNIT_ATTRIBUTE_KEY",
    "UOM_MAPPING",
]
