"""
Sync constants: feed paging, rate floor, chunking, SKU synthesis.

Defaults used when no setting overrides them.
Version: 1.0.0
"""

FEED_SERVICE_NAME: str = "InventoryFeed"

# Feed pagination
DEFAULT_PAGE_LIMIT: int = 100
MAX_PAGES: int = 100  # Safety cap against a provider that never stops paging

# Feed rate floor and retry envelope (seconds)
MIN_REQUEST_INTERVAL: float = 0.2
DEFAULT_RETRY_DELAY: float = 1.0
MAX_RETRIES: int = 3

# Header carrying seconds until the upstream rate window resets
RATE_LIMIT_RESET_HEADER: str = "X-Ratelimit-Reset"

# Batch executor
CHUNK_SIZE: int = 100
MAX_WORKERS: int = 10

# Snapshot reads are paged in windows of this many rows
SNAPSHOT_PAGE_SIZE: int = 1000

# SKU synthesis and disambiguation
SYNTHETIC_SKU_PREFIX: str = "EXT-"
SKU_CONFLICT_SUFFIX: str = "-EXT"

DEFAULT_ITEM_NAME: str = "Unnamed Item"
