"""
Batch grouping: split sync operations into fixed-size chunks.
Version: 1.0.0
"""
from typing import List, Sequence, TypeVar

from inventory_sync.core.constants.sync import CHUNK_SIZE

T = TypeVar("T")


def calculate_batch_groups(items: Sequence[T], max_batch_size: int = CHUNK_SIZE) -> List[List[T]]:
    """Group items into consecutive batches of at most max_batch_size."""
    if max_batch_size < 1:
        raise ValueError("max_batch_size must be at least 1")
    batches = []
    current_batch = []
    for item in items:
        current_batch.append(item)
        if len(current_batch) >= max_batch_size:
            batches.append(current_batch)
            current_batch = []
    if current_batch:
        batches.append(current_batch)
    return batches
