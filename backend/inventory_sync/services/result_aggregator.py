"""
Result aggregator: the single SyncResult every run returns.

success=False means the run did not happen (configuration, feed or snapshot
failure before anything was written). Item and write failures only add to
`errors`, so "ran with some failures" stays distinguishable from "did not run".
Version: 1.0.0
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from inventory_sync.schemas.sync import ApplyOutcome, SyncResult

logger = logging.getLogger("result_aggregator")


class SyncResultAggregator:
    def __init__(self, synced_at: Optional[datetime] = None) -> None:
        self._result = SyncResult(synced_at=synced_at or datetime.now(timezone.utc))

    @property
    def synced_at(self) -> datetime:
        return self._result.synced_at

    def add_errors(self, errors: Iterable[str]) -> None:
        self._result.errors.extend(errors)

    def record_apply(self, outcome: ApplyOutcome) -> None:
        self._result.created += outcome.created
        self._result.updated += outcome.updated
        self._result.archived += outcome.archived
        self.add_errors(outcome.errors)

    def fail(self, exc: BaseException) -> SyncResult:
        """Close the run as not performed."""
        self._result.success = False
        self._result.errors.append(f"Sync failed: {exc}")
        logger.error("[Sync] failed error=%s", exc)
        return self.build()

    def complete(self) -> SyncResult:
        """Close the run as performed, whatever item-level errors it collected."""
        self._result.success = True
        result = self.build()
        logger.info(
            f"[Sync] Completed: {result.created} created, {result.updated} updated, "
            f"{result.archived} archived, {len(result.errors)} errors"
        )
        return result

    def build(self) -> SyncResult:
        return self._result.model_copy(deep=True)
