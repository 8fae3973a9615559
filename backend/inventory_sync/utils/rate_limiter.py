"""
Feed request pacing: minimum spacing between calls plus retry backoff policy.

A RequestPacer is built once per sync run from settings, handed to the feed
client, and dropped when the run ends. There is no module-level instance, so
two runs never share pacing state.

Usage:
    pacer = RequestPacer.from_settings(settings)
    await pacer.wait_turn()      # blocks until the rate floor allows a call
    ...
    delay = pacer.backoff_for(reset_hint)
    await pacer.sleep(delay)
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from inventory_sync.core.constants.sync import (
    DEFAULT_RETRY_DELAY,
    MAX_RETRIES,
    MIN_REQUEST_INTERVAL,
)

logger = logging.getLogger("rate_limiter")


class RequestPacer:
    """
    Enforces a minimum interval between consecutive feed requests and
    decides how long to back off before retrying a failed one.

    The interval is a floor on request spacing; a 429 reset hint from the
    upstream lengthens the wait for that retry but never shortens the floor.
    """

    def __init__(
        self,
        min_interval: float = MIN_REQUEST_INTERVAL,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_retries: int = MAX_RETRIES,
        clock: Callable[[], float] = time.monotonic,
        sleeper: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the pacer.

        Args:
            min_interval: Minimum seconds between the start of two requests
            retry_delay: Backoff in seconds when no reset hint is given
            max_retries: Retries allowed per request after the first attempt
            clock: Monotonic clock, replaceable in tests
            sleeper: Async sleep, replaceable in tests
        """
        self._min_interval = max(0.0, min_interval)
        self._retry_delay = max(0.0, retry_delay)
        self._max_retries = max(0, max_retries)
        self._clock = clock
        self._sleeper = sleeper
        self._last_request_at: Optional[float] = None
        self.requests_made = 0

        logger.info(
            f"RequestPacer initialized: min_interval={self._min_interval:.3f}s, "
            f"retry_delay={self._retry_delay:.3f}s, max_retries={self._max_retries}"
        )

    @classmethod
    def from_settings(cls, settings) -> "RequestPacer":
        return cls(
            min_interval=settings.inventory_feed_min_interval,
            retry_delay=settings.inventory_feed_retry_delay,
            max_retries=settings.inventory_feed_max_retries,
        )

    @property
    def max_attempts(self) -> int:
        """Total attempts per request (first try plus retries)."""
        return self._max_retries + 1

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def wait_turn(self) -> float:
        """
        Block until the rate floor allows the next request, then claim it.

        Returns:
            Seconds actually waited
        """
        waited = 0.0
        if self._last_request_at is not None:
            elapsed = self._clock() - self._last_request_at
            remaining = self._min_interval - elapsed
            if remaining > 0:
                logger.debug(f"Pacing feed request, waiting {remaining:.3f}s")
                await self._sleeper(remaining)
                waited = remaining
        self._last_request_at = self._clock()
        self.requests_made += 1
        return waited

    def backoff_for(self, reset_hint: Optional[float] = None) -> float:
        """
        Seconds to wait before retrying a failed request.

        A positive upstream reset hint is honored as given; otherwise the
        default retry delay applies.
        """
        if reset_hint is not None and reset_hint > 0:
            return float(reset_hint)
        return self._retry_delay

    async def sleep(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleeper(seconds)
