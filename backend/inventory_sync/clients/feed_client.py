"""
Inventory feed HTTP client: paginated, paced and retrying REST calls.
Version: 1.0.0
"""
import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import httpx
from pydantic import ValidationError

from inventory_sync.core.config import Settings
from inventory_sync.core.constants.sync import FEED_SERVICE_NAME, RATE_LIMIT_RESET_HEADER
from inventory_sync.core.exceptions import (
    ConfigurationError,
    ExternalAPIError,
    FeedUnavailable,
    ItemProcessingError,
    RateLimitError,
    RateLimitExceeded,
)
from inventory_sync.schemas.feed import FeedItem, FeedLocation
from inventory_sync.utils.feed_envelope import parse_item_page, parse_locations
from inventory_sync.utils.rate_limiter import RequestPacer

logger = logging.getLogger("feed_client")

QueryParams = List[Tuple[str, str]]


class InventoryFeedClient:
    """
    Read-only client for the external inventory listing.

    Construct one per sync run: the pacer it holds carries the rate floor
    state for that run only. Items that fail canonical validation while
    paging are collected in `rejected_items` instead of being dropped, as is
    a note when the listing is cut off at the page cap.
    """

    def __init__(
        self,
        settings: Settings,
        pacer: RequestPacer | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (settings.inventory_feed_base_url or "").rstrip("/")
        self._token = settings.inventory_feed_api_token
        self._page_limit = settings.inventory_feed_page_limit
        self._max_pages = settings.inventory_feed_max_pages
        self._timeout = settings.inventory_feed_timeout_seconds
        self._pacer = pacer or RequestPacer.from_settings(settings)
        self._transport = transport
        self.rejected_items: List[str] = []

    def _ensure_configured(self) -> None:
        if not self._token:
            raise ConfigurationError("INVENTORY_FEED_API_TOKEN is not configured")

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {self._token}",
            },
        )

    @staticmethod
    def _reset_hint(resp: httpx.Response) -> Optional[float]:
        raw = resp.headers.get(RATE_LIMIT_RESET_HEADER)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            logger.info("feed rate limit reset header unparseable value=%s", raw)
            return None

    @staticmethod
    def _error_title(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("title"):
            return f"{body.get('title')} ({body.get('type', '/errors/unknown')})"
        return f"HTTP {resp.status_code}: {resp.reason_phrase}"

    async def _send(self, http: httpx.AsyncClient, path: str, params: QueryParams | None) -> Any:
        """Perform one attempt; raise a retryable error on any failure."""
        try:
            resp = await http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise ExternalAPIError(FEED_SERVICE_NAME, f"transport error: {exc}") from exc

        logger.info("feed response status=%s path=%s", resp.status_code, path)

        if resp.status_code == 429:
            raise RateLimitError(
                FEED_SERVICE_NAME,
                retry_after=self._pacer.backoff_for(self._reset_hint(resp)),
            )
        if resp.status_code < 200 or resp.status_code >= 300:
            raise ExternalAPIError(FEED_SERVICE_NAME, self._error_title(resp), status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise ExternalAPIError(
                FEED_SERVICE_NAME, f"invalid JSON body: {exc}", status_code=resp.status_code
            ) from exc

    async def _get_json(self, http: httpx.AsyncClient, path: str, params: QueryParams | None = None) -> Any:
        """GET with rate floor and bounded retries on the same request."""
        max_attempts = self._pacer.max_attempts
        for attempt in range(1, max_attempts + 1):
            await self._pacer.wait_turn()
            logger.info("feed request path=%s params=%s attempt=%s", path, params, attempt)
            try:
                return await self._send(http, path, params)
            except RateLimitError as exc:
                if attempt >= max_attempts:
                    logger.error("feed rate limited, giving up path=%s attempts=%s", path, attempt)
                    raise RateLimitExceeded(FEED_SERVICE_NAME, attempts=attempt) from exc
                delay = exc.retry_after
                logger.warning(f"Feed rate limited, waiting {delay:.2f}s before retry {attempt}/{max_attempts - 1}")
            except ExternalAPIError as exc:
                if attempt >= max_attempts:
                    logger.error("feed unavailable path=%s attempts=%s error=%s", path, attempt, exc)
                    raise FeedUnavailable(
                        FEED_SERVICE_NAME, str(exc), attempts=attempt, status_code=exc.status_code
                    ) from exc
                delay = self._pacer.backoff_for()
                logger.warning(f"Feed request failed ({exc}), waiting {delay:.2f}s before retry {attempt}/{max_attempts - 1}")
            await self._pacer.sleep(delay)

        raise FeedUnavailable(FEED_SERVICE_NAME, "no attempts made", attempts=0)  # unreachable

    def _page_params(self, cursor: Optional[str], location_ids: Optional[Sequence[int]]) -> QueryParams:
        params: QueryParams = [("limit", str(self._page_limit))]
        if cursor:
            params.append(("cursor", cursor))
        for location_id in location_ids or ():
            params.append(("location_ids", str(location_id)))
        return params

    async def fetch_all(self, location_ids: Optional[Iterable[int]] = None) -> List[FeedItem]:
        """
        Fetch every item from the listing, following cursors page by page.

        Stops when the upstream reports no further pages, omits the cursor,
        returns an empty page, or the page cap is reached.

        Args:
            location_ids: Optional location filter, sent as repeated params

        Returns:
            list[FeedItem]: canonical items across all pages

        Raises:
            ConfigurationError: no API token configured
            RateLimitExceeded: a page stayed rate limited through all retries
            FeedUnavailable: a page kept failing through all retries
        """
        self._ensure_configured()
        locations = list(location_ids) if location_ids else None
        all_items: List[FeedItem] = []
        self.rejected_items = []
        cursor: Optional[str] = None
        page_count = 0

        async with self._http() as http:
            while True:
                if page_count >= self._max_pages:
                    logger.warning(
                        f"Feed page cap reached ({self._max_pages} pages), stopping with {len(all_items)} items"
                    )
                    self.rejected_items.append(
                        f"Feed listing truncated at {self._max_pages} pages; "
                        f"items beyond page {self._max_pages} were not fetched"
                    )
                    break
                page_count += 1

                payload = await self._get_json(http, "/v1/items", self._page_params(cursor, locations))
                page = parse_item_page(payload)

                logger.info(
                    "feed page=%s shape=%s items=%s rejected=%s has_more=%s",
                    page_count, page.shape, len(page.items), len(page.rejected), page.has_more,
                )
                if page_count == 1 and page.items:
                    logger.debug("feed sample item=%s", page.items[0].model_dump_json())

                all_items.extend(page.items)
                self.rejected_items.extend(page.rejected)

                if not page.items and not page.rejected:
                    break
                if not page.has_more or not page.cursor:
                    break
                cursor = page.cursor

        logger.info("feed total items fetched=%s pages=%s", len(all_items), page_count)
        return all_items

    async def fetch_item(self, external_id: int) -> FeedItem:
        """Fetch a single item by its external id."""
        self._ensure_configured()
        async with self._http() as http:
            payload = await self._get_json(http, f"/v1/items/{external_id}")
        try:
            return FeedItem.model_validate(payload)
        except ValidationError as exc:
            raise ItemProcessingError(external_id, None, str(exc)) from exc

    async def fetch_locations(self) -> List[FeedLocation]:
        """Fetch all inventory locations."""
        self._ensure_configured()
        async with self._http() as http:
            payload = await self._get_json(http, "/v1/locations")
        return parse_locations(payload)
