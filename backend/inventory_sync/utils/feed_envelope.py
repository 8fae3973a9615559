"""
Feed envelope parsing: turn upstream response bodies into canonical pages.

The accepted shapes form a closed, ordered tuple; each shape is tried in turn
and the first structural match wins.

    ITEM_ENVELOPES     = bare array, "data", "items", "results"
    LOCATION_ENVELOPES = bare array, "data", "locations"

Pagination continuation comes from "has_more" / "hasMore" and the cursor from
"cursor" / "next_cursor".
Version: 1.0.0
"""
import logging
from typing import Any, Callable, List, NamedTuple, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from inventory_sync.schemas.feed import FeedItem, FeedLocation

logger = logging.getLogger("feed_envelope")

M = TypeVar("M", bound=BaseModel)


class EnvelopeShape(NamedTuple):
    """One accepted response shape: a tag and the extractor that tries it."""
    tag: str
    extract: Callable[[Any], Optional[list]]


def _bare_array(payload: Any) -> Optional[list]:
    return payload if isinstance(payload, list) else None


def _under_key(key: str) -> Callable[[Any], Optional[list]]:
    def extract(payload: Any) -> Optional[list]:
        if isinstance(payload, dict) and isinstance(payload.get(key), list):
            return payload[key]
        return None
    return extract


ITEM_ENVELOPES: Tuple[EnvelopeShape, ...] = (
    EnvelopeShape("array", _bare_array),
    EnvelopeShape("data", _under_key("data")),
    EnvelopeShape("items", _under_key("items")),
    EnvelopeShape("results", _under_key("results")),
)

LOCATION_ENVELOPES: Tuple[EnvelopeShape, ...] = (
    EnvelopeShape("array", _bare_array),
    EnvelopeShape("data", _under_key("data")),
    EnvelopeShape("locations", _under_key("locations")),
)

HAS_MORE_KEYS: Tuple[str, ...] = ("has_more", "hasMore")
CURSOR_KEYS: Tuple[str, ...] = ("cursor", "next_cursor")


class FeedPage(NamedTuple):
    items: List[FeedItem]
    rejected: List[str]
    has_more: bool
    cursor: Optional[str]
    shape: Optional[str]


def match_envelope(payload: Any, shapes: Tuple[EnvelopeShape, ...]) -> Tuple[Optional[str], list]:
    """Return (tag, raw records) for the first matching shape, or (None, [])."""
    for shape in shapes:
        records = shape.extract(payload)
        if records is not None:
            return shape.tag, records

    preview = str(payload)[:500]
    logger.warning("feed envelope unrecognized shape preview=%s", preview)
    return None, []


def _first_present(payload: Any, keys: Tuple[str, ...]) -> Any:
    if not isinstance(payload, dict):
        return None
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def extract_pagination(payload: Any) -> Tuple[bool, Optional[str]]:
    """Read the more-pages flag and the continuation cursor."""
    has_more = bool(_first_present(payload, HAS_MORE_KEYS) or False)
    cursor = _first_present(payload, CURSOR_KEYS)
    if cursor is not None:
        cursor = str(cursor) or None
    return has_more, cursor


def _describe(raw: Any) -> Tuple[Any, Any]:
    if isinstance(raw, dict):
        return raw.get("id"), raw.get("name")
    return None, None


def normalize_records(records: list, model: Type[M]) -> Tuple[List[M], List[str]]:
    """Validate raw records into model instances; failures are reported, not raised."""
    parsed: List[M] = []
    rejected: List[str] = []
    for raw in records:
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as exc:
            record_id, name = _describe(raw)
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}"
                for err in exc.errors()
            )
            rejected.append(f"Failed to process item {record_id} ({name}): {reason}")
    return parsed, rejected


def parse_item_page(payload: Any) -> FeedPage:
    """Parse one page of the item listing."""
    shape, records = match_envelope(payload, ITEM_ENVELOPES)
    items, rejected = normalize_records(records, FeedItem)
    has_more, cursor = extract_pagination(payload)
    return FeedPage(items=items, rejected=rejected, has_more=has_more, cursor=cursor, shape=shape)


def parse_locations(payload: Any) -> List[FeedLocation]:
    """Parse the location listing; malformed entries are logged and skipped."""
    _, records = match_envelope(payload, LOCATION_ENVELOPES)
    locations, rejected = normalize_records(records, FeedLocation)
    for reason in rejected:
        logger.warning("feed location skipped reason=%s", reason)
    return locations
