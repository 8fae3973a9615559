"""
Type converters: shared value conversion utilities.
Version: 1.0.0
"""
import re
from typing import Any, Optional

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_float(value: Any) -> Optional[float]:
    """Convert value to float, returning None if invalid."""
    if value is None:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def parse_numeric(value: Any) -> Optional[float]:
    """
    Parse a loosely formatted number such as "$12.50" or "1,200 USD".

    Numbers pass through unchanged. Strings are stripped of every character
    except digits, "." and "-" and the longest leading numeric prefix is
    parsed. Returns None for empty values or when nothing numeric remains.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = re.match(r"-?\d*\.?\d+|-?\d+\.?", cleaned)
    if not match:
        return None
    return to_float(match.group(0))
