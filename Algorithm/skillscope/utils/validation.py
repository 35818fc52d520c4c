"""
Defensive coercion helpers for SkillScope.

Upstream rows are sparse: numbers may arrive as strings, nulls or junk.
These helpers never raise; they substitute a default instead.
"""

import math
import logging
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def to_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce a value to a finite float.

    Args:
        value: Raw value (number, numeric string, None, ...)
        default: Value returned when coercion fails

    Returns:
        Float value or default
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a value to an int, truncating floats."""
    result = to_float(value, float("nan"))
    if math.isnan(result):
        return default
    return int(result)


def to_bool(value: Any, default: bool = False) -> bool:
    """
    Coerce a value to a bool.

    Only real booleans and the strings "true"/"false" are recognized;
    anything else (including missing values) yields the default.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return default


def to_str(value: Any, default: str = "") -> str:
    """Coerce a value to a stripped string."""
    if value is None:
        return default
    text = str(value).strip()
    return text if text else default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive datetimes are assumed to be UTC. A trailing "Z" is accepted.

    Returns:
        Aware datetime, or None when the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparsable timestamp: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
