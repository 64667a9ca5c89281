"""
Timestamp normalization for interaction records.

Records coming from the listing platform carry timestamps in whatever shape
the upstream sync produced: datetime objects, ISO strings, epoch seconds or
free-form strings ("2 days ago", "March 3, 2024 5pm"). Everything is
normalized to timezone-aware UTC datetimes once, at the record boundary.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import dateparser

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any, reference: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a raw timestamp into an aware UTC datetime.

    Args:
        value: datetime, ISO8601 string, epoch seconds, or a free-form date string
        reference: Reference time for relative expressions (default: now)

    Returns:
        Parsed datetime, or None if the value is empty or unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Invalid epoch timestamp: {value}")
            return None

    if not isinstance(value, str):
        logger.warning(f"Unsupported timestamp type: {type(value).__name__}")
        return None

    text = value.strip()
    try:
        return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    parsed = dateparser.parse(
        text,
        settings={
            "RELATIVE_BASE": (reference or utcnow()).replace(tzinfo=None),
            "TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": True,
        },
    )
    if parsed is None:
        logger.warning(f"Unparseable timestamp: {value!r}")
        return None

    logger.debug(f"Parsed free-form timestamp {value!r} -> {parsed.isoformat()}")
    return ensure_utc(parsed)


def weekday_name(value: datetime) -> str:
    """English weekday name for a datetime."""
    return WEEKDAY_NAMES[value.weekday()]
