"""Parsing helpers for user-entered and backend-supplied values."""

import math
from datetime import date, datetime
from typing import Any, Optional, Union

DATE_FORMAT = "%Y-%m-%d"


def parse_rating(value: Any) -> Optional[float]:
    """Parse a rating value as a finite float.

    Args:
        value: Raw value (number or text as typed by the user).

    Returns:
        Parsed rating, or None if the value is empty or not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    try:
        rating = float(value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(rating):
        return None
    return rating


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Parse a calendar date.

    Accepts ``date`` objects, ``datetime`` objects and ISO strings, including
    full timestamps such as ``2021-10-22T00:00:00.000Z`` (only the date part
    is kept).

    Args:
        value: Raw value.

    Returns:
        Parsed date, or None if the value is empty or malformed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    # Timestamps: keep the calendar date only
    text = text.split("T", 1)[0].split(" ", 1)[0]
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(value: Optional[date]) -> str:
    """Format a date for the wire and for display.

    Args:
        value: Date to format.

    Returns:
        ``YYYY-MM-DD`` string, or an empty string for None.
    """
    if value is None:
        return ""
    return value.strftime(DATE_FORMAT)


def is_blank(value: Any) -> bool:
    """Check whether a raw form/filter value carries no content.

    Args:
        value: Raw value.

    Returns:
        True for None and whitespace-only strings.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
