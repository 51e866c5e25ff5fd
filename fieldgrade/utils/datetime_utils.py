"""
Date/time parsing utilities.

Single source of truth for the submission date-time format.
"""

from datetime import datetime
from typing import Optional

# Java-style "yyyy-MM-dd HH:mm"
DEFAULT_DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"


def parse_date_time(value: Optional[str], fmt: str = DEFAULT_DATE_TIME_FORMAT) -> Optional[datetime]:
    """
    Strictly parse a date-time string.

    strptime accepts unpadded fields ("2024-1-1 0:00"); submissions must match
    the format exactly, so the parsed value has to format back to the input.

    Args:
        value: String to parse (None returns None)
        fmt: strftime/strptime format

    Returns:
        datetime if valid, None otherwise

    Examples:
        >>> parse_date_time("2024-01-01 00:00")
        datetime.datetime(2024, 1, 1, 0, 0)
        >>> parse_date_time("2024-1-1 0:00") is None
        True
    """
    if value is None:
        return None
    try:
        parsed = datetime.strptime(value, fmt)
    except ValueError:
        return None
    if parsed.strftime(fmt) != value:
        return None
    return parsed


def format_date_time(value: Optional[datetime], fmt: str = DEFAULT_DATE_TIME_FORMAT) -> Optional[str]:
    """Format a datetime, passing None through."""
    if value is None:
        return None
    return value.strftime(fmt)
