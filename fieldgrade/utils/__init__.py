"""
Utility modules.
"""

from .logger import get_logger, setup_logger, GraderLogger
from .helpers import (
    NULL_SENTINEL,
    EMPTY_SENTINEL,
    is_blank,
    null_safe_key,
    wrap_value,
    strip_non_alphanumeric,
    alphanumeric_equals,
    format_percent,
    parse_float,
)
from .datetime_utils import DEFAULT_DATE_TIME_FORMAT, parse_date_time, format_date_time

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "GraderLogger",
    # Value helpers
    "NULL_SENTINEL",
    "EMPTY_SENTINEL",
    "is_blank",
    "null_safe_key",
    "wrap_value",
    "strip_non_alphanumeric",
    "alphanumeric_equals",
    "format_percent",
    "parse_float",
    # Date/time
    "DEFAULT_DATE_TIME_FORMAT",
    "parse_date_time",
    "format_date_time",
]
