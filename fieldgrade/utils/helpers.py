"""
Value-formatting helpers shared by the rule evaluator and the assertion engine.

Submitted values come from humans typing into forms, so:
- None and whitespace-only strings are both "nothing supplied"
- the friendliest string comparison ignores case and punctuation
"""

import re
from typing import Any, Optional

# Stand-in recorded in counters for None/blank values
NULL_SENTINEL = "(null)"
EMPTY_SENTINEL = "(empty)"

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")


def is_blank(value: Optional[str]) -> bool:
    """True for None, the empty string, or whitespace only."""
    return value is None or not str(value).strip()


def null_safe_key(value: Any) -> Any:
    """
    Normalize a counter key.

    Examples:
        >>> null_safe_key(None)
        '(null)'
        >>> null_safe_key("   ")
        '(null)'
        >>> null_safe_key("K1ABC")
        'K1ABC'
    """
    if value is None:
        return NULL_SENTINEL
    if isinstance(value, str) and not value.strip():
        return NULL_SENTINEL
    return value


def wrap_value(value: Optional[str]) -> str:
    """Make None and "" visible in explanations."""
    if value is None:
        return NULL_SENTINEL
    if value == "":
        return EMPTY_SENTINEL
    return value


def strip_non_alphanumeric(value: str) -> str:
    """Drop every character outside [A-Za-z0-9]."""
    return _NON_ALPHANUMERIC.sub("", value)


def alphanumeric_equals(value: Optional[str], expected: Optional[str]) -> bool:
    """
    Case-independent, alphanumeric-only comparison.

    A None value never matches.

    Examples:
        >>> alphanumeric_equals("O'Brien-1", "OBrien1")
        True
        >>> alphanumeric_equals(None, "x")
        False
    """
    if value is None or expected is None:
        return False
    return strip_non_alphanumeric(value).lower() == strip_non_alphanumeric(expected).lower()


def format_percent(numerator: int, denominator: int) -> str:
    """
    Format a ratio as a percentage with two decimals.

    Examples:
        >>> format_percent(1, 3)
        '33.33%'
        >>> format_percent(0, 0)
        '0%'
    """
    if denominator == 0:
        return "0%"
    return f"{100.0 * numerator / denominator:.2f}%"


def parse_float(value: Any) -> Optional[float]:
    """Parse a float, returning None instead of raising.

    Digit-group underscores ("1_000") are rejected even though float() takes them.
    """
    if value is None or value == "" or value == " ":
        return None
    if isinstance(value, str) and "_" in value:
        return None
    try:
        return float(value)
    except (ValueError, TypeError):
        return None
