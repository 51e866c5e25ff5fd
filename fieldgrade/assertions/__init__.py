"""
Data-driven assertions with per-entry statistics.
"""

from .engine import (
    EXPECTED_VALUE_TOKEN,
    AssertionEngine,
    DateTimeRelop,
    Entry,
    default_string_compare,
)

__all__ = [
    "EXPECTED_VALUE_TOKEN",
    "AssertionEngine",
    "DateTimeRelop",
    "Entry",
    "default_string_compare",
]
