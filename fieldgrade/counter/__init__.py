"""
Frequency counting of observed values.
"""

from .counter import CounterOrder, FrequencyCounter

__all__ = [
    "CounterOrder",
    "FrequencyCounter",
]
