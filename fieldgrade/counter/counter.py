"""
Frequency counter for observed field values.

Maps an observed value to how many times it was seen. Both evaluators keep
one counter per rule/entry; reporting collaborators iterate them read-only.

Ordering contract:
- Every iterator works on a snapshot, never a live view
- Equal counts are ordered by key ascending; the descending-count order is
  the exact reverse of the ascending-count order
"""

import csv
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

from ..utils.helpers import null_safe_key


class CounterOrder(str, Enum):
    """Iteration orders supported by FrequencyCounter."""

    ASCENDING_COUNT = "ascending_count"
    DESCENDING_COUNT = "descending_count"
    ASCENDING_KEY = "ascending_key"
    DESCENDING_KEY = "descending_key"


def _sort_key(key: Any) -> Tuple[str, Any]:
    # Keys of mixed types still need a total order; group them by type name
    return (type(key).__name__, key)


class FrequencyCounter:
    """
    Generic key -> occurrence-count container.

    Keys must be hashable and mutually orderable within a type.

    Equality compares counts only, while sorting a list of counters orders
    them by name only. Two counters with equal names are therefore neither
    less than each other nor necessarily equal.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._counts: Dict[Hashable, int] = {}

    def __repr__(self) -> str:
        items = ",".join(f"{k}->{v}" for k, v in self._counts.items())
        return f"FrequencyCounter(name={self.name!r}, counts={{{items}}})"

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._counts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyCounter):
            return NotImplemented
        return self._counts == other._counts

    def __lt__(self, other: "FrequencyCounter") -> bool:
        # Name order, independent of counts
        return (self.name or "") < (other.name or "")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def increment(self, key: Hashable, amount: int = 1) -> None:
        """Add amount to the count for key, creating it if needed."""
        if amount < 0:
            raise ValueError(f"Counter amounts must not be negative, got {amount}")
        self._counts[key] = self._counts.get(key, 0) + amount

    def increment_null_safe(self, key: Optional[Hashable]) -> None:
        """Increment by one, recording None/blank keys as the null sentinel."""
        self.increment(null_safe_key(key))

    def merge(self, other: Optional["FrequencyCounter"]) -> None:
        """Add every count of other into this counter. other is not modified."""
        if other is None:
            return
        for key, count in list(other._counts.items()):
            self.increment(key, count)

    def copy(self) -> "FrequencyCounter":
        """Independent copy with the same name and counts."""
        clone = FrequencyCounter(self.name)
        clone._counts = dict(self._counts)
        return clone

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_count(self, key: Hashable) -> Optional[int]:
        """Count for key, or None if the key was never observed."""
        return self._counts.get(key)

    @property
    def key_count(self) -> int:
        """Number of distinct keys."""
        return len(self._counts)

    @property
    def value_total(self) -> int:
        """Sum of all counts."""
        return sum(self._counts.values())

    def items(self) -> List[Tuple[Hashable, int]]:
        """Snapshot of (key, count) pairs in insertion order."""
        return list(self._counts.items())

    # ------------------------------------------------------------------
    # Ordered snapshots
    # ------------------------------------------------------------------

    def ascending_count(self) -> Iterator[Tuple[Hashable, int]]:
        entries = sorted(self._counts.items(), key=lambda kv: (kv[1], _sort_key(kv[0])))
        return iter(entries)

    def descending_count(self) -> Iterator[Tuple[Hashable, int]]:
        entries = list(self.ascending_count())
        entries.reverse()
        return iter(entries)

    def ascending_key(self) -> Iterator[Tuple[Hashable, int]]:
        entries = sorted(self._counts.items(), key=lambda kv: _sort_key(kv[0]))
        return iter(entries)

    def descending_key(self) -> Iterator[Tuple[Hashable, int]]:
        entries = list(self.ascending_key())
        entries.reverse()
        return iter(entries)

    def get_iterator(self, order: CounterOrder) -> Iterator[Tuple[Hashable, int]]:
        """Snapshot iterator for the requested order."""
        dispatch = {
            CounterOrder.ASCENDING_COUNT: self.ascending_count,
            CounterOrder.DESCENDING_COUNT: self.descending_count,
            CounterOrder.ASCENDING_KEY: self.ascending_key,
            CounterOrder.DESCENDING_KEY: self.descending_key,
        }
        return dispatch[CounterOrder(order)]()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def write(self, path: Path | str, order: CounterOrder = CounterOrder.DESCENDING_COUNT) -> Path:
        """
        Write keys and counts as CSV with a Name,Count header.

        Args:
            path: Destination file
            order: Row order (default: most frequent first)

        Returns:
            The path written
        """
        path = Path(path)
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Name", "Count"])
            for key, count in self.get_iterator(order):
                writer.writerow([str(key), count])
        return path
