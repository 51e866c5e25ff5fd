"""
AssertionEngine - data-driven field tests with per-entry statistics.

Unlike RuleEvaluator, entries carry an arbitrary expected value (string,
datetime, or a sequence of candidate strings) and the caller picks the
test: the default alphanumeric comparison, a specialized predicate, or a
predicate it evaluated itself.

Every test counts toward the entry's total; passing tests also count toward
pass_count and add the entry's points. Failures append an explanation.

Not thread-safe: one instance per grading run, driven sequentially.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Collection, Dict, Iterator, List, Optional, Union

from ..counter import FrequencyCounter
from ..errors import ConfigurationError
from ..utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT
from ..utils.helpers import alphanumeric_equals, format_percent, wrap_value
from ..utils.logger import get_logger

# Label token replaced by a string expected value at registration
EXPECTED_VALUE_TOKEN = "#EV"

DateTimeFormatter = Union[str, Callable[[datetime], str]]


class DateTimeRelop(str, Enum):
    """Relational operators for date-time tests."""
    EQ = "eq"
    GE = "ge"
    LE = "le"


_RELOPS: Dict[DateTimeRelop, Callable[[datetime, datetime], bool]] = {
    DateTimeRelop.EQ: lambda value, expected: value == expected,
    DateTimeRelop.GE: lambda value, expected: value >= expected,
    DateTimeRelop.LE: lambda value, expected: value <= expected,
}


@dataclass
class Entry:
    """
    A registered assertion.

    Attributes:
        label: Human text, used as the failure explanation prefix
        expected: Expected value; its type depends on the tests used
        points: Awarded on each pass
        pass_count: Passing tests so far
        total_count: All tests so far, including fail()
        observed_values: Every value tested, failures included
    """

    label: str
    expected: Any = None
    points: int = 0
    pass_count: int = 0
    total_count: int = 0
    observed_values: FrequencyCounter = field(default_factory=FrequencyCounter)

    @property
    def fail_count(self) -> int:
        return self.total_count - self.pass_count


def default_string_compare(value: Optional[str], expected: Optional[str]) -> bool:
    """Case-independent comparison of the alphanumeric characters only."""
    return alphanumeric_equals(value, expected)


def _format_with(formatter: DateTimeFormatter, value: datetime) -> str:
    if callable(formatter):
        return formatter(value)
    return value.strftime(formatter)


class AssertionEngine:
    """
    Named entries with pass/fail statistics and a points accumulator.
    """

    def __init__(self):
        self.logger = get_logger()
        self._entries: Dict[str, Entry] = {}
        self._explanations: List[str] = []
        self._points = 0

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    default_string_compare = staticmethod(default_string_compare)

    # ------------------------------------------------------------------
    # Registration and lifecycle
    # ------------------------------------------------------------------

    def add_entry(self, key: str, label: str, expected: Any = None, points: int = 0) -> Entry:
        """
        Register (or replace) an entry.

        A string expected value replaces every "#EV" in the label, so
        "Organization should be #EV" reads "Organization should be ETO".
        """
        if points < 0:
            self.logger.error(f"Rejected entry '{key}': negative points")
            raise ConfigurationError(key, f"points must not be negative ({points}) for entry")

        if isinstance(expected, str) and EXPECTED_VALUE_TOKEN in label:
            label = label.replace(EXPECTED_VALUE_TOKEN, expected)

        entry = Entry(label=label, expected=expected, points=points)
        self._entries[key] = entry
        return entry

    def get(self, key: str) -> Entry:
        """
        Get the entry for key.

        Raises:
            ConfigurationError: If no entry is registered for key
        """
        entry = self._entries.get(key)
        if entry is None:
            self.logger.error(f"No entry registered for key '{key}'")
            raise ConfigurationError(key, "no entry found for key", allowed=self._entries.keys())
        return entry

    def reset(self) -> None:
        """Start a new submission: fresh explanations, zero points."""
        self._explanations = []
        self._points = 0

    @property
    def explanations(self) -> List[str]:
        return self._explanations

    @property
    def points(self) -> int:
        return self._points

    # ------------------------------------------------------------------
    # Unconditional outcomes
    # ------------------------------------------------------------------

    def fail(self, key: str, message: Optional[str] = None) -> int:
        """
        Fail the entry with message (default: its label).

        The message is recorded both as an explanation and in the entry's
        counter. Always returns 0.
        """
        entry = self.get(key)
        message = message if message is not None else entry.label

        entry.total_count += 1
        entry.observed_values.increment_null_safe(message)
        self._explanations.append(message)
        self.logger.verdict(key, False, 0, reason=message)
        return 0

    def pass_(self, key: str) -> int:
        """Pass the entry unconditionally."""
        return self._record(self.get(key), key, None, True)

    # ------------------------------------------------------------------
    # Generic tests
    # ------------------------------------------------------------------

    def test(self, key: str, value: Optional[str], predicate: Optional[bool] = None) -> int:
        """
        Test a value against the entry.

        Args:
            key: Registered entry key
            value: Submitted value, recorded in the counter either way
            predicate: Outcome evaluated by the caller. When omitted the
                default comparison runs against the entry's expected string.

        Returns:
            Entry points on pass, 0 on failure
        """
        entry = self.get(key)
        if predicate is None:
            self._expect(entry, key, str, "a string")
            predicate = value is not None and default_string_compare(value, entry.expected)
        return self._record(entry, key, value, bool(predicate))

    def test_predicate(self, key: str, predicate: bool) -> int:
        """Test with a caller-evaluated predicate and no value."""
        return self._record(self.get(key), key, None, bool(predicate))

    def _expect(self, entry: Entry, key: str, kind, description: str) -> None:
        if not isinstance(entry.expected, kind):
            self.logger.error(f"Entry '{key}' has no expected {description}")
            raise ConfigurationError(key, f"expected value is not {description} for entry")

    def _record(self, entry: Entry, key: str, value: Optional[str], predicate: bool) -> int:
        entry.total_count += 1
        entry.observed_values.increment_null_safe(value)

        if predicate:
            entry.pass_count += 1
            self._points += entry.points
            self.logger.verdict(key, True, entry.points, value)
            return entry.points

        explanation = f"{entry.label}, not {wrap_value(value)}"
        self._explanations.append(explanation)
        self.logger.verdict(key, False, 0, value)
        return 0

    # ------------------------------------------------------------------
    # Specialized tests
    # ------------------------------------------------------------------

    def test_set_of_strings(self, key: str, value: Optional[str]) -> int:
        """
        Pass if value matches any candidate under the default comparison.

        The expected value is a sequence of candidates tried in order; an
        unordered set is tried in sorted order. A non-matching value fails
        with "<label> , not <value>".
        """
        entry = self.get(key)
        self._expect(entry, key, (list, tuple, set, frozenset), "a sequence of strings")
        if value is None:
            return self._record(entry, key, None, False)

        candidates: Collection[str] = entry.expected
        if isinstance(candidates, (set, frozenset)):
            candidates = sorted(candidates)

        for candidate in candidates:
            if default_string_compare(value, candidate):
                return self._record(entry, key, value, True)

        return self.fail(key, f"{entry.label} , not {value}")

    def test_ends_with(self, key: str, value: Optional[str], case_insensitive: bool = False) -> int:
        """Pass if value ends with the expected suffix."""
        entry = self.get(key)
        self._expect(entry, key, str, "a string")
        suffix = entry.expected
        if value is None:
            predicate = False
        elif case_insensitive:
            predicate = value.lower().endswith(suffix.lower())
        else:
            predicate = value.endswith(suffix)
        return self._record(entry, key, value, predicate)

    def test_if_present(self, key: str, value: Optional[str]) -> int:
        """Pass for a non-null, non-empty value."""
        return self._record(self.get(key), key, value, value is not None and value != "")

    def test_if_empty(self, key: str, value: Optional[str]) -> int:
        """Pass for a null or empty value."""
        return self._record(self.get(key), key, value, value is None or value == "")

    def _test_date_time(
        self,
        key: str,
        value: Optional[datetime],
        formatter: DateTimeFormatter,
        relop: DateTimeRelop,
    ) -> int:
        entry = self.get(key)
        self._expect(entry, key, datetime, "a date-time")
        expected = entry.expected

        if value is None:
            return self._record(entry, key, None, False)

        predicate = _RELOPS[relop](value, expected)
        return self._record(entry, key, _format_with(formatter, value), predicate)

    def test_dt_equals(self, key: str, value: Optional[datetime],
                       formatter: DateTimeFormatter = DEFAULT_DATE_TIME_FORMAT) -> int:
        return self._test_date_time(key, value, formatter, DateTimeRelop.EQ)

    def test_on_or_after(self, key: str, value: Optional[datetime],
                         formatter: DateTimeFormatter = DEFAULT_DATE_TIME_FORMAT) -> int:
        return self._test_date_time(key, value, formatter, DateTimeRelop.GE)

    def test_on_or_before(self, key: str, value: Optional[datetime],
                          formatter: DateTimeFormatter = DEFAULT_DATE_TIME_FORMAT) -> int:
        return self._test_date_time(key, value, formatter, DateTimeRelop.LE)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_counter(self, key: str) -> FrequencyCounter:
        return self.get(key).observed_values

    def has_content(self, key: str) -> bool:
        """True if the entry has failed at least once."""
        entry = self.get(key)
        return entry.total_count != entry.pass_count

    def format(self, key: str) -> str:
        """
        One-line pass/fail summary.

        Example:
            "Organization should be ETO, correct: 3(75.00%), incorrect: 1(25.00%)"
        """
        entry = self.get(key)
        fail_count = entry.fail_count
        return (
            f"{entry.label}, correct: {entry.pass_count}"
            f"({format_percent(entry.pass_count, entry.total_count)}), "
            f"incorrect: {fail_count}({format_percent(fail_count, entry.total_count)})"
        )
