"""
Predicate implementations for field rules.

One function per RuleType. Each takes the already-stripped value (or None),
the rule, and the date-time format, and returns a Verdict. Explanations name
the rule's label and, when one was supplied, the offending value:

    "Call sign must be supplied"
    "Date(garbage) is not a valid Date/Time"

Every RuleType must have an entry in PREDICATES; the table is checked when
this module is imported.
"""

import math
import re
from typing import Callable, Dict, Optional

from ..utils.datetime_utils import parse_date_time
from ..utils.helpers import alphanumeric_equals, is_blank, parse_float
from .types import Rule, RuleType, Verdict

Predicate = Callable[[Optional[str], Rule, str], Verdict]

_WHITESPACE = re.compile(r"\s+")


def _same(value: str, placeholder: str) -> bool:
    return value.lower() == placeholder.lower()


def _labelled(rule: Rule, value: str) -> str:
    return f"{rule.label}({value})"


def _same_double(actual: float, expected: float) -> bool:
    # Total order: NaN equals NaN, signed zeros differ
    if math.isnan(actual) or math.isnan(expected):
        return math.isnan(actual) and math.isnan(expected)
    return actual == expected and math.copysign(1.0, actual) == math.copysign(1.0, expected)


def _check_date_time(value: str, rule: Rule, fmt: str) -> Verdict:
    if parse_date_time(value, fmt) is None:
        return Verdict.failed(f"{_labelled(rule, value)} is not a valid Date/Time")
    return Verdict.passed()


def check_required(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Non-null, non-blank."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be supplied")
    if is_blank(value):
        return Verdict.failed(f"{_labelled(rule, value)} must not be blank")
    return Verdict.passed()


def check_required_not(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Required, and not the placeholder."""
    verdict = check_required(value, rule, fmt)
    if not verdict.ok:
        return verdict
    if _same(value, rule.placeholder):
        return Verdict.failed(f"{_labelled(rule, value)} must not be {rule.placeholder}")
    return Verdict.passed()


def check_optional(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    return Verdict.passed()


def check_optional_not(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Missing, or anything but the placeholder."""
    if value is not None and _same(value, rule.placeholder):
        return Verdict.failed(f"{_labelled(rule, value)} must not be {rule.placeholder}")
    return Verdict.passed()


def check_contains(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if value is None or rule.placeholder.lower() not in value.lower():
        return Verdict.failed(f"{rule.label} must contain {rule.placeholder}")
    return Verdict.passed()


def check_contained_by(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if value is None:
        return Verdict.failed(f"{rule.label} not in {rule.placeholder}")
    if value.lower() not in rule.placeholder.lower():
        return Verdict.failed(f"{_labelled(rule, value)} not in {rule.placeholder}")
    return Verdict.passed()


def check_specified(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if value is None:
        return Verdict.failed(f"{rule.label} must be {rule.placeholder}")
    if not _same(value, rule.placeholder):
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    return Verdict.passed()


def check_empty(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if not is_blank(value):
        return Verdict.failed(f"{_labelled(rule, value)} must be blank")
    return Verdict.passed()


def check_date_time(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if value is None:
        return Verdict.failed(f"{rule.label} must be supplied")
    return _check_date_time(value, rule, fmt)


def check_date_time_not(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Not the placeholder (e.g. "UNKNOWN"), and a valid date-time."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be supplied")
    if _same(value, rule.placeholder):
        return Verdict.failed(f"{_labelled(rule, value)} must not be {rule.placeholder}")
    return _check_date_time(value, rule, fmt)


def check_list(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Exact membership in the comma-separated placeholder items."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be in list {rule.placeholder}")
    if value not in rule.placeholder.split(","):
        return Verdict.failed(f"{_labelled(rule, value)} must contain one of {rule.placeholder}")
    return Verdict.passed()


def check_equals(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    if value is None:
        return Verdict.failed(f"{rule.label} must be {rule.placeholder}")
    if value != rule.placeholder:
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    return Verdict.passed()


def check_equals_ignore_case(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    return check_specified(value, rule, fmt)


def check_double(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Numeric equality; NaN equals NaN, -0.0 differs from 0.0."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be {rule.placeholder}")

    actual = parse_float(value)
    expected = parse_float(rule.placeholder)
    if actual is None or expected is None:
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    if not _same_double(actual, expected):
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    return Verdict.passed()


def check_alphanumeric(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """p, comparing letters and digits only and ignoring case."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be {rule.placeholder}")
    if not alphanumeric_equals(value, rule.placeholder):
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    return Verdict.passed()


def check_ignore_whitespace(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """p, with all whitespace removed and ignoring case."""
    if value is None:
        return Verdict.failed(f"{rule.label} must be {rule.placeholder}")
    if not _same(_WHITESPACE.sub("", value), _WHITESPACE.sub("", rule.placeholder)):
        return Verdict.failed(f"{_labelled(rule, value)} must be {rule.placeholder}")
    return Verdict.passed()


def _check_date_time_bound(value: Optional[str], rule: Rule, fmt: str, relation: str) -> Verdict:
    if value is None:
        return Verdict.failed(f"{rule.label} must be supplied")

    actual = parse_date_time(value, fmt)
    if actual is None:
        return Verdict.failed(f"{_labelled(rule, value)} is not a valid Date/Time")

    bound = parse_date_time(rule.placeholder.strip(), fmt)
    ok = actual <= bound if relation == "before" else actual >= bound
    if not ok:
        return Verdict.failed(f"{_labelled(rule, value)} must be on or {relation} {rule.placeholder}")
    return Verdict.passed()


def check_date_time_on_or_before(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    return _check_date_time_bound(value, rule, fmt, "before")


def check_date_time_on_or_after(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    return _check_date_time_bound(value, rule, fmt, "after")


PREDICATES: Dict[RuleType, Predicate] = {
    RuleType.REQUIRED: check_required,
    RuleType.REQUIRED_NOT: check_required_not,
    RuleType.OPTIONAL: check_optional,
    RuleType.OPTIONAL_NOT: check_optional_not,
    RuleType.CONTAINS: check_contains,
    RuleType.CONTAINED_BY: check_contained_by,
    RuleType.SPECIFIED: check_specified,
    RuleType.EMPTY: check_empty,
    RuleType.DATE_TIME: check_date_time,
    RuleType.DATE_TIME_NOT: check_date_time_not,
    RuleType.LIST: check_list,
    RuleType.EQUALS: check_equals,
    RuleType.EQUALS_IGNORE_CASE: check_equals_ignore_case,
    RuleType.DOUBLE: check_double,
    RuleType.ALPHANUMERIC: check_alphanumeric,
    RuleType.IGNORE_WHITESPACE: check_ignore_whitespace,
    RuleType.DATE_TIME_ON_OR_BEFORE: check_date_time_on_or_before,
    RuleType.DATE_TIME_ON_OR_AFTER: check_date_time_on_or_after,
}

_unhandled = set(RuleType) - set(PREDICATES)
if _unhandled:
    raise ImportError(f"No predicate for rule types: {sorted(t.value for t in _unhandled)}")


def evaluate(value: Optional[str], rule: Rule, fmt: str) -> Verdict:
    """Dispatch to the predicate for rule.type."""
    return PREDICATES[rule.type](value, rule, fmt)
