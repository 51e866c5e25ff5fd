"""
Rule type definitions.

Enums and dataclasses for field-rule evaluation with strict typing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..counter import FrequencyCounter


class RuleType(str, Enum):
    """
    Semantic variants a field rule can have.

    Values compare case-insensitively unless the registry marks the type
    case sensitive. "p" is the rule's placeholder.
    """

    REQUIRED = "REQUIRED"  # Non-blank value
    REQUIRED_NOT = "REQUIRED_NOT"  # Non-blank and not p
    OPTIONAL = "OPTIONAL"  # Anything, including nothing
    OPTIONAL_NOT = "OPTIONAL_NOT"  # Nothing, or not p
    CONTAINS = "CONTAINS"  # Value contains p
    CONTAINED_BY = "CONTAINED_BY"  # p contains value
    SPECIFIED = "SPECIFIED"  # Value is p
    EMPTY = "EMPTY"  # Blank value
    DATE_TIME = "DATE_TIME"  # Parses as a date-time
    DATE_TIME_NOT = "DATE_TIME_NOT"  # Not p, and parses as a date-time
    LIST = "LIST"  # One of the comma-separated items of p
    EQUALS = "EQUALS"  # Exactly p (case sensitive)
    EQUALS_IGNORE_CASE = "EQUALS_IGNORE_CASE"  # p, ignoring case
    DOUBLE = "DOUBLE"  # Numerically equal to p
    ALPHANUMERIC = "ALPHANUMERIC"  # p, ignoring case and anything but letters and digits
    IGNORE_WHITESPACE = "IGNORE_WHITESPACE"  # p, ignoring case and all whitespace
    DATE_TIME_ON_OR_BEFORE = "DATE_TIME_ON_OR_BEFORE"  # A date-time no later than p
    DATE_TIME_ON_OR_AFTER = "DATE_TIME_ON_OR_AFTER"  # A date-time no earlier than p


@dataclass
class Rule:
    """
    A registered validation unit for one field.

    The definition (label, type, placeholder, points, importance) is fixed at
    registration; pass_count and observed_values accumulate for the whole run
    and survive RuleEvaluator.reset().

    Attributes:
        label: Human text used in explanations
        type: Semantic variant
        placeholder: Reference value; meaning depends on type
        points: Awarded when the rule passes
        importance: 0-3; failures are prefixed with that many "!"
        pass_count: Number of passing tests so far
        observed_values: Every value tested against this rule, failures included
    """

    label: str
    type: RuleType
    placeholder: Optional[str] = None
    points: int = 0
    importance: int = 0
    pass_count: int = 0
    observed_values: FrequencyCounter = field(default_factory=FrequencyCounter)

    def clone_definition(self) -> "Rule":
        """Copy the definition with fresh statistics."""
        return Rule(
            label=self.label,
            type=self.type,
            placeholder=self.placeholder,
            points=self.points,
            importance=self.importance,
        )

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "label": self.label,
            "type": self.type.value,
            "placeholder": self.placeholder,
            "points": self.points,
            "importance": self.importance,
            "pass_count": self.pass_count,
            "observed": self.observed_values.value_total,
        }


@dataclass(frozen=True)
class Verdict:
    """
    Outcome of checking one value against one rule.

    Contains:
    - ok: Whether the predicate held
    - explanation: Human-readable reason, only on failure
    """

    ok: bool
    explanation: Optional[str] = None

    @classmethod
    def passed(cls) -> "Verdict":
        return cls(ok=True)

    @classmethod
    def failed(cls, explanation: str) -> "Verdict":
        return cls(ok=False, explanation=explanation)
