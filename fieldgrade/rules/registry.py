"""
Rule Type Registry - Single source of truth for rule type requirements.

Used by:
- Registration-time validation (reject misconfigured rules before any test)
- Rule book loading (resolve type names from YAML)

Design:
- Each rule type declares whether it needs a placeholder
- Misconfigured rules fail at registration, never during grading
- Adding a rule type requires updating this registry and the predicate table
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, FrozenSet, Optional

from ..errors import ConfigurationError
from ..utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT, parse_date_time
from ..utils.helpers import is_blank, parse_float
from .types import Rule, RuleType


class PlaceholderRequirement(Enum):
    """Whether a rule type takes a placeholder."""
    REQUIRED = auto()   # Must be supplied and non-blank
    FORBIDDEN = auto()  # Must be None


@dataclass(frozen=True)
class RuleTypeSpec:
    """
    Specification for a single rule type.

    Attributes:
        rule_type: The RuleType described
        placeholder: Placeholder requirement
        case_sensitive: Whether string comparison honors case
        numeric_placeholder: Whether the placeholder must parse as a number
        date_time_placeholder: Whether the placeholder must parse as a date-time
    """
    rule_type: RuleType
    placeholder: PlaceholderRequirement
    case_sensitive: bool = False
    numeric_placeholder: bool = False
    date_time_placeholder: bool = False


_P = PlaceholderRequirement

RULE_TYPE_REGISTRY: Dict[RuleType, RuleTypeSpec] = {
    # No placeholder
    RuleType.REQUIRED: RuleTypeSpec(RuleType.REQUIRED, _P.FORBIDDEN),
    RuleType.OPTIONAL: RuleTypeSpec(RuleType.OPTIONAL, _P.FORBIDDEN),
    RuleType.EMPTY: RuleTypeSpec(RuleType.EMPTY, _P.FORBIDDEN),
    RuleType.DATE_TIME: RuleTypeSpec(RuleType.DATE_TIME, _P.FORBIDDEN),

    # Placeholder is a value to reject
    RuleType.REQUIRED_NOT: RuleTypeSpec(RuleType.REQUIRED_NOT, _P.REQUIRED),
    RuleType.OPTIONAL_NOT: RuleTypeSpec(RuleType.OPTIONAL_NOT, _P.REQUIRED),
    RuleType.DATE_TIME_NOT: RuleTypeSpec(RuleType.DATE_TIME_NOT, _P.REQUIRED),

    # Placeholder is the expected value
    RuleType.SPECIFIED: RuleTypeSpec(RuleType.SPECIFIED, _P.REQUIRED),
    RuleType.CONTAINS: RuleTypeSpec(RuleType.CONTAINS, _P.REQUIRED),
    RuleType.CONTAINED_BY: RuleTypeSpec(RuleType.CONTAINED_BY, _P.REQUIRED),
    RuleType.LIST: RuleTypeSpec(RuleType.LIST, _P.REQUIRED, case_sensitive=True),
    RuleType.EQUALS: RuleTypeSpec(RuleType.EQUALS, _P.REQUIRED, case_sensitive=True),
    RuleType.EQUALS_IGNORE_CASE: RuleTypeSpec(RuleType.EQUALS_IGNORE_CASE, _P.REQUIRED),
    RuleType.DOUBLE: RuleTypeSpec(RuleType.DOUBLE, _P.REQUIRED, numeric_placeholder=True),
    RuleType.ALPHANUMERIC: RuleTypeSpec(RuleType.ALPHANUMERIC, _P.REQUIRED),
    RuleType.IGNORE_WHITESPACE: RuleTypeSpec(RuleType.IGNORE_WHITESPACE, _P.REQUIRED),

    # Placeholder is a date-time bound
    RuleType.DATE_TIME_ON_OR_BEFORE: RuleTypeSpec(
        RuleType.DATE_TIME_ON_OR_BEFORE, _P.REQUIRED, date_time_placeholder=True
    ),
    RuleType.DATE_TIME_ON_OR_AFTER: RuleTypeSpec(
        RuleType.DATE_TIME_ON_OR_AFTER, _P.REQUIRED, date_time_placeholder=True
    ),
}

NEEDS_PLACEHOLDER: FrozenSet[RuleType] = frozenset(
    spec.rule_type for spec in RULE_TYPE_REGISTRY.values()
    if spec.placeholder is PlaceholderRequirement.REQUIRED
)

NO_PLACEHOLDER: FrozenSet[RuleType] = frozenset(
    spec.rule_type for spec in RULE_TYPE_REGISTRY.values()
    if spec.placeholder is PlaceholderRequirement.FORBIDDEN
)

MAX_IMPORTANCE = 3


def get_rule_type_spec(rule_type: RuleType) -> RuleTypeSpec:
    """Get the registry entry for a rule type."""
    return RULE_TYPE_REGISTRY[rule_type]


def resolve_rule_type(name: "str | RuleType", key: Optional[str] = None) -> RuleType:
    """
    Resolve a rule type from its name (case-insensitive).

    Args:
        name: RuleType or its name (e.g., "required", "DATE_TIME")
        key: Rule key for error messages

    Returns:
        The RuleType

    Raises:
        ConfigurationError: If the name is unknown
    """
    if isinstance(name, RuleType):
        return name
    try:
        return RuleType(str(name).strip().upper())
    except ValueError:
        raise ConfigurationError(
            key,
            f"unknown rule type '{name}' for rule",
            allowed=[t.value for t in RuleType],
        ) from None


def validate_rule(rule: Rule, date_time_format: str = DEFAULT_DATE_TIME_FORMAT) -> Optional[str]:
    """
    Validate a rule definition at registration time.

    Args:
        rule: Rule to validate
        date_time_format: Format a date-time placeholder must match

    Returns:
        Error message if invalid, None if valid
    """
    if not isinstance(rule.type, RuleType):
        return f"unknown rule type '{rule.type}' for rule"

    spec = get_rule_type_spec(rule.type)
    placeholder = rule.placeholder

    if spec.placeholder is PlaceholderRequirement.REQUIRED and is_blank(placeholder):
        return "no placeholder provided for rule"
    if spec.placeholder is PlaceholderRequirement.FORBIDDEN and placeholder is not None:
        return "placeholder provided for rule"
    if spec.numeric_placeholder and parse_float(placeholder) is None:
        return f"placeholder '{placeholder}' is not a number for rule"
    if spec.date_time_placeholder and parse_date_time(placeholder.strip(), date_time_format) is None:
        return f"placeholder '{placeholder}' does not match '{date_time_format}' for rule"

    if rule.points < 0:
        return f"points must not be negative ({rule.points}) for rule"
    if not 0 <= rule.importance <= MAX_IMPORTANCE:
        return f"importance must be 0-{MAX_IMPORTANCE} ({rule.importance}) for rule"

    return None
