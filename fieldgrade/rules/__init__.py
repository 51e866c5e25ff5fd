"""
Field rule evaluation.

Public API:
- Rule, RuleType: rule definitions
- RuleEvaluator: registers rules, grades values, merges statistics
- RULE_TYPE_REGISTRY: placeholder requirements per rule type
"""

from .types import Rule, RuleType, Verdict
from .registry import (
    RULE_TYPE_REGISTRY,
    NEEDS_PLACEHOLDER,
    NO_PLACEHOLDER,
    PlaceholderRequirement,
    RuleTypeSpec,
    get_rule_type_spec,
    resolve_rule_type,
    validate_rule,
)
from .predicates import PREDICATES, evaluate
from .evaluator import RuleEvaluator

__all__ = [
    # Types
    "Rule",
    "RuleType",
    "Verdict",
    # Registry
    "RULE_TYPE_REGISTRY",
    "NEEDS_PLACEHOLDER",
    "NO_PLACEHOLDER",
    "PlaceholderRequirement",
    "RuleTypeSpec",
    "get_rule_type_spec",
    "resolve_rule_type",
    "validate_rule",
    # Evaluation
    "PREDICATES",
    "evaluate",
    "RuleEvaluator",
]
