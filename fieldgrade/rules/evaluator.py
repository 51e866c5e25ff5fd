"""
RuleEvaluator - grades submitted field values against registered rules.

Lifecycle per grading run:
1. add_rule() once per field, for the exercise definition
2. For each submission: reset(), then test() once per field
3. Read points and explanations

Rules and their observed-value counters persist across reset() calls;
only the explanations sink and the points total are per submission.

Not thread-safe: one instance per grading run, driven sequentially.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from ..errors import ConfigurationError
from ..utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT
from ..utils.logger import get_logger
from .predicates import evaluate
from .registry import resolve_rule_type, validate_rule
from .types import Rule


class RuleEvaluator:
    """
    Insertion-ordered collection of field rules with a points accumulator.

    Attributes:
        enabled: When False, test() is a no-op returning 0
        date_time_format: Format used by the DATE_TIME rule types
    """

    def __init__(self, date_time_format: str = DEFAULT_DATE_TIME_FORMAT):
        self.logger = get_logger()
        self.date_time_format = date_time_format
        self.enabled = True
        self._rules: Dict[str, Rule] = {}
        self._explanations: List[str] = []
        self._points = 0

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, key: str) -> bool:
        return key in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rules))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_rule(self, key: str, rule: Rule) -> None:
        """
        Register (or silently replace) the rule for a field key.

        Raises:
            ConfigurationError: If the placeholder requirement of the rule type
                is violated, or the definition is otherwise invalid
        """
        rule.type = resolve_rule_type(rule.type, key)
        error = validate_rule(rule, self.date_time_format)
        if error:
            self.logger.error(f"Rejected rule '{key}': {error}")
            raise ConfigurationError(key, error)

        self._rules[key] = rule
        self.logger.debug(f"Registered rule '{key}' ({rule.type.value}, {rule.points} pts)")

    def get(self, key: str) -> Rule:
        """
        Get the rule for a key.

        Raises:
            ConfigurationError: If no rule is registered for key
        """
        rule = self._rules.get(key)
        if rule is None:
            self.logger.error(f"No rule registered for key '{key}'")
            raise ConfigurationError(key, "no rule found for key", allowed=self._rules.keys())
        return rule

    def keys(self) -> List[str]:
        """Registered keys in registration order."""
        return list(self._rules)

    # ------------------------------------------------------------------
    # Per-submission state
    # ------------------------------------------------------------------

    def reset(self, explanations: Optional[List[str]] = None) -> None:
        """
        Start a new submission.

        Args:
            explanations: Sink for failure explanations (default: new list)
        """
        self._explanations = explanations if explanations is not None else []
        self._points = 0

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    @property
    def points(self) -> int:
        """Points accumulated since the last reset()."""
        return self._points

    @property
    def explanations(self) -> List[str]:
        """Explanations accumulated since the last reset()."""
        return self._explanations

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def test(self, key: str, value: Optional[str]) -> int:
        """
        Test a submitted value against the rule for key.

        The raw value is always recorded in the rule's counter, then stripped
        of surrounding whitespace before the predicate runs.

        Args:
            key: Registered field key
            value: Submitted value (None if the field was absent)

        Returns:
            The rule's points on pass, 0 on failure or when disabled

        Raises:
            ConfigurationError: If no rule is registered for key
        """
        if not self.enabled:
            return 0

        rule = self.get(key)
        rule.observed_values.increment_null_safe(value)
        stripped = value.strip() if value is not None else None

        verdict = evaluate(stripped, rule, self.date_time_format)
        if verdict.ok:
            rule.pass_count += 1
            self._points += rule.points
            self.logger.verdict(key, True, rule.points, value)
            return rule.points

        self._explanations.append(_importance_prefix(rule.importance) + verdict.explanation)
        self.logger.verdict(key, False, 0, value, reason=verdict.explanation)
        return 0

    # ------------------------------------------------------------------
    # Combination and reporting
    # ------------------------------------------------------------------

    def merge(self, sub_evaluators: Sequence["RuleEvaluator"], summable_keys: Iterable[str] = ()) -> None:
        """
        Merge rule statistics from several sub-evaluators into this one.

        Sub-evaluators are visited in order. For each of their keys:
        - a key unknown here is cloned (definition only) from the first
          sub-evaluator defining it
        - a summable key adds pass_count and counter contents
        - any other key takes pass_count and counter from the current
          sub-evaluator, so the last one wins

        The merged rules are built aside and installed in one step, so this
        evaluator is unchanged if anything raises. Sub-evaluators are never
        modified.
        """
        summable = set(summable_keys)
        merged: Dict[str, Rule] = {}
        for key, rule in self._rules.items():
            clone = rule.clone_definition()
            clone.pass_count = rule.pass_count
            clone.observed_values = rule.observed_values.copy()
            merged[key] = clone

        for sub in sub_evaluators:
            for key, sub_rule in sub._rules.items():
                rule = merged.get(key)
                if rule is None:
                    rule = sub_rule.clone_definition()
                    merged[key] = rule
                if key in summable:
                    rule.pass_count += sub_rule.pass_count
                    rule.observed_values.merge(sub_rule.observed_values)
                else:
                    rule.pass_count = sub_rule.pass_count
                    rule.observed_values = sub_rule.observed_values.copy()

        self._rules = merged
        self.logger.info(
            f"Merged {len(sub_evaluators)} evaluators into {len(merged)} rules "
            f"({len(summable)} summable)"
        )

    def format_counters(self) -> str:
        """
        Diagnostic dump of every rule's observed values.

        One block per rule headed by its label, one line per distinct value,
        most frequent first.
        """
        lines: List[str] = []
        for rule in self._rules.values():
            lines.append("")
            lines.append(rule.label)
            for value, count in rule.observed_values.descending_count():
                lines.append(f"  value: {value}, count: {count}")
        return "\n".join(lines) + "\n"


def _importance_prefix(importance: int) -> str:
    """Exclamation markers for important rules, e.g. 2 -> "!! "."""
    if importance <= 0:
        return ""
    return "!" * importance + " "
