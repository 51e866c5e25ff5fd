"""
Grader - grades submissions against a rule book.

Thin glue between a RuleBook and the two engines: builds one RuleEvaluator
and one AssertionEngine per run, then per submission resets both, tests every
rule and entry, and collects points and explanations.

Usage:
    from fieldgrade.config import load_rule_book
    from fieldgrade.grading import Grader

    grader = Grader(load_rule_book("eto-2024-03-21"))
    for submission in submissions:
        result = grader.grade(submission)
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .assertions import AssertionEngine
from .config.rulebook import ENTRY_TESTS, RuleBook, entry_test
from .rules import RuleEvaluator
from .utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT, parse_date_time
from .utils.logger import get_logger

DEFAULT_ID_FIELD = "id"

EntryTest = Callable[[AssertionEngine, str, Any, str], int]

# Entry test name -> call on the engine; datetime tests get a parsed value
_ENTRY_DISPATCH: Dict[str, EntryTest] = {
    "default": lambda engine, key, value, fmt: engine.test(key, value),
    "ends_with": lambda engine, key, value, fmt: engine.test_ends_with(key, value),
    "ends_with_ignore_case": lambda engine, key, value, fmt: engine.test_ends_with(
        key, value, case_insensitive=True
    ),
    "present": lambda engine, key, value, fmt: engine.test_if_present(key, value),
    "empty": lambda engine, key, value, fmt: engine.test_if_empty(key, value),
    "set": lambda engine, key, value, fmt: engine.test_set_of_strings(key, value),
    "dt_equals": lambda engine, key, value, fmt: engine.test_dt_equals(key, value, fmt),
    "on_or_after": lambda engine, key, value, fmt: engine.test_on_or_after(key, value, fmt),
    "on_or_before": lambda engine, key, value, fmt: engine.test_on_or_before(key, value, fmt),
}

if set(_ENTRY_DISPATCH) != set(ENTRY_TESTS):
    raise ImportError(
        f"Entry dispatch out of sync with ENTRY_TESTS: {sorted(set(ENTRY_TESTS) ^ set(_ENTRY_DISPATCH))}"
    )


@dataclass
class SubmissionResult:
    """
    Outcome of grading one submission.

    Attributes:
        id: Submission identifier
        points: Rule points plus entry points
        explanations: Rule failures first, then entry failures
    """

    id: str
    points: int = 0
    explanations: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.explanations

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def _field_value(submission: Mapping[str, Any], key: str) -> Optional[str]:
    value = submission.get(key)
    if value is None:
        return None
    return str(value)


class Grader:
    """
    Grades submissions (field -> value mappings) against one rule book.

    Statistics accumulate across grade() calls; read them from evaluator
    and engine once the run is over.
    """

    def __init__(
        self,
        rule_book: RuleBook,
        date_time_format: str = DEFAULT_DATE_TIME_FORMAT,
        id_field: str = DEFAULT_ID_FIELD,
    ):
        self.logger = get_logger()
        self.rule_book = rule_book
        self.date_time_format = date_time_format
        self.id_field = id_field
        self.evaluator: RuleEvaluator = rule_book.build_evaluator(date_time_format)
        self.engine: AssertionEngine = rule_book.build_assertion_engine(date_time_format)
        self._entry_tests = {
            key: entry_test(definition) for key, definition in rule_book.entries.items()
        }
        self.graded = 0

    def grade(self, submission: Mapping[str, Any]) -> SubmissionResult:
        """
        Grade one submission.

        Missing fields are tested as None. Datetime entries parse the value
        with the run's format first; a value that does not parse is tested
        as None.
        """
        self.graded += 1
        submission_id = _field_value(submission, self.id_field) or f"#{self.graded}"

        self.evaluator.reset()
        self.engine.reset()

        for key in self.evaluator.keys():
            self.evaluator.test(key, _field_value(submission, key))

        for key, test_name in self._entry_tests.items():
            value: Any = _field_value(submission, key)
            if ENTRY_TESTS[test_name] == "datetime":
                value = parse_date_time(value.strip(), self.date_time_format) if value else None
            _ENTRY_DISPATCH[test_name](self.engine, key, value, self.date_time_format)

        result = SubmissionResult(
            id=submission_id,
            points=self.evaluator.points + self.engine.points,
            explanations=list(self.evaluator.explanations) + list(self.engine.explanations),
        )
        self.logger.info(
            f"Graded {submission_id}: {result.points} pts, {len(result.explanations)} problems"
        )
        return result

    def grade_all(self, submissions: Iterable[Mapping[str, Any]]) -> List[SubmissionResult]:
        """Grade submissions in order."""
        return [self.grade(submission) for submission in submissions]

    def summary_rows(self) -> List[Tuple[str, int, int]]:
        """(label, pass_count, total_count) per entry, in registration order."""
        rows = []
        for key in self.engine:
            entry = self.engine.get(key)
            rows.append((entry.label, entry.pass_count, entry.total_count))
        return rows
