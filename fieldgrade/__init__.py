"""
fieldgrade - rule evaluation and statistics engine for exercise submissions.

Grading processors register rules (RuleEvaluator) or entries
(AssertionEngine) once per exercise, then per submission call reset(), one
test per field, and read back points and explanations.
"""

from .errors import ConfigurationError
from .counter import CounterOrder, FrequencyCounter
from .rules import Rule, RuleEvaluator, RuleType
from .assertions import AssertionEngine, Entry

__all__ = [
    "ConfigurationError",
    "CounterOrder",
    "FrequencyCounter",
    "Rule",
    "RuleEvaluator",
    "RuleType",
    "AssertionEngine",
    "Entry",
]

__version__ = "0.1.0"
