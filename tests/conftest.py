"""
Shared fixtures for fieldgrade tests.
"""

import pytest

from fieldgrade.assertions import AssertionEngine
from fieldgrade.config.config import Config
from fieldgrade.rules import Rule, RuleEvaluator, RuleType


RULE_BOOK_YAML = """\
id: eto-test
description: Test exercise
rules:
  callsign: {label: Call sign, type: REQUIRED, points: 10, importance: 2}
  date: {label: Date, type: DATE_TIME, points: 5}
  to: {label: To, type: SPECIFIED, placeholder: ETO-01, points: 3}
summable: [callsign]
entries:
  org: {label: "Organization should be #EV", expected: ETO, points: 2}
  agency: {label: Agency, expected: [ARES, RACES], points: 1}
  date: {label: Sent after start, expected: "2024-03-21 00:00", kind: datetime, test: on_or_after, points: 1}
"""


@pytest.fixture
def evaluator():
    """Evaluator with the two rules every submission carries."""
    ev = RuleEvaluator()
    ev.add_rule("callsign", Rule(label="Call sign", type=RuleType.REQUIRED, points=10))
    ev.add_rule("date", Rule(label="date", type=RuleType.DATE_TIME, points=5))
    return ev


@pytest.fixture
def engine():
    return AssertionEngine()


@pytest.fixture
def rule_book_file(tmp_path):
    """A valid rule book written to tmp_path/rules/eto-test.yml."""
    rules_dir = tmp_path / "rules"
    rules_dir.mkdir()
    path = rules_dir / "eto-test.yml"
    path.write_text(RULE_BOOK_YAML, encoding="utf-8")
    return path


@pytest.fixture
def fresh_config():
    """Drop the cached Config before and after the test."""
    Config._instance = None
    yield
    Config._instance = None
