"""
Rule Book Dataclass and Loader.

A rule book is the per-exercise definition of what gets graded:
- rules: field rules for a RuleEvaluator
- summable: rule keys whose statistics add up when evaluators merge
- entries: assertions for an AssertionEngine

Example YAML:
    id: eto-2024-03-21
    rules:
      callsign: {label: Call sign, type: REQUIRED, points: 10}
      date: {label: Date, type: DATE_TIME, points: 5, importance: 1}
    summable: [callsign]
    entries:
      org: {label: "Organization should be #EV", expected: ETO, points: 2}
      when: {label: Message date, expected: "2024-03-21 12:00", kind: datetime}
      agency: {label: Agency, expected: [ARES, RACES]}

Architecture Principle: Pure Data
- RuleBook is an immutable dataclass
- load_rule_book is a pure function (path -> RuleBook)
- Evaluators are built on demand, fresh each time
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from ..assertions import AssertionEngine
from ..errors import ConfigurationError
from ..rules import Rule, RuleEvaluator, resolve_rule_type
from ..utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT, parse_date_time


# Default rule books directory
DEFAULT_RULES_DIR = Path("configs/rules")

ENTRY_KINDS = ("string", "datetime", "set")
RULE_FIELDS = {"label", "type", "placeholder", "points", "importance"}
ENTRY_FIELDS = {"label", "expected", "points", "kind", "test"}

# Which AssertionEngine test grades an entry, and the kind it needs
ENTRY_TESTS: dict[str, str] = {
    "default": "string",
    "ends_with": "string",
    "ends_with_ignore_case": "string",
    "present": "string",
    "empty": "string",
    "set": "set",
    "dt_equals": "datetime",
    "on_or_after": "datetime",
    "on_or_before": "datetime",
}
DEFAULT_ENTRY_TEST = {"string": "default", "set": "set", "datetime": "dt_equals"}


class RuleBookNotFoundError(Exception):
    """Raised when a rule book cannot be found."""

    def __init__(self, book_id: str, searched_paths: list[Path] | None = None):
        self.book_id = book_id
        self.searched_paths = searched_paths or []
        paths_str = ", ".join(str(p) for p in self.searched_paths)
        super().__init__(f"Rule book '{book_id}' not found. Searched: {paths_str}")


@dataclass(frozen=True)
class RuleBook:
    """
    Grading definition for one exercise.

    Attributes:
        id: Exercise identifier
        rules: Field key -> rule definition dict (label, type, placeholder,
            points, importance)
        summable: Rule keys whose statistics add when merging
        entries: Entry key -> entry definition dict (label, expected,
            points, kind)
        description: Optional free text
    """

    id: str
    rules: dict[str, dict[str, Any]] = field(default_factory=dict)
    summable: tuple[str, ...] = field(default_factory=tuple)
    entries: dict[str, dict[str, Any]] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self):
        """Validate the rule book."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(None, f"Invalid rule book '{self.id}': {'; '.join(errors)}")

    def validate(self) -> list[str]:
        """Validate the structure of the rule book."""
        errors = []

        if not self.id:
            errors.append("id is required")
        if not self.rules and not self.entries:
            errors.append("at least one rule or entry is required")

        for key, definition in self.rules.items():
            if not isinstance(definition, dict):
                errors.append(f"rule '{key}' must be a mapping")
                continue
            if "label" not in definition or "type" not in definition:
                errors.append(f"rule '{key}' needs label and type")
            unknown = set(definition) - RULE_FIELDS
            if unknown:
                errors.append(f"rule '{key}' has unknown fields {sorted(unknown)}")
            errors.extend(_whole_number_errors("rule", key, definition, ("points", "importance")))

        for key in self.summable:
            if key not in self.rules:
                errors.append(f"summable key '{key}' is not a rule")

        for key, definition in self.entries.items():
            if not isinstance(definition, dict):
                errors.append(f"entry '{key}' must be a mapping")
                continue
            if "label" not in definition:
                errors.append(f"entry '{key}' needs a label")
            unknown = set(definition) - ENTRY_FIELDS
            if unknown:
                errors.append(f"entry '{key}' has unknown fields {sorted(unknown)}")
            errors.extend(_whole_number_errors("entry", key, definition, ("points",)))
            kind = entry_kind(definition)
            if kind not in ENTRY_KINDS:
                errors.append(f"entry '{key}' kind must be one of {list(ENTRY_KINDS)}")
                continue
            test = entry_test(definition)
            if test not in ENTRY_TESTS:
                errors.append(f"entry '{key}' test must be one of {sorted(ENTRY_TESTS)}")
            elif ENTRY_TESTS[test] != kind and test not in ("present", "empty"):
                errors.append(f"entry '{key}' test '{test}' needs kind '{ENTRY_TESTS[test]}'")
            elif definition.get("expected") is None and test not in ("present", "empty"):
                errors.append(f"entry '{key}' test '{test}' needs an expected value")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {"id": self.id}
        if self.description:
            d["description"] = self.description
        if self.rules:
            d["rules"] = self.rules
        if self.summable:
            d["summable"] = list(self.summable)
        if self.entries:
            d["entries"] = self.entries
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> RuleBook:
        """Create RuleBook from dictionary."""
        if not isinstance(d, dict):
            raise ConfigurationError(None, "Rule book must be a mapping")
        return cls(
            id=str(d.get("id", "")),
            rules=dict(d.get("rules") or {}),
            summable=tuple(d.get("summable") or ()),
            entries=dict(d.get("entries") or {}),
            description=d.get("description"),
        )

    def build_evaluator(self, date_time_format: str = DEFAULT_DATE_TIME_FORMAT) -> RuleEvaluator:
        """
        Build a fresh RuleEvaluator with every rule registered.

        Raises:
            ConfigurationError: If any rule violates its type's requirements
        """
        evaluator = RuleEvaluator(date_time_format=date_time_format)
        for key, definition in self.rules.items():
            placeholder = definition.get("placeholder")
            evaluator.add_rule(key, Rule(
                label=str(definition["label"]),
                type=resolve_rule_type(definition["type"], key),
                placeholder=str(placeholder) if placeholder is not None else None,
                points=int(definition.get("points", 0)),
                importance=int(definition.get("importance", 0)),
            ))
        return evaluator

    def build_assertion_engine(self, date_time_format: str = DEFAULT_DATE_TIME_FORMAT) -> AssertionEngine:
        """
        Build a fresh AssertionEngine with every entry registered.

        Raises:
            ConfigurationError: If a datetime entry's expected value does not parse
        """
        engine = AssertionEngine()
        for key, definition in self.entries.items():
            expected = _expected_value(key, definition, date_time_format)
            engine.add_entry(
                key,
                str(definition["label"]),
                expected,
                points=int(definition.get("points", 0)),
            )
        return engine


def _whole_number_errors(what: str, key: str, definition: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    """Fields that int() would reject when the evaluator or engine is built."""
    errors = []
    for name in fields:
        value = definition.get(name, 0)
        try:
            int(value)
        except (TypeError, ValueError):
            errors.append(f"{what} '{key}' {name} must be a whole number, not {value!r}")
    return errors


def entry_kind(definition: dict[str, Any]) -> str:
    """Declared kind of an entry; a list expected value is always a set."""
    if isinstance(definition.get("expected"), (list, tuple)):
        return "set"
    return definition.get("kind", "string")


def entry_test(definition: dict[str, Any]) -> str:
    """Name of the AssertionEngine test that grades an entry."""
    return definition.get("test", DEFAULT_ENTRY_TEST.get(entry_kind(definition), "default"))


def _expected_value(key: str, definition: dict[str, Any], date_time_format: str) -> Any:
    """Convert a YAML expected value to what the entry's tests compare against."""
    expected = definition.get("expected")
    kind = entry_kind(definition)

    if expected is None or isinstance(expected, datetime):
        return expected
    if kind == "set":
        items = expected if isinstance(expected, (list, tuple)) else str(expected).split(",")
        return tuple(str(item) for item in items)
    if kind == "datetime":
        parsed = parse_date_time(str(expected), date_time_format)
        if parsed is None:
            raise ConfigurationError(
                key, f"expected value '{expected}' does not match '{date_time_format}' for entry"
            )
        return parsed
    return str(expected)


def load_rule_book(
    book: str | Path,
    rules_dir: Path | str | None = None,
) -> RuleBook:
    """
    Load a RuleBook from a YAML file.

    Pure function: (path or id, dir) -> RuleBook

    Args:
        book: Path to a YAML file, or a rule book id looked up in rules_dir
        rules_dir: Directory containing rule book YAML files

    Returns:
        RuleBook dataclass instance

    Raises:
        RuleBookNotFoundError: If the file is not found
        ConfigurationError: If the YAML is empty or invalid
    """
    rules_dir = DEFAULT_RULES_DIR if rules_dir is None else Path(rules_dir)

    candidates = [Path(book)]
    if Path(book).suffix not in (".yml", ".yaml"):
        candidates = [rules_dir / f"{book}.yml", rules_dir / f"{book}.yaml"]

    yaml_path = next((p for p in candidates if p.exists()), None)
    if yaml_path is None:
        raise RuleBookNotFoundError(str(book), candidates)

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(None, f"Rule book is not valid YAML ({yaml_path}): {e}") from e

    if data is None:
        raise ConfigurationError(None, f"Rule book file is empty: {yaml_path}")

    return RuleBook.from_dict(data)


def list_rule_books(rules_dir: Path | str | None = None) -> list[str]:
    """
    List all available rule book ids.

    Args:
        rules_dir: Directory containing rule book YAML files

    Returns:
        Sorted rule book ids (filenames without extension)
    """
    rules_dir = DEFAULT_RULES_DIR if rules_dir is None else Path(rules_dir)
    if not rules_dir.exists():
        return []
    return sorted(
        p.stem for p in rules_dir.iterdir()
        if p.is_file() and p.suffix in (".yml", ".yaml")
    )
