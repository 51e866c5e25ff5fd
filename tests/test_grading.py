"""
Tests for Grader and the grade_cli shell.
"""

import json

import pytest

import grade_cli
from fieldgrade.config import RuleBook, load_rule_book
from fieldgrade.errors import ConfigurationError
from fieldgrade.grading import Grader, SubmissionResult


@pytest.fixture
def grader(rule_book_file):
    return Grader(load_rule_book(rule_book_file))


class TestGrader:
    """Test grading whole submissions."""

    def test_clean_submission(self, grader):
        result = grader.grade({
            "id": "KM6XYZ",
            "callsign": "KM6XYZ",
            "date": "2024-03-21 19:05",
            "to": "ETO-01",
            "org": "E.T.O.",
            "agency": "races",
        })

        assert result == SubmissionResult(id="KM6XYZ", points=10 + 5 + 3 + 2 + 1 + 1, explanations=[])
        assert result.ok

    def test_rule_failures_precede_entry_failures(self, grader):
        result = grader.grade({"callsign": "K1ABC", "date": "garbage", "to": "ETO-01", "org": "ARRL"})

        assert result.points == 10 + 3
        assert result.explanations == [
            "Date(garbage) is not a valid Date/Time",
            "Organization should be ETO, not ARRL",
            "Agency, not (null)",
            "Sent after start, not (null)",
        ]

    def test_missing_fields_are_null(self, grader):
        result = grader.grade({})

        assert result.id == "#1"
        assert result.points == 0
        assert result.explanations[0] == "!! Call sign must be supplied"
        assert grader.evaluator.get("callsign").observed_values.get_count("(null)") == 1

    def test_statistics_accumulate_across_submissions(self, grader):
        grader.grade_all([
            {"callsign": "K1ABC", "org": "ETO"},
            {"callsign": "K1ABC", "org": "ARRL"},
        ])

        assert grader.evaluator.get("callsign").pass_count == 2
        assert grader.evaluator.get("callsign").observed_values.get_count("K1ABC") == 2
        assert grader.engine.format("org") == (
            "Organization should be ETO, correct: 1(50.00%), incorrect: 1(50.00%)"
        )

    def test_summary_rows(self, grader):
        grader.grade({"org": "ETO", "agency": "CERT"})

        assert grader.summary_rows() == [
            ("Organization should be ETO", 1, 1),
            ("Agency", 0, 1),
            ("Sent after start", 0, 1),
        ]

    def test_datetime_entries_parse_value(self, grader):
        grader.grade({"date": "2024-03-20 23:59"})
        grader.grade({"date": " 2024-03-22 08:00 "})

        entry = grader.engine.get("date")
        assert entry.total_count == 2
        assert entry.pass_count == 1

    def test_suffix_and_presence_dispatch(self):
        book = RuleBook(id="b", entries={
            "file": {"label": "Attachment", "expected": ".XML", "test": "ends_with_ignore_case", "points": 1},
            "relay": {"label": "Relay station", "test": "empty", "points": 1},
            "note": {"label": "Note", "test": "present", "points": 1},
        })
        grader = Grader(book)

        assert grader.grade({"file": "msg.xml", "note": "hi"}).points == 3
        assert grader.grade({"file": "msg.txt", "relay": "W6ABC"}).explanations == [
            "Attachment, not msg.txt",
            "Relay station, not W6ABC",
            "Note, not (null)",
        ]

    def test_non_string_values_are_stringified(self):
        book = RuleBook(id="b", rules={"n": {"label": "Count", "type": "DOUBLE", "placeholder": "3", "points": 1}})
        assert Grader(book).grade({"n": 3}).points == 1

    def test_to_dict(self):
        result = SubmissionResult(id="a", points=2, explanations=["x"])
        assert result.to_dict() == {"id": "a", "points": 2, "explanations": ["x"]}


class TestCli:
    """Test grade_cli end to end."""

    @pytest.fixture
    def submissions_file(self, tmp_path):
        path = tmp_path / "subs.yml"
        path.write_text(
            "- id: A\n  callsign: K1ABC\n  date: '2024-03-21 10:00'\n  to: ETO-01\n"
            "  org: ETO\n  agency: ARES\n"
            "- id: B\n  callsign: ''\n",
            encoding="utf-8",
        )
        return path

    @pytest.fixture(autouse=True)
    def _isolated_config(self, fresh_config, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GRADER_LOG_LEVEL", "WARNING")
        monkeypatch.delenv("GRADER_LOG_DIR", raising=False)
        monkeypatch.delenv("GRADER_DATE_TIME_FORMAT", raising=False)
        monkeypatch.delenv("GRADER_RULES_DIR", raising=False)

    def test_json_output(self, rule_book_file, submissions_file, capsys):
        exit_code = grade_cli.main([str(rule_book_file), str(submissions_file), "--json", "--counters"])

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["rule_book"] == "eto-test"
        assert output["graded"] == 2
        assert output["results"][0] == {"id": "A", "points": 22, "explanations": []}
        assert output["results"][1]["id"] == "B"
        assert output["counters"]["callsign"] == {"K1ABC": 1, "(null)": 1}

    def test_rich_output(self, rule_book_file, submissions_file):
        exit_code = grade_cli.main([
            "eto-test", str(submissions_file), "--rules-dir", str(rule_book_file.parent), "--counters",
        ])
        assert exit_code == 0

    def test_missing_rule_book(self, submissions_file, tmp_path):
        assert grade_cli.main(["nope", str(submissions_file), "--rules-dir", str(tmp_path)]) == 1

    def test_missing_submissions(self, rule_book_file, tmp_path):
        assert grade_cli.main([str(rule_book_file), str(tmp_path / "missing.yml")]) == 1

    def test_submissions_must_be_a_list(self, rule_book_file, tmp_path):
        path = tmp_path / "subs.yml"
        path.write_text("callsign: K1ABC\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="list of mappings"):
            grade_cli.load_submissions(path)
        assert grade_cli.main([str(rule_book_file), str(path)]) == 1

    def test_non_numeric_points_fail_cleanly(self, submissions_file, tmp_path):
        path = tmp_path / "bad-points.yml"
        path.write_text("id: bad\nrules:\n  callsign: {label: Call sign, type: REQUIRED, points: lots}\n", encoding="utf-8")

        assert grade_cli.main([str(path), str(submissions_file)]) == 1

    def test_usage_without_arguments(self):
        assert grade_cli.main([]) == 1

    def test_list(self, rule_book_file, capsys):
        assert grade_cli.main(["--list", "--json", "--rules-dir", str(rule_book_file.parent)]) == 0
        assert json.loads(capsys.readouterr().out)["rule_books"] == ["eto-test"]
