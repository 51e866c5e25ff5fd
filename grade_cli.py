#!/usr/bin/env python3
"""
FIELDGRADE - Submission Grading CLI

This is a PURE SHELL - it only:
- Parses arguments
- Loads the rule book and submissions
- Prints results

NO grading logic lives here. All evaluation goes through fieldgrade.grading.

Usage:
  python grade_cli.py eto-2024-03-21 configs/submissions/eto-2024-03-21.yml
  python grade_cli.py configs/rules/eto-2024-03-21.yml subs.yml --counters
  python grade_cli.py eto-2024-03-21 subs.yml --json
"""

import argparse
import json
import sys
from pathlib import Path

import yaml
from rich.console import Console
from rich.panel import Panel

from fieldgrade.config import RuleBookNotFoundError, get_config, list_rule_books, load_rule_book
from fieldgrade.errors import ConfigurationError
from fieldgrade.grading import DEFAULT_ID_FIELD, Grader
from fieldgrade.utils.cli_display import counter_table, explanations_text, summary_table
from fieldgrade.utils.logger import setup_logger

console = Console()


def parse_cli_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments for grade_cli."""
    parser = argparse.ArgumentParser(
        description="FIELDGRADE - grade exercise submissions against a rule book",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python grade_cli.py eto-2024-03-21 subs.yml            # Rule book id from GRADER_RULES_DIR
  python grade_cli.py rules/my-book.yml subs.yml         # Rule book path
  python grade_cli.py eto-2024-03-21 subs.yml --counters # Also show observed values
  python grade_cli.py --list                             # List available rule books
        """
    )
    parser.add_argument("rulebook", nargs="?", help="Rule book id or path to a YAML file")
    parser.add_argument("submissions", nargs="?", help="YAML file holding a list of submissions")
    parser.add_argument("--counters", action="store_true", help="Print observed values per rule")
    parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")
    parser.add_argument("--id-field", default=DEFAULT_ID_FIELD, help="Submission field holding its id (default: id)")
    parser.add_argument("--rules-dir", help="Override rule books directory")
    parser.add_argument("--list", action="store_true", dest="list_books", help="List available rule books and exit")
    return parser.parse_args(argv)


def load_submissions(path: Path) -> list:
    """
    Load a YAML list of submissions.

    Raises:
        ConfigurationError: If the file is not a YAML list of mappings
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(None, f"Submissions file is not valid YAML ({path}): {e}") from e

    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ConfigurationError(None, f"Submissions file must be a list of mappings: {path}")
    return data


def handle_list(rules_dir: str, json_output: bool) -> int:
    """Handle --list."""
    ids = list_rule_books(rules_dir)
    if json_output:
        print(json.dumps({"rules_dir": rules_dir, "rule_books": ids}, indent=2))
        return 0
    if not ids:
        console.print(f"[yellow]No rule books found in {rules_dir}[/]")
        return 0
    for book_id in ids:
        console.print(f"  {book_id}")
    return 0


def handle_grade(args, rules_dir: str, date_time_format: str) -> int:
    """Grade every submission and print the results."""
    rule_book = load_rule_book(args.rulebook, rules_dir)
    submissions = load_submissions(Path(args.submissions))
    grader = Grader(rule_book, date_time_format=date_time_format, id_field=args.id_field)
    results = grader.grade_all(submissions)

    if args.json_output:
        output = {
            "rule_book": rule_book.id,
            "graded": len(results),
            "results": [result.to_dict() for result in results],
        }
        if args.counters:
            output["counters"] = {
                key: dict(grader.evaluator.get(key).observed_values.descending_count())
                for key in grader.evaluator.keys()
            }
        print(json.dumps(output, indent=2, default=str))
        return 0

    console.print(Panel(
        f"[bold cyan]GRADING[/]\n"
        f"Rule book: {rule_book.id} | Submissions: {len(results)}",
        border_style="cyan"
    ))

    for result in results:
        style = "green" if result.ok else "yellow"
        console.print(f"\n[bold {style}]{result.id}[/]: {result.points} points")
        console.print(explanations_text(result.explanations))

    if len(grader.engine):
        console.print()
        console.print(summary_table("Entries", grader.summary_rows()))

    if args.counters:
        for key in grader.evaluator.keys():
            rule = grader.evaluator.get(key)
            console.print()
            console.print(counter_table(rule.label, rule.observed_values))

    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_cli_args(argv)

    try:
        config = get_config()
    except ValueError as e:
        console.print(f"[bold red]Invalid configuration:[/] {e}")
        return 1

    setup_logger(config.log.log_dir, config.log.level)
    rules_dir = args.rules_dir or config.grading.rules_dir

    if args.list_books:
        return handle_list(rules_dir, args.json_output)

    if not args.rulebook or not args.submissions:
        console.print("[yellow]Usage: grade_cli.py RULEBOOK SUBMISSIONS [--counters] [--json][/]")
        return 1

    try:
        return handle_grade(args, rules_dir, config.grading.date_time_format)
    except RuleBookNotFoundError as e:
        console.print(f"[bold red]FAIL[/] {e}")
        return 1
    except ConfigurationError as e:
        console.print(f"[bold red]FAIL[/] {e}")
        return 1
    except FileNotFoundError as e:
        console.print(f"[bold red]FAIL[/] Submissions file not found: {e.filename}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
