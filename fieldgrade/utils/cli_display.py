"""
CLI Display Helpers - Rich tables for grading results.

Stateless and CLI-only: builds renderables from evaluator state, never
mutates it.

Usage:
    from fieldgrade.utils.cli_display import counter_table
    console.print(counter_table("Call sign", rule.observed_values))
"""

from typing import List, Optional

from rich.table import Table
from rich.text import Text

from ..counter import CounterOrder, FrequencyCounter


def counter_table(
    title: str,
    counter: FrequencyCounter,
    order: CounterOrder = CounterOrder.DESCENDING_COUNT,
    max_rows: Optional[int] = None,
) -> Table:
    """
    Table of observed values and their counts.

    Args:
        title: Table title (usually the rule label)
        counter: Counter to display
        order: Row order (default: most frequent first)
        max_rows: Truncate after this many rows (None: all)
    """
    total = counter.value_total
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Value", overflow="fold")
    table.add_column("Count", justify="right", width=8)
    table.add_column("Share", justify="right", width=8)

    for index, (value, count) in enumerate(counter.get_iterator(order)):
        if max_rows is not None and index >= max_rows:
            table.add_row(Text("...", style="dim"), "", "")
            break
        share = f"{100.0 * count / total:.1f}%" if total else "-"
        table.add_row(str(value), str(count), share)

    table.caption = f"{counter.key_count} distinct, {total} total"
    return table


def explanations_text(explanations: List[str]) -> Text:
    """Explanation list as styled text, one per line; important ones in red."""
    text = Text()
    if not explanations:
        text.append("no problems found", style="green")
        return text

    for index, explanation in enumerate(explanations):
        if index:
            text.append("\n")
        style = "bold red" if explanation.startswith("!") else "yellow"
        text.append(f"- {explanation}", style=style)
    return text


def summary_table(title: str, rows: List[tuple]) -> Table:
    """
    Per-entry pass/fail summary.

    Args:
        title: Table title
        rows: (label, pass_count, total_count) tuples
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Field", overflow="fold")
    table.add_column("Correct", justify="right", width=9)
    table.add_column("Incorrect", justify="right", width=9)
    table.add_column("Pass %", justify="right", width=8)

    for label, pass_count, total_count in rows:
        fail_count = total_count - pass_count
        percent = f"{100.0 * pass_count / total_count:.1f}%" if total_count else "-"
        style = "green" if fail_count == 0 else ("red" if pass_count == 0 else "yellow")
        table.add_row(label, str(pass_count), str(fail_count), Text(percent, style=style))

    return table
