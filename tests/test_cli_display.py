"""
Tests for rich display helpers.
"""

from rich.console import Console

from fieldgrade.counter import CounterOrder, FrequencyCounter
from fieldgrade.utils.cli_display import counter_table, explanations_text, summary_table


def _render(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestCounterTable:
    """Test counter_table."""

    def test_rows_and_caption(self):
        counter = FrequencyCounter()
        counter.increment("K1ABC", 3)
        counter.increment("N0CALL")

        table = counter_table("Call sign", counter)
        text = _render(table)

        assert table.row_count == 2
        assert "75.0%" in text
        assert "2 distinct, 4 total" in text
        assert text.index("K1ABC") < text.index("N0CALL")

    def test_max_rows_truncates(self):
        counter = FrequencyCounter()
        for key in "abcde":
            counter.increment(key)

        table = counter_table("Letters", counter, CounterOrder.ASCENDING_KEY, max_rows=2)

        assert table.row_count == 3
        assert "..." in _render(table)

    def test_empty_counter(self):
        assert "0 distinct, 0 total" in _render(counter_table("Nothing", FrequencyCounter()))


class TestExplanations:
    """Test explanations_text and summary_table."""

    def test_no_problems(self):
        assert explanations_text([]).plain == "no problems found"

    def test_one_line_per_explanation(self):
        text = explanations_text(["!! Call sign must be supplied", "Date(x) is not a valid Date/Time"])
        assert text.plain == "- !! Call sign must be supplied\n- Date(x) is not a valid Date/Time"

    def test_summary_table(self):
        table = summary_table("Entries", [("Org", 3, 4), ("Agency", 0, 0)])
        text = _render(table)

        assert table.row_count == 2
        assert "75.0%" in text
        assert "-" in text
