"""
Tests for FrequencyCounter.

Validates that:
1. Counts and totals track every increment
2. merge() adds key-wise and leaves the other counter alone
3. Ordered iterators are snapshots with a deterministic tie-break
4. CSV export writes a header and one row per key
"""

import csv

import pytest

from fieldgrade.counter import CounterOrder, FrequencyCounter
from fieldgrade.utils.helpers import NULL_SENTINEL


class TestCounting:
    """Test increment and the derived totals."""

    def test_increment_n_times_counts_n(self):
        """increment(k) n times gives get_count(k) == n."""
        counter = FrequencyCounter()
        for _ in range(7):
            counter.increment("K1ABC")

        assert counter.get_count("K1ABC") == 7

    def test_value_total_is_sum_of_counts(self):
        counter = FrequencyCounter()
        counter.increment("a", 3)
        counter.increment("b")
        counter.increment("c", 2)

        assert counter.value_total == 6
        assert counter.key_count == 3
        assert len(counter) == 3

    def test_absent_key_has_no_count(self):
        """A never-observed key is absent, not zero."""
        counter = FrequencyCounter()
        counter.increment("a")

        assert counter.get_count("b") is None
        assert "b" not in counter
        assert "a" in counter

    def test_negative_amount_rejected(self):
        counter = FrequencyCounter()
        with pytest.raises(ValueError, match="must not be negative"):
            counter.increment("a", -1)

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_null_safe_maps_to_sentinel(self, key):
        counter = FrequencyCounter()
        counter.increment_null_safe(key)

        assert counter.get_count(NULL_SENTINEL) == 1
        assert counter.key_count == 1

    def test_null_safe_keeps_real_values(self):
        counter = FrequencyCounter()
        counter.increment_null_safe(" K1ABC ")

        assert counter.get_count(" K1ABC ") == 1


class TestMerge:
    """Test merge() semantics."""

    def test_merge_adds_keywise(self):
        a = FrequencyCounter()
        a.increment("x", 2)
        a.increment("y")
        b = FrequencyCounter()
        b.increment("y", 4)
        b.increment("z")

        a.merge(b)

        assert a.get_count("x") == 2
        assert a.get_count("y") == 5
        assert a.get_count("z") == 1
        assert a.value_total == 8

    def test_merge_does_not_modify_other(self):
        a = FrequencyCounter()
        a.increment("x")
        b = FrequencyCounter()
        b.increment("x", 3)

        a.merge(b)

        assert b.get_count("x") == 3
        assert b.key_count == 1

    def test_merge_none_is_ignored(self):
        a = FrequencyCounter()
        a.increment("x")
        a.merge(None)

        assert a.items() == [("x", 1)]

    def test_copy_is_independent(self):
        a = FrequencyCounter("calls")
        a.increment("x")
        b = a.copy()
        b.increment("x")

        assert a.get_count("x") == 1
        assert b.get_count("x") == 2
        assert b.name == "calls"


class TestOrdering:
    """Test ordered snapshot iterators."""

    @pytest.fixture
    def counter(self):
        counter = FrequencyCounter()
        for key, count in [("c", 2), ("a", 2), ("b", 5), ("d", 1)]:
            counter.increment(key, count)
        return counter

    def test_descending_count_never_increases(self, counter):
        counts = [count for _, count in counter.descending_count()]
        assert all(prev >= cur for prev, cur in zip(counts, counts[1:]))

    def test_ascending_count_breaks_ties_by_key(self, counter):
        assert list(counter.ascending_count()) == [("d", 1), ("a", 2), ("c", 2), ("b", 5)]

    def test_descending_count_is_reverse_of_ascending(self, counter):
        assert list(counter.descending_count()) == list(reversed(list(counter.ascending_count())))

    def test_key_orders(self, counter):
        assert [k for k, _ in counter.ascending_key()] == ["a", "b", "c", "d"]
        assert [k for k, _ in counter.descending_key()] == ["d", "c", "b", "a"]

    def test_iterators_are_snapshots(self, counter):
        """Mutating during iteration affects neither the iterator nor raises."""
        seen = []
        for key, count in counter.descending_count():
            counter.increment("zz")
            seen.append(key)

        assert seen == ["b", "c", "a", "d"]
        assert counter.get_count("zz") == 4

    def test_get_iterator_accepts_enum_and_value(self, counter):
        assert list(counter.get_iterator(CounterOrder.ASCENDING_KEY)) == list(counter.ascending_key())
        assert list(counter.get_iterator("descending_count")) == list(counter.descending_count())

    def test_mixed_key_types_still_sort(self):
        counter = FrequencyCounter()
        counter.increment(3)
        counter.increment("three")

        assert [k for k, _ in counter.ascending_key()] == [3, "three"]

    def test_counters_sort_by_name(self):
        counters = [FrequencyCounter("b"), FrequencyCounter("a"), FrequencyCounter("c")]
        assert [c.name for c in sorted(counters)] == ["a", "b", "c"]

    def test_name_order_and_count_equality_are_independent(self):
        busy = FrequencyCounter("z")
        busy.increment("K1ABC", 5)
        quiet = FrequencyCounter("a")
        quiet.increment("K1ABC", 5)

        assert sorted([busy, quiet])[0] is quiet
        assert busy == quiet
        assert not busy < quiet and quiet < busy

        same_name = FrequencyCounter("z")
        assert not busy < same_name and not same_name < busy
        assert busy != same_name


class TestWrite:
    """Test CSV export."""

    def test_write_header_and_rows(self, tmp_path):
        counter = FrequencyCounter()
        counter.increment("K1ABC", 3)
        counter.increment("N0CALL")

        path = counter.write(tmp_path / "calls.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows == [["Name", "Count"], ["K1ABC", "3"], ["N0CALL", "1"]]

    def test_write_in_key_order(self, tmp_path):
        counter = FrequencyCounter()
        counter.increment("b", 9)
        counter.increment("a")

        path = counter.write(str(tmp_path / "calls.csv"), CounterOrder.ASCENDING_KEY)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines == ["Name,Count", "a,1", "b,9"]
