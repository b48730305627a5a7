"""
Tests for the timestamp representation.
"""

import pytest

from motion_synthesizer.time_value import (
    TimeValue,
    microseconds_difference,
    parse_time_value,
)


@pytest.fixture
def times():
    """A few timestamps in increasing order."""
    return [
        TimeValue(-1, 999999),
        TimeValue(0, 0),
        TimeValue(0, 1),
        TimeValue(0, 999999),
        TimeValue(1, 0),
        TimeValue(1_700_000_000, 500000),
    ]


class TestOrdering:
    """Tests for the total order on TimeValue."""

    def test_sorted_order(self, times):
        for earlier, later in zip(times, times[1:]):
            assert earlier < later
            assert not later < earlier
            assert earlier != later

    def test_seconds_compared_first(self):
        assert TimeValue(1, 0) > TimeValue(0, 999999)

    def test_equality(self):
        assert TimeValue(3, 250) == TimeValue(3, 250)
        assert not TimeValue(3, 250) < TimeValue(3, 250)

    def test_str(self):
        assert str(TimeValue(12, 345)) == "12:345"


class TestDifference:
    """Tests for microsecond differences."""

    def test_zero_for_same_time(self, times):
        for t in times:
            assert microseconds_difference(t, t) == 0

    def test_antisymmetric(self, times):
        for a in times:
            for b in times:
                assert microseconds_difference(a, b) == -microseconds_difference(b, a)

    def test_across_second_boundary(self):
        assert microseconds_difference(TimeValue(1, 100), TimeValue(0, 999900)) == 200

    def test_long_span_is_exact(self):
        """Spans far beyond 2**31 microseconds do not wrap."""
        a = TimeValue(1_700_000_000, 0)
        b = TimeValue(0, 0)
        assert microseconds_difference(a, b) == 1_700_000_000 * 1_000_000


class TestParse:
    """Tests for parsing timestamp columns."""

    def test_parse(self):
        assert parse_time_value("5", "250000") == TimeValue(5, 250000)

    def test_parse_whitespace(self):
        assert parse_time_value(" 5", "7 ") == TimeValue(5, 7)

    @pytest.mark.parametrize("sec,usec", [("x", "0"), ("1", ""), ("1.5", "0")])
    def test_parse_invalid(self, sec, usec):
        with pytest.raises(ValueError):
            parse_time_value(sec, usec)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
