"""
Tests for CSV field helpers.
"""

import pytest

from motion_synthesizer.csv_fields import (
    get_clean_line,
    get_fields,
    strip_quotes,
    strip_quotes_all,
)


class TestGetFields:
    """Tests for bounded comma splitting."""

    def test_all_fields(self):
        assert get_fields("a,b,c", 3) == ["a", "b", "c"]

    def test_skip_leading_field(self):
        assert get_fields("a,b,c", 2, 1) == ["b", "c"]

    def test_empty_middle_field(self):
        assert get_fields("a,,c", 3) == ["a", "", "c"]

    def test_fewer_fields_requested(self):
        """Only the requested number of fields are collected."""
        assert get_fields("sec,usec,label,extra", 2) == ["sec", "usec"]

    def test_last_field_takes_rest_of_line(self):
        assert get_fields("a,b", 5) == ["a", "b"]

    def test_start_past_end(self):
        assert get_fields("a,b", 2, 5) == []

    def test_start_on_trailing_comma(self):
        """A comma at the very end does not start a field."""
        assert get_fields("a,", 1, 1) == []

    def test_trailing_empty_field_dropped(self):
        assert get_fields("a,,", 3) == ["a", ""]

    def test_empty_line(self):
        assert get_fields("", 2) == []

    def test_short_line_reported_by_length(self):
        """Callers detect short rows by comparing the field count."""
        fields = get_fields("1,2,3", 9)
        assert len(fields) == 3

    def test_skip_multiple_fields(self):
        assert get_fields("0,1,2,3,4", 2, 3) == ["3", "4"]


class TestStripQuotes:
    """Tests for quote stripping."""

    def test_quoted(self):
        assert strip_quotes('"x"') == "x"

    def test_single_quote_char_unchanged(self):
        assert strip_quotes('"') == '"'

    def test_empty_quoted(self):
        assert strip_quotes('""') == ""

    def test_unquoted(self):
        assert strip_quotes("sec") == "sec"

    def test_only_leading_quote(self):
        assert strip_quotes('"sec') == '"sec'

    def test_only_one_pair_removed(self):
        assert strip_quotes('""x""') == '"x"'

    def test_strip_all(self):
        assert strip_quotes_all(['"sec"', "usec", '"x']) == ["sec", "usec", '"x']


class TestGetCleanLine:
    """Tests for line terminator removal."""

    @pytest.mark.parametrize("raw", ["a,b\n", "a,b\r\n", "a,b", "a,b\r"])
    def test_terminators_removed(self, raw):
        assert get_clean_line(raw) == "a,b"

    def test_inner_whitespace_kept(self):
        assert get_clean_line(" a, b \n") == " a, b "


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
