"""
Tests for header validation.
"""

import pytest

from motion_synthesizer.config import TIMESTAMP_HEADERS, TRACKER_HEADERS
from motion_synthesizer.headers import HeaderSpec, validate_header


@pytest.fixture
def tracker_spec():
    return HeaderSpec(TRACKER_HEADERS, "tracker data")


@pytest.fixture
def timestamp_spec():
    return HeaderSpec(TIMESTAMP_HEADERS, "time reference data")


class TestTrackerHeader:
    """Tests against the nine tracker columns."""

    def test_plain(self, tracker_spec):
        assert validate_header("sec,usec,x,y,z,qw,qx,qy,qz", tracker_spec) is None

    def test_quoted(self, tracker_spec):
        line = '"sec","usec","x","y","z","qw","qx","qy","qz"'
        assert validate_header(line, tracker_spec) is None

    def test_wrong_order(self, tracker_spec):
        mismatch = validate_header("sec,usec,x,y,z,qx,qy,qz,qw", tracker_spec)

        assert mismatch is not None
        assert mismatch.column == 5
        assert mismatch.expected == "qw"
        assert mismatch.found == "qx"
        assert "column 5" in str(mismatch)

    def test_case_sensitive(self, tracker_spec):
        mismatch = validate_header("SEC,usec,x,y,z,qw,qx,qy,qz", tracker_spec)
        assert mismatch.column == 0

    def test_too_few_columns(self, tracker_spec):
        mismatch = validate_header("sec,usec,x,y,z", tracker_spec)

        assert mismatch is not None
        assert mismatch.column is None
        assert "9 headings" in mismatch.message
        assert "tracker data" in mismatch.message

    def test_empty_line(self, tracker_spec):
        assert validate_header("", tracker_spec) is not None


class TestReferenceHeader:
    """Tests against the leading sec,usec columns."""

    def test_extra_columns_allowed(self, timestamp_spec):
        assert validate_header('sec,usec,"frame",label', timestamp_spec) is None

    def test_exactly_two_columns(self, timestamp_spec):
        assert validate_header('"sec","usec"', timestamp_spec) is None

    def test_mismatch(self, timestamp_spec):
        mismatch = validate_header("time,sec,usec", timestamp_spec)
        assert mismatch.column == 0
        assert mismatch.found == "time"

    def test_spec_length(self, timestamp_spec):
        assert len(timestamp_spec) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
