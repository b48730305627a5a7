"""
Timestamp representation.

Timestamps are carried as whole seconds plus a microsecond remainder, the
same split used by the `sec,usec` columns of the input files. Differences
are computed in integer microseconds.
"""

from dataclasses import dataclass

MICROSECONDS_PER_SECOND = 1_000_000


@dataclass(frozen=True, order=True)
class TimeValue:
    """
    A timestamp split into seconds and microseconds.

    Ordering compares seconds first, then microseconds. No normalization is
    performed: producers are expected to keep microseconds in [0, 1e6).
    """
    seconds: int
    microseconds: int

    def __str__(self) -> str:
        return f"{self.seconds}:{self.microseconds}"


def microseconds_difference(a: TimeValue, b: TimeValue) -> int:
    """
    Signed difference `a - b` in microseconds.

    Python integers do not overflow, so this is exact for any span.
    """
    return (
        (a.seconds - b.seconds) * MICROSECONDS_PER_SECOND
        + (a.microseconds - b.microseconds)
    )


def parse_time_value(sec_field: str, usec_field: str) -> TimeValue:
    """
    Build a TimeValue from the text of the `sec` and `usec` columns.

    Raises:
        ValueError: if either field is not an integer
    """
    return TimeValue(int(sec_field), int(usec_field))
