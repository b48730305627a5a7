"""
CSV field helpers.

Comma-splitting utilities for the tracker and reference streams.

Fields are split on every comma; quotes are not interpreted, only stripped
on request. A bounded field count lets the caller pull the leading timestamp
columns off a reference row while the rest of the line passes through as-is.
"""

from typing import List

COMMA_CHAR = ','
DOUBLEQUOTE_CHAR = '"'


def get_clean_line(line: str) -> str:
    """Strip any trailing newline and carriage-return characters."""
    return line.rstrip('\r\n')


def _beginning_of_field(line: str, field: int) -> int:
    """
    Find the index where field number `field` starts.

    Returns -1 if the line does not have that many fields.
    """
    if field == 0:
        return 0

    pos = 0
    for _ in range(field):
        pos = line.find(COMMA_CHAR, pos + 1)
        if pos == -1:
            return -1

    # Must be able to step past the comma
    if pos + 1 < len(line):
        return pos + 1
    return -1


def get_fields(line: str, num_fields: int, first: int = 0) -> List[str]:
    """
    Split a line into at most `num_fields` comma-separated fields.

    Args:
        line: Line of text (already cleaned of line terminators)
        num_fields: Maximum number of fields to collect
        first: Number of leading fields to skip

    Returns:
        List of fields. The last field takes the rest of the line when no
        further comma is found. Empty if the line has no field `first`.
        Callers check the length against what they expect.
    """
    fields: List[str] = []
    begin = _beginning_of_field(line, first)
    if begin < 0:
        return fields

    n = len(line)
    while len(fields) < num_fields and begin < n:
        end = line.find(COMMA_CHAR, begin)
        if end == -1:
            # Rest of the line
            fields.append(line[begin:])
            break
        fields.append(line[begin:end])
        begin = end + 1

    return fields


def strip_quotes(field: str) -> str:
    """Remove one matching pair of surrounding double quotes, if present."""
    if (
        len(field) > 1
        and field[0] == DOUBLEQUOTE_CHAR
        and field[-1] == DOUBLEQUOTE_CHAR
    ):
        return field[1:-1]
    return field


def strip_quotes_all(fields: List[str]) -> List[str]:
    """Apply `strip_quotes` to every field."""
    return [strip_quotes(f) for f in fields]
