"""
Header validation for the tracker and reference CSV files.

The expected column names are passed in as a HeaderSpec (normally taken from
SynthesizerConfig) rather than read from module-level tables.
"""

from typing import List, Optional, Sequence
from dataclasses import dataclass
import logging

from .csv_fields import get_fields, strip_quotes_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderSpec:
    """
    Leading column names a file must start with.

    Attributes:
        names: Expected names, in order
        description: Human readable name of the file, used in messages
    """
    names: Sequence[str]
    description: str = "data"

    def __len__(self) -> int:
        return len(self.names)


@dataclass
class HeaderMismatch:
    """Why a header line did not match its HeaderSpec."""
    message: str
    column: Optional[int] = None
    expected: Optional[str] = None
    found: Optional[str] = None

    def __str__(self) -> str:
        return self.message


def read_header_fields(line: str, spec: HeaderSpec) -> List[str]:
    """Split the first `len(spec)` fields off a header line and strip their quotes."""
    return strip_quotes_all(get_fields(line, len(spec)))


def validate_header(line: str, spec: HeaderSpec) -> Optional[HeaderMismatch]:
    """
    Check that a header line begins with the expected column names.

    Names are compared case-sensitively after stripping surrounding quotes.
    Extra columns after the expected ones are allowed.

    Args:
        line: Header line (already cleaned of line terminators)
        spec: Expected column names

    Returns:
        None if the header matches, otherwise a HeaderMismatch
    """
    headers = read_header_fields(line, spec)
    if len(headers) != len(spec):
        return HeaderMismatch(
            f"Couldn't get {len(spec)} headings from the first line "
            f"of the {spec.description} file."
        )

    for i, (expected, found) in enumerate(zip(spec.names, headers)):
        logger.debug(f"Header: {found}")
        if found != expected:
            return HeaderMismatch(
                f"Heading mismatch in {spec.description} file, column {i}, "
                f"expected {expected}, found {found}",
                column=i,
                expected=expected,
                found=found,
            )

    return None
