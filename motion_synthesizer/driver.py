"""
Batch driver: tracker CSV + reference CSV -> output CSV.

Workflow:
    1. Validate the tracker header (sec,usec,x,y,z,qw,qx,qy,qz)
    2. Validate the reference header (must start with sec,usec)
    3. Seed the synthesizer from the first two tracker rows
    4. For each reference row, in file order:
        a. Parse its timestamp
        b. Ask the synthesizer for the pose at that time
        c. Write the pose followed by the original reference line
    5. Stop when either file runs out or a reference row is malformed

Output Format:
    "refx","refy","refz","refqw","refqx","refqy","refqz",<reference header>
    x,y,z,qw,qx,qy,qz,<reference line>
"""

import json
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Tuple
from dataclasses import dataclass, asdict
import logging

from .config import SynthesizerConfig
from .csv_fields import COMMA_CHAR, DOUBLEQUOTE_CHAR, get_clean_line, get_fields
from .headers import HeaderMismatch, validate_header
from .synthesizer import MotionSynthesizer, Pose, Status, create_synthesizer
from .time_value import parse_time_value

logger = logging.getLogger(__name__)

STOP_REFERENCE_EXHAUSTED = "reference_exhausted"
STOP_TRACKER_EXHAUSTED = "tracker_exhausted"
STOP_MALFORMED_REFERENCE_ROW = "malformed_reference_row"


class SynthesizerInputError(ValueError):
    """Input files are unusable: bad header or too little tracker data."""

    def __init__(self, message: str, mismatch: Optional[HeaderMismatch] = None):
        super().__init__(message)
        self.mismatch = mismatch


@dataclass
class ProcessingSummary:
    """Counts from a synthesis run."""
    rows: int = 0  # Reference data rows processed
    written: int = 0  # Rows written to the output
    before_data: int = 0  # Rows earlier than the tracker data
    unexpected: int = 0  # Internal failures (should stay zero)
    tracker_records: int = 0  # Tracker records consumed
    stop_reason: str = STOP_REFERENCE_EXHAUSTED

    @property
    def ok(self) -> bool:
        return self.unexpected == 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data['ok'] = self.ok
        return data

    def save_json(self, output_path: str) -> None:
        """Save the summary to a JSON file."""
        with open(output_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Summary saved to {output_path}")


def _read_header(lines: Iterator[str]) -> str:
    try:
        return get_clean_line(next(lines))
    except StopIteration:
        return ""


def prepare(
    tracker_lines: Iterable[str],
    reference_lines: Iterator[str],
    config: SynthesizerConfig,
) -> Tuple[MotionSynthesizer, str]:
    """
    Validate both headers and seed the synthesizer.

    Args:
        tracker_lines: Tracker file lines, header included
        reference_lines: Iterator over reference file lines, header included;
            left positioned at the first data row
        config: Run configuration

    Returns:
        (synthesizer, reference header line)

    Raises:
        SynthesizerInputError: on a header mismatch or too little tracker data
    """
    tracker_iter = iter(tracker_lines)
    mismatch = validate_header(_read_header(tracker_iter), config.tracker_headers)
    if mismatch is not None:
        raise SynthesizerInputError(str(mismatch), mismatch)

    reference_header = _read_header(reference_lines)
    mismatch = validate_header(reference_header, config.timestamp_headers)
    if mismatch is not None:
        raise SynthesizerInputError(str(mismatch), mismatch)
    logger.info(f"Reference header: {reference_header}")

    setup = create_synthesizer(tracker_iter)
    if not setup.ok:
        raise SynthesizerInputError(setup.error)

    return setup.synthesizer, reference_header


def format_header(reference_header: str, config: SynthesizerConfig) -> str:
    """Output header: synthesized column names, then the reference header."""
    if config.quote_output_columns:
        columns = [f"{DOUBLEQUOTE_CHAR}{c}{DOUBLEQUOTE_CHAR}" for c in config.output_columns]
    else:
        columns = list(config.output_columns)
    return COMMA_CHAR.join(columns + [reference_header])


def format_row(pose: Pose, data: str, config: SynthesizerConfig) -> str:
    """Output row: translation, rotation (w, x, y, z), then the reference line."""
    values = list(pose.translation) + list(pose.rotation)
    return COMMA_CHAR.join([config.format_number(v) for v in values] + [data])


def write_rows(
    synth: MotionSynthesizer,
    reference_lines: Iterator[str],
    output: TextIO,
    config: SynthesizerConfig,
) -> ProcessingSummary:
    """
    Interpolate a pose for each reference row and write the results.

    Args:
        synth: Seeded synthesizer
        reference_lines: Reference data rows (header already consumed)
        output: Text stream for the data rows
        config: Run configuration

    Returns:
        ProcessingSummary for the run
    """
    summary = ProcessingSummary()
    num_timestamp_fields = len(config.timestamp_headers)
    started_writing = False

    for raw in reference_lines:
        data = get_clean_line(raw)
        timestamp_fields = get_fields(data, num_timestamp_fields)
        if len(timestamp_fields) != num_timestamp_fields:
            logger.warning(
                f"Got only {len(timestamp_fields)} fields, wanted {num_timestamp_fields}. "
                f"Line was '{data}'"
            )
            summary.stop_reason = STOP_MALFORMED_REFERENCE_ROW
            break

        try:
            time = parse_time_value(timestamp_fields[0], timestamp_fields[1])
        except ValueError as e:
            logger.warning(f"Could not parse timestamp ({e}). Line was '{data}'")
            summary.stop_reason = STOP_MALFORMED_REFERENCE_ROW
            break

        summary.rows += 1
        result = synth.evaluate(time)

        if result.status is Status.BEFORE_DATA:
            logger.info(f"{time} not in [ {synth.start_time} , {synth.end_time} ]")
            summary.before_data += 1
        elif result.status is Status.INTERPOLATED:
            if not started_writing:
                logger.info("Starting to write data rows!")
                started_writing = True
            output.write(format_row(result.pose, data, config) + "\n")
            summary.written += 1
        elif result.status is Status.OUT_OF_DATA:
            logger.info("Out of data from the tracker.")
            summary.stop_reason = STOP_TRACKER_EXHAUSTED
            break
        else:
            logger.error(f"Unexpected interpolation failure at {time}")
            summary.unexpected += 1
    else:
        logger.info("Out of time ref data, all done.")

    summary.tracker_records = synth.records_read
    logger.info(f"Rows: {summary.rows}")
    return summary


def synthesize(
    tracker_lines: Iterable[str],
    reference_lines: Iterable[str],
    output: TextIO,
    config: Optional[SynthesizerConfig] = None,
) -> ProcessingSummary:
    """
    Run the whole pipeline over already-open streams.

    Raises:
        SynthesizerInputError: on a header mismatch or too little tracker data
    """
    config = config or SynthesizerConfig()
    reference_iter = iter(reference_lines)
    synth, reference_header = prepare(tracker_lines, reference_iter, config)

    output.write(format_header(reference_header, config) + "\n")
    return write_rows(synth, reference_iter, output, config)


def _open_input(filepath: str, description: str) -> TextIO:
    try:
        return open(filepath, 'r', newline='')
    except OSError as e:
        raise SynthesizerInputError(f"Could not open {description} file {filepath}: {e}") from e


def synthesize_files(
    tracker_path: str,
    reference_path: str,
    output_path: Optional[str] = None,
    config: Optional[SynthesizerConfig] = None,
) -> ProcessingSummary:
    """
    Run the pipeline on files.

    The output file is only created once both headers have been validated
    and the synthesizer has been seeded.

    Args:
        tracker_path: Tracker CSV
        reference_path: Reference CSV
        output_path: Output CSV (defaults to config.output_path)
        config: Run configuration (defaults to SynthesizerConfig())

    Returns:
        ProcessingSummary for the run

    Raises:
        FileNotFoundError: if an input file does not exist
        SynthesizerInputError: on a header mismatch or too little tracker data,
            or if an input file cannot be opened
    """
    config = config or SynthesizerConfig()
    output_path = output_path or config.output_path

    for description, filepath in (("Tracker data", tracker_path), ("Time reference data", reference_path)):
        if not Path(filepath).exists():
            raise FileNotFoundError(f"{description} file not found: {filepath}")

    with _open_input(tracker_path, "tracker data") as tracker_file, \
            _open_input(reference_path, "time reference data") as reference_file:
        reference_iter = iter(reference_file)
        synth, reference_header = prepare(tracker_file, reference_iter, config)

        with open(output_path, 'w', newline='') as output:
            output.write(format_header(reference_header, config) + "\n")
            summary = write_rows(synth, reference_iter, output, config)

    logger.info(f"Wrote {summary.written} rows to {output_path}")
    return summary
