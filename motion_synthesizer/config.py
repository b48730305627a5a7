"""
Configuration module for the motion synthesizer.

Handles loading and saving of configuration from YAML files. Every setting
has a default, so a config file only needs the keys it changes.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging

from .headers import HeaderSpec
from .synthesizer import FIELDS_IN_TRACKER_DATA

logger = logging.getLogger(__name__)

TIMESTAMP_HEADERS: Tuple[str, ...] = ("sec", "usec")
TRACKER_HEADERS: Tuple[str, ...] = TIMESTAMP_HEADERS + ("x", "y", "z", "qw", "qx", "qy", "qz")
OUTPUT_COLUMNS: Tuple[str, ...] = ("refx", "refy", "refz", "refqw", "refqx", "refqy", "refqz")
DEFAULT_OUTPUT_PATH = "outData.csv"


def _tracker_spec() -> HeaderSpec:
    return HeaderSpec(TRACKER_HEADERS, "tracker data")


def _timestamp_spec() -> HeaderSpec:
    return HeaderSpec(TIMESTAMP_HEADERS, "time reference data")


@dataclass
class SynthesizerConfig:
    """
    Settings for a synthesis run.

    Attributes:
        tracker_headers: Columns the tracker file header must match exactly
        timestamp_headers: Leading columns the reference file header must match
        output_columns: Names of the synthesized columns prepended to each output row
        output_path: Where to write the output CSV
        float_format: %-style format for output numbers (e.g. "%.6g"); None uses repr
        quote_output_columns: Whether to double-quote the synthesized column names
    """
    tracker_headers: HeaderSpec = field(default_factory=_tracker_spec)
    timestamp_headers: HeaderSpec = field(default_factory=_timestamp_spec)
    output_columns: Tuple[str, ...] = OUTPUT_COLUMNS
    output_path: str = DEFAULT_OUTPUT_PATH
    float_format: Optional[str] = None
    quote_output_columns: bool = True

    def __post_init__(self):
        if len(self.tracker_headers) != FIELDS_IN_TRACKER_DATA:
            raise ValueError(
                f"tracker_headers must name {FIELDS_IN_TRACKER_DATA} columns, "
                f"got {len(self.tracker_headers)}"
            )
        if len(self.timestamp_headers) < len(TIMESTAMP_HEADERS):
            raise ValueError(
                f"timestamp_headers must name at least {len(TIMESTAMP_HEADERS)} columns, "
                f"got {len(self.timestamp_headers)}"
            )
        if len(self.output_columns) != len(OUTPUT_COLUMNS):
            raise ValueError(
                f"output_columns must name {len(OUTPUT_COLUMNS)} columns, "
                f"got {len(self.output_columns)}"
            )

    def format_number(self, value: float) -> str:
        """Render one output number."""
        if self.float_format is None:
            return repr(float(value))
        return self.float_format % value

    @classmethod
    def from_yaml(cls, config_path: str) -> "SynthesizerConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            SynthesizerConfig with loaded parameters

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the file is not a mapping or a column list has the wrong length

        Example YAML structure:
            tracker_headers: [sec, usec, x, y, z, qw, qx, qy, qz]
            timestamp_headers: [sec, usec]
            output_columns: [refx, refy, refz, refqw, refqx, refqy, refqz]
            output_path: "outData.csv"
            float_format: "%.6g"
            quote_output_columns: true
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        logger.info(f"Loading configuration from {config_path}")

        tracker_spec = _tracker_spec()
        if 'tracker_headers' in data:
            tracker_spec = HeaderSpec(tuple(data['tracker_headers']), tracker_spec.description)

        timestamp_spec = _timestamp_spec()
        if 'timestamp_headers' in data:
            timestamp_spec = HeaderSpec(tuple(data['timestamp_headers']), timestamp_spec.description)

        # Resolve output path relative to config file location
        output_path = Path(data.get('output_path', DEFAULT_OUTPUT_PATH))
        if not output_path.is_absolute():
            output_path = path.parent / output_path

        return cls(
            tracker_headers=tracker_spec,
            timestamp_headers=timestamp_spec,
            output_columns=tuple(data.get('output_columns', OUTPUT_COLUMNS)),
            output_path=str(output_path),
            float_format=data.get('float_format'),
            quote_output_columns=data.get('quote_output_columns', True),
        )

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {
            'tracker_headers': list(self.tracker_headers.names),
            'timestamp_headers': list(self.timestamp_headers.names),
            'output_columns': list(self.output_columns),
            'output_path': self.output_path,
            'float_format': self.float_format,
            'quote_output_columns': self.quote_output_columns,
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")
