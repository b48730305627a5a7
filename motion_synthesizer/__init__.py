"""
Motion Synthesizer Package

Interpolates ground-truth tracker poses at the timestamps of another,
typically denser, CSV data stream.

Processing Chain:
    tracker CSV → TrackerReader → MotionSynthesizer window
    reference CSV → sec,usec → MotionSynthesizer.evaluate → output CSV

Conventions:
    - Timestamps: integer seconds plus integer microseconds
    - Translation: linearly interpolated
    - Rotation: quaternion (w, x, y, z), spherically interpolated along the shortest arc
    - Queries must be presented in non-decreasing time order

Supported Formats:
    - Tracker CSV: sec,usec,x,y,z,qw,qx,qy,qz
    - Reference CSV: sec,usec followed by any passthrough columns
"""

from .config import SynthesizerConfig
from .csv_fields import get_clean_line, get_fields, strip_quotes, strip_quotes_all
from .time_value import TimeValue, microseconds_difference, parse_time_value
from .headers import HeaderSpec, HeaderMismatch, validate_header
from .synthesizer import (
    InterpolationResult,
    MotionSynthesizer,
    Pose,
    SetupError,
    SetupResult,
    Status,
    TrackerReader,
    TrackerRecord,
    create_synthesizer,
)
from .driver import ProcessingSummary, SynthesizerInputError, synthesize, synthesize_files

__version__ = "1.0.0"
__all__ = [
    "SynthesizerConfig",
    "get_clean_line",
    "get_fields",
    "strip_quotes",
    "strip_quotes_all",
    "TimeValue",
    "microseconds_difference",
    "parse_time_value",
    "HeaderSpec",
    "HeaderMismatch",
    "validate_header",
    "InterpolationResult",
    "MotionSynthesizer",
    "Pose",
    "SetupError",
    "SetupResult",
    "Status",
    "TrackerReader",
    "TrackerRecord",
    "create_synthesizer",
    "ProcessingSummary",
    "SynthesizerInputError",
    "synthesize",
    "synthesize_files",
]
