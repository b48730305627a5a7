"""
Sequential pose interpolation.

Tracker data (ground truth poses) is typically sparse compared to the data
it should be aligned with. The synthesizer walks a two-record window along
the tracker stream and, for each query time, returns the pose at that time:

    - Translation: linear interpolation between the bracketing records
    - Rotation: spherical linear interpolation (shortest arc) via scipy Slerp

Queries must arrive in non-decreasing time order. The tracker stream is read
lazily, one record each time the window slides, so arbitrarily long tracker
files are handled in constant memory.

Tracker Row Format:
    sec, usec, x, y, z, qw, qx, qy, qz

    - sec, usec: integer timestamp
    - x, y, z: translation
    - qw, qx, qy, qz: rotation quaternion (scalar first)
"""

import numpy as np
from scipy.spatial.transform import Rotation, Slerp
from typing import Iterable, Iterator, List, Optional, Tuple, Union
from dataclasses import dataclass
from enum import Enum
import logging

from .csv_fields import get_clean_line, get_fields
from .time_value import TimeValue, microseconds_difference, parse_time_value

logger = logging.getLogger(__name__)

FIELDS_IN_TRACKER_DATA = 9


class SetupError(RuntimeError):
    """Raised when the synthesizer cannot seed its initial window."""


@dataclass
class Pose:
    """
    A rigid-body pose.

    Attributes:
        translation: Position as a (3,) array
        rotation: Quaternion as a (4,) array in (w, x, y, z) order. Recorded
            quaternions are kept as read; interpolated ones carry the norm
            linearly interpolated between the two recorded ones.
    """
    translation: np.ndarray
    rotation: np.ndarray

    def to_scipy(self) -> Rotation:
        """Rotation as a scipy Rotation (scipy uses scalar-last order)."""
        w, x, y, z = self.rotation
        return Rotation.from_quat([x, y, z, w])


@dataclass
class TrackerRecord:
    """A single tracker sample with time and pose."""
    time: TimeValue
    pose: Pose


class Status(Enum):
    """Outcome of a single synthesizer query."""
    BEFORE_DATA = "before_data"
    INTERPOLATED = "interpolated"
    OUT_OF_DATA = "out_of_data"
    UNEXPECTED = "unexpected"


@dataclass
class InterpolationResult:
    """Status of a query plus the pose, when one was produced."""
    status: Status
    pose: Optional[Pose] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.INTERPOLATED


def parse_tracker_fields(fields: List[str]) -> TrackerRecord:
    """
    Convert the nine fields of a tracker row into a TrackerRecord.

    Raises:
        ValueError: if a field does not parse, is not finite, or the quaternion
            has zero norm
    """
    time = parse_time_value(fields[0], fields[1])
    translation = np.array([float(f) for f in fields[2:5]], dtype=np.float64)
    rotation = np.array([float(f) for f in fields[5:9]], dtype=np.float64)

    if not (np.all(np.isfinite(translation)) and np.all(np.isfinite(rotation))):
        raise ValueError("non-finite pose value")
    if not np.any(rotation):
        raise ValueError("zero-norm rotation quaternion")

    return TrackerRecord(time=time, pose=Pose(translation=translation, rotation=rotation))


class TrackerReader:
    """
    Reads tracker records one at a time from an iterable of text lines.

    The header line must already have been consumed. Any row that cannot be
    turned into a record ends the stream: `read` returns None for it just as
    it does at end of file.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self.rows_read = 0

    def read(self) -> Optional[TrackerRecord]:
        """Read the next record, or None if no further record is available."""
        try:
            raw = next(self._lines)
        except StopIteration:
            return None

        self.rows_read += 1
        line = get_clean_line(raw)
        if not line:
            logger.debug(f"Blank tracker row {self.rows_read}, treating as end of data")
            return None

        fields = get_fields(line, FIELDS_IN_TRACKER_DATA)
        if len(fields) != FIELDS_IN_TRACKER_DATA:
            logger.warning(
                f"Tracker row {self.rows_read} has {len(fields)} fields, "
                f"wanted {FIELDS_IN_TRACKER_DATA}: '{line}'"
            )
            return None

        try:
            return parse_tracker_fields(fields)
        except ValueError as e:
            logger.warning(f"Could not parse tracker row {self.rows_read} ({e}): '{line}'")
            return None

    def __iter__(self) -> Iterator[TrackerRecord]:
        while True:
            record = self.read()
            if record is None:
                return
            yield record


class MotionSynthesizer:
    """
    Interpolates tracker poses for a non-decreasing sequence of query times.

    Holds a window of two adjacent tracker records. A query past the end of
    the window slides it forward (possibly several times); once the tracker
    stream runs out the synthesizer is exhausted for good and every further
    query reports OUT_OF_DATA.

    Example usage:
        synth = MotionSynthesizer(tracker_lines)
        for time in query_times:
            result = synth.evaluate(time)
            if result.ok:
                use(result.pose)
    """

    def __init__(self, source: Union[TrackerReader, Iterable[str]]):
        """
        Seed the window from the first two tracker records.

        Args:
            source: TrackerReader, or lines of tracker data following the header

        Raises:
            SetupError: if either of the first two records cannot be read
        """
        if not isinstance(source, TrackerReader):
            source = TrackerReader(source)
        self._reader = source
        self._done = False
        self.records_read = 0

        start = self._read_record()
        if start is None:
            raise SetupError("Could not read the initial data row from the tracker data!")
        end = self._read_record()
        if end is None:
            raise SetupError("Could not read the second data row from the tracker data!")

        self._start = start
        self._end = end
        self._update_cached_interval_data()

        logger.debug(f"Synthesizer seeded with window [ {self.start_time} , {self.end_time} ]")

    @property
    def out_of_data(self) -> bool:
        return self._done

    @property
    def start_time(self) -> TimeValue:
        return self._start.time

    @property
    def end_time(self) -> TimeValue:
        return self._end.time

    def evaluate(self, time: TimeValue) -> InterpolationResult:
        """
        Get the pose at the given time.

        Times must be fed in non-decreasing order.

        Args:
            time: Query time

        Returns:
            InterpolationResult. Its pose is set only for INTERPOLATED; a
            query landing exactly on a tracker record gets that record's
            pose object unchanged.
        """
        if self._done:
            return InterpolationResult(Status.OUT_OF_DATA)

        if self._is_before_tracker_data(time):
            return InterpolationResult(Status.BEFORE_DATA)

        # Might need to be advanced several times
        while self._needs_advancing(time):
            if not self._advance():
                return InterpolationResult(Status.OUT_OF_DATA)

        pose = self._interpolate(time)
        if pose is None:
            return InterpolationResult(Status.UNEXPECTED)
        return InterpolationResult(Status.INTERPOLATED, pose)

    __call__ = evaluate

    def interpolate_all(
        self,
        times: Iterable[TimeValue],
    ) -> Iterator[Tuple[TimeValue, InterpolationResult]]:
        """
        Evaluate a sequence of query times.

        Yields (time, result) pairs and stops after the first OUT_OF_DATA.
        """
        for time in times:
            result = self.evaluate(time)
            yield time, result
            if result.status is Status.OUT_OF_DATA:
                return

    def _is_before_tracker_data(self, time: TimeValue) -> bool:
        return time < self._start.time

    def _needs_advancing(self, time: TimeValue) -> bool:
        return self._end.time < time

    def _read_record(self) -> Optional[TrackerRecord]:
        record = self._reader.read()
        if record is not None:
            self.records_read += 1
        return record

    def _advance(self) -> bool:
        """Slide the window by one record. False once the tracker data is exhausted."""
        record = self._read_record()
        if record is None:
            logger.debug(f"Tracker data exhausted after {self.records_read} records")
            self._done = True
            return False

        self._start = self._end
        self._end = record
        self._update_cached_interval_data()
        logger.debug(f"Advanced window to [ {self.start_time} , {self.end_time} ]")
        return True

    def _update_cached_interval_data(self) -> None:
        self._interval_duration = microseconds_difference(self._end.time, self._start.time)
        self._translation_delta = self._end.pose.translation - self._start.pose.translation
        self._start_norm = np.linalg.norm(self._start.pose.rotation)
        self._norm_delta = np.linalg.norm(self._end.pose.rotation) - self._start_norm
        key_rots = Rotation.concatenate([self._start.pose.to_scipy(), self._end.pose.to_scipy()])
        self._slerp = Slerp([0.0, 1.0], key_rots)

    def _interpolate(self, time: TimeValue) -> Optional[Pose]:
        # Exactly on a record: hand back the recorded pose untouched
        if time == self._start.time:
            return self._start.pose
        if time == self._end.time:
            return self._end.pose

        if self._is_before_tracker_data(time) or self._needs_advancing(time):
            # can't interpolate here
            return None

        since_start = microseconds_difference(time, self._start.time)
        if self._interval_duration == 0:
            t = 0.0
        else:
            t = since_start / self._interval_duration

        # Slerp the rotation
        x, y, z, w = self._slerp(t).as_quat()
        # scipy returns a unit quaternion
        rotation = np.array([w, x, y, z]) * (self._start_norm + t * self._norm_delta)

        # Lerp the translation
        translation = self._start.pose.translation + t * self._translation_delta

        return Pose(translation=translation, rotation=rotation)


@dataclass
class SetupResult:
    """Outcome of `create_synthesizer`: either a synthesizer or an error message."""
    synthesizer: Optional[MotionSynthesizer] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.synthesizer is not None


def create_synthesizer(source: Union[TrackerReader, Iterable[str]]) -> SetupResult:
    """
    Build a MotionSynthesizer without raising on setup failure.

    Args:
        source: TrackerReader, or lines of tracker data following the header

    Returns:
        SetupResult; check `ok` before using `synthesizer`
    """
    try:
        return SetupResult(synthesizer=MotionSynthesizer(source))
    except SetupError as e:
        return SetupResult(error=str(e))
