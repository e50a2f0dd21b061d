"""
Timeline Reporter
=================

Converts source frame indices to elapsed time for human-readable logs.

Times are whole seconds computed with integer arithmetic on the rational
frame rate (seconds = index * den // num), then split into hours,
minutes and seconds.
"""

import logging
from dataclasses import dataclass
from fractions import Fraction

from ebb.config import RESULT
from ebb.engine.accumulator import SkipRange


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Timestamp:
    """Elapsed time as hours, minutes, seconds."""

    hours: int
    minutes: int
    seconds: int

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def frame_to_timestamp(index: int, frame_rate: Fraction) -> Timestamp:
    """
    Convert a frame index to elapsed time.

    Args:
        index: Frame index (non-negative)
        frame_rate: Frames per second as numerator/denominator

    Returns:
        Timestamp rounded down to whole seconds
    """
    total = index * frame_rate.denominator // frame_rate.numerator
    hours, remainder = divmod(total, 60 * 60)
    minutes, seconds = divmod(remainder, 60)
    return Timestamp(hours=hours, minutes=minutes, seconds=seconds)


class TimelineReporter:
    """
    Logs skipped spans and the run summary with elapsed times.

    The reporter keeps no state between calls besides the frame rate.
    """

    def __init__(self, frame_rate: Fraction) -> None:
        if frame_rate <= 0:
            raise ValueError("frame_rate must be positive")
        self.frame_rate = frame_rate

    def timestamp(self, index: int) -> Timestamp:
        return frame_to_timestamp(index, self.frame_rate)

    def describe_skip(self, span: SkipRange) -> str:
        """Render a skipped span; the end time is where playback resumes."""
        start = self.timestamp(span.first)
        end = self.timestamp(span.last + 1)
        return f"Skip frames {span.first} to {span.last} ({start} - {end})"

    def describe_summary(self, frames_read: int, frames_emitted: int) -> str:
        """Render the frames read --> frames emitted summary."""
        before = self.timestamp(frames_read)
        after = self.timestamp(frames_emitted)
        return (
            f"Frames {frames_read} --> {frames_emitted} "
            f"({before} --> {after})"
        )

    def report_skip(self, span: SkipRange) -> None:
        logger.info(self.describe_skip(span))

    def report_summary(self, frames_read: int, frames_emitted: int) -> None:
        logger.log(RESULT, self.describe_summary(frames_read, frames_emitted))
