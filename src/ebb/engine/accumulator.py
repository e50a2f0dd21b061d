"""
Skip Accumulator
================

Sequential retain/repeat/drop decisions with a slack allowance.

The accumulator counts consecutive frames classified as unchanged. While
the count stays within the slack threshold the retained frame is emitted
again, preserving the pacing of short pauses. Once the count exceeds the
slack, further unchanged frames are dropped until something changes.

Transition Rules:
    First frame:            RETAIN (always), counter := 0
    Different frame:        RETAIN, close any dropped span, counter := 0
    Same, counter <= slack: REPEAT (emit the retained frame again)
    Same, counter > slack:  DROP

The accumulator holds no frames and does no I/O; the pipeline acts on the
returned SkipStep.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


class FrameDecision(str, Enum):
    """
    What to do with a newly decoded frame.

    Attributes:
        RETAIN: New content; becomes the retained frame and is emitted
        REPEAT: Unchanged, within slack; retained frame emitted again
        DROP: Unchanged beyond slack; nothing emitted
    """

    RETAIN = "RETAIN"
    REPEAT = "REPEAT"
    DROP = "DROP"

    @property
    def emits(self) -> bool:
        return self is not FrameDecision.DROP


@dataclass(frozen=True, slots=True)
class SkipRange:
    """Inclusive span of dropped source frames."""

    first: int
    last: int

    @property
    def count(self) -> int:
        return self.last - self.first + 1


@dataclass(frozen=True, slots=True)
class SkipStep:
    """Result of observing one frame."""

    index: int
    decision: FrameDecision
    closed_range: Optional[SkipRange] = None

    def __repr__(self) -> str:
        return f"SkipStep({self.index}, {self.decision.value})"


class SkipAccumulator:
    """
    Slack-tolerant skip state machine.

    Attributes:
        slack: Consecutive unchanged frames tolerated before dropping
        skip: Current count of consecutive unchanged frames
        frames_seen: Frames observed so far (index of the next frame)

    Example:
        accumulator = SkipAccumulator(slack=20)
        step = accumulator.observe(differs=True)
        if step.decision.emits:
            ...
    """

    def __init__(self, slack: int) -> None:
        if slack < 0:
            raise ValueError("slack must be >= 0")

        self.slack = slack
        self.skip = 0
        self.frames_seen = 0

    @property
    def started(self) -> bool:
        """True once the first frame has been observed."""
        return self.frames_seen > 0

    def observe(self, differs: bool) -> SkipStep:
        """
        Decide the fate of the next frame.

        Args:
            differs: Whether the frame differs from the retained frame.
                Ignored for the first frame, which is always retained.

        Returns:
            SkipStep with the decision and, on a RETAIN that ends a
            dropped span, the span that was skipped
        """
        index = self.frames_seen
        self.frames_seen += 1

        if index == 0 or differs:
            closed = self._dropped_span(end=index)
            self.skip = 0
            logger.debug(f"{index}: Different")
            return SkipStep(index, FrameDecision.RETAIN, closed)

        self.skip += 1
        logger.debug(f"{index}: Same")
        if self.skip > self.slack:
            return SkipStep(index, FrameDecision.DROP)
        return SkipStep(index, FrameDecision.REPEAT)

    def finish(self) -> Optional[SkipRange]:
        """Span still being dropped when the stream ends, if any."""
        return self._dropped_span(end=self.frames_seen)

    def _dropped_span(self, end: int) -> Optional[SkipRange]:
        """Dropped frames of the current run, which stops before `end`."""
        if self.skip <= self.slack:
            return None
        return SkipRange(first=end - (self.skip - self.slack), last=end - 1)
