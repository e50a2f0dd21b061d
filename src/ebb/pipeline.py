"""
Excise Pipeline
===============

Main processing loop: source -> differ -> accumulator -> sequencer.

Processing is strictly sequential. Each decoded frame is written into the
"current" frame slot, compared against the retained frame in the
"previous" slot, and then retained (slots swapped), repeated, or dropped.
Whatever is in the "previous" slot after the decision is what gets
emitted.

Failure Policy:
    - Decode failure mid-stream: stop reading, keep output, mark truncated
    - Buffer allocation failure: fatal (FrameAllocationError)
    - Output write failure: fatal (ImageWriteError)
    - Splash duplication failure: injection stops early, run continues
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ebb.compare.differ import FrameDiffer
from ebb.config import Settings
from ebb.engine.accumulator import FrameDecision, SkipAccumulator, SkipRange
from ebb.engine.splash import SplashInjector
from ebb.engine.timeline import TimelineReporter
from ebb.output.sequencer import OutputSequencer
from ebb.output.sink import PngImageSink
from ebb.stream.buffer import FrameSlots
from ebb.stream.decoder import FrameSource, VideoDecodeError, VideoSource


logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """
    Outcome of one run.

    Attributes:
        frames_read: Source frames decoded
        frames_emitted: Output slots written by the main loop
        splash_frames: Output slots written by the splash injector
        skip_ranges: Dropped spans, in order
        truncated: True if decoding stopped on an error
        stop_reason: Decode error message when truncated
    """

    frames_read: int = 0
    frames_emitted: int = 0
    splash_frames: int = 0
    skip_ranges: List[SkipRange] = field(default_factory=list)
    truncated: bool = False
    stop_reason: Optional[str] = None

    @property
    def total_output(self) -> int:
        return self.splash_frames + self.frames_emitted

    @property
    def frames_dropped(self) -> int:
        return self.frames_read - self.frames_emitted

    def to_dict(self) -> dict:
        """Export result as dict."""
        return {
            "frames_read": self.frames_read,
            "frames_emitted": self.frames_emitted,
            "splash_frames": self.splash_frames,
            "frames_dropped": self.frames_dropped,
            "skip_ranges": [[r.first, r.last] for r in self.skip_ranges],
            "truncated": self.truncated,
            "stop_reason": self.stop_reason,
        }


class ExcisePipeline:
    """
    Removes boring bits from one frame source.

    Attributes:
        source: Frame producer
        sequencer: Output numbering and sink
        differ: Frame comparison
        slack_frames: Unchanged frames tolerated before dropping
        splash: Optional splash injector run before the main loop

    Example:
        pipeline = ExcisePipeline(source, sequencer, slack_frames=20)
        result = pipeline.run()
    """

    def __init__(
        self,
        source: FrameSource,
        sequencer: OutputSequencer,
        differ: Optional[FrameDiffer] = None,
        slack_frames: int = 0,
        splash: Optional[SplashInjector] = None,
    ) -> None:
        if slack_frames < 0:
            raise ValueError("slack_frames must be >= 0")

        self.source = source
        self.sequencer = sequencer
        self.differ = differ if differ is not None else FrameDiffer()
        self.slack_frames = slack_frames
        self.splash = splash

    @classmethod
    def from_settings(
        cls,
        source: FrameSource,
        sequencer: OutputSequencer,
        settings: Settings,
    ) -> "ExcisePipeline":
        """Build a pipeline with comparison, slack and splash from settings."""
        splash = None
        if settings.splash.path is not None:
            splash = SplashInjector(settings.splash.path, settings.splash.duration_cs)

        return cls(
            source=source,
            sequencer=sequencer,
            differ=FrameDiffer(
                border=settings.comparison.border,
                band_rows=settings.comparison.band_rows,
            ),
            slack_frames=settings.timing.slack_frames(source.info.frame_rate),
            splash=splash,
        )

    def run(self) -> RunResult:
        """
        Process the whole source.

        Returns:
            RunResult with frame counts and skipped spans

        Raises:
            FrameAllocationError: If the frame slots cannot be allocated
            ImageWriteError: If a kept frame cannot be written
        """
        info = self.source.info
        reporter = TimelineReporter(info.frame_rate)
        result = RunResult()

        slots = FrameSlots.allocate(info.width, info.height)
        accumulator = SkipAccumulator(self.slack_frames)

        logger.debug(
            f"Processing {info!r}: border={self.differ.border}px, "
            f"slack={self.slack_frames} frames"
        )

        if self.splash is not None:
            result.splash_frames = self.splash.inject(self.sequencer, info.frame_rate)

        while True:
            try:
                if not self.source.read_into(slots.current):
                    break
            except VideoDecodeError as e:
                logger.warning(
                    f"Warning: could not decode frame {accumulator.frames_seen}, "
                    f"stopping: {e}"
                )
                result.truncated = True
                result.stop_reason = str(e)
                break

            differs = accumulator.started and self.differ.differs(
                slots.previous, slots.current
            )
            step = accumulator.observe(differs)

            if step.decision is FrameDecision.RETAIN:
                slots.swap()

            if step.closed_range is not None:
                reporter.report_skip(step.closed_range)
                result.skip_ranges.append(step.closed_range)

            if step.decision.emits:
                self.sequencer.emit(slots.previous)
                result.frames_emitted += 1

        result.frames_read = accumulator.frames_seen

        open_range = accumulator.finish()
        if open_range is not None:
            reporter.report_skip(open_range)
            result.skip_ranges.append(open_range)

        reporter.report_summary(result.frames_read, result.total_output)
        return result


def run(
    input_path: Union[str, Path],
    output_base: Union[str, Path],
    settings: Settings,
) -> RunResult:
    """
    Excise boring bits from a video file into a numbered PNG sequence.

    Args:
        input_path: Video to read
        output_base: Output prefix; files are <prefix><8-digit index>.png
        settings: Loaded configuration

    Returns:
        RunResult of the main pipeline

    Raises:
        VideoOpenError: If the input cannot be opened
        EbbError: For any other fatal error (see ExcisePipeline.run)
    """
    parent = Path(str(output_base)).parent
    parent.mkdir(parents=True, exist_ok=True)

    sink = PngImageSink(duplicate_mode=settings.splash.mode)
    sequencer = OutputSequencer(output_base, sink)

    with VideoSource(input_path, settings.input.fallback_frame_rate) as source:
        pipeline = ExcisePipeline.from_settings(source, sequencer, settings)
        return pipeline.run()
