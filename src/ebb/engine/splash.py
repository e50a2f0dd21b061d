"""
Splash Injector
===============

Emits a leading run of identical output slots showing a still image.

The number of slots is the splash duration converted to frames at the
source frame rate. Each slot duplicates the splash file through the
output sequencer, so the splash is never re-encoded. A failure to
produce a slot ends injection early; the main run is unaffected.
"""

import logging
from fractions import Fraction
from pathlib import Path
from typing import Union

from ebb.config import centiseconds_to_frames
from ebb.output.sequencer import OutputSequencer
from ebb.output.sink import ImageWriteError


logger = logging.getLogger(__name__)


class SplashInjector:
    """
    Splash segment writer.

    Attributes:
        source: Existing still image to duplicate
        duration_cs: Splash duration in centiseconds
    """

    def __init__(self, source: Union[str, Path], duration_cs: int) -> None:
        if duration_cs < 0:
            raise ValueError("duration_cs must be >= 0")

        self.source = Path(source)
        self.duration_cs = duration_cs

    def frame_count(self, frame_rate: Fraction) -> int:
        """Number of splash slots for the given frame rate."""
        return centiseconds_to_frames(self.duration_cs, frame_rate)

    def inject(self, sequencer: OutputSequencer, frame_rate: Fraction) -> int:
        """
        Emit the splash slots ahead of any other output.

        A missing or unreadable splash image fails on the first slot, so
        injection yields 0 and the main run still goes ahead.

        Args:
            sequencer: Output sequencer; advanced by each slot produced
            frame_rate: Source frame rate

        Returns:
            Number of slots actually produced
        """
        wanted = self.frame_count(frame_rate)
        emitted = 0
        for _ in range(wanted):
            try:
                sequencer.emit_duplicate(self.source)
            except ImageWriteError as e:
                logger.warning(f"Could not copy splash image {self.source}: {e}")
                break
            emitted += 1

        logger.info(f"Splash frames: {emitted}")
        return emitted
