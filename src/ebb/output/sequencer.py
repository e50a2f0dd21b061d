"""
Output Sequencer
================

Assigns contiguous output indices to kept frames.

The output counter is independent of the source frame counter: it only
advances when an image is actually produced, so dropped source frames
leave no gaps. Identifiers are the caller's base path followed by an
8-digit zero-padded index and ".png".
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np

from ebb.output.sink import ImageSink


logger = logging.getLogger(__name__)


PNG_SUFFIX = ".png"
INDEX_DIGITS = 8


@dataclass(frozen=True, slots=True)
class EmittedFrame:
    """One produced output slot."""

    index: int
    path: Path


class OutputSequencer:
    """
    Monotonic output numbering in front of an ImageSink.

    Attributes:
        base: Output path prefix, without a trailing ".png"
        sink: Image writer
        next_index: Index the next emission will receive

    Example:
        sequencer = OutputSequencer("out/frame.png", PngImageSink())
        emitted = sequencer.emit(frame)   # out/frame00000000.png
    """

    def __init__(self, base: Union[str, Path], sink: ImageSink, start_index: int = 0) -> None:
        if start_index < 0:
            raise ValueError("start_index must be >= 0")

        base = str(base)
        if len(base) > len(PNG_SUFFIX) and base.endswith(PNG_SUFFIX):
            base = base[: -len(PNG_SUFFIX)]

        self.base = base
        self.sink = sink
        self._next_index = start_index

    @property
    def next_index(self) -> int:
        return self._next_index

    def path_for(self, index: int) -> Path:
        """Identifier of the output slot with the given index."""
        return Path(f"{self.base}{index:0{INDEX_DIGITS}d}{PNG_SUFFIX}")

    def emit(self, frame: np.ndarray) -> EmittedFrame:
        """
        Write a kept frame to the next output slot.

        Raises:
            ImageWriteError: If the sink fails; the index is not consumed
        """
        emitted = EmittedFrame(self._next_index, self.path_for(self._next_index))
        self.sink.write(emitted.path, frame)
        self._next_index += 1
        return emitted

    def emit_duplicate(self, source: Union[str, Path]) -> EmittedFrame:
        """
        Fill the next output slot with a duplicate of an existing image.

        Raises:
            ImageWriteError: If the sink fails; the index is not consumed
        """
        emitted = EmittedFrame(self._next_index, self.path_for(self._next_index))
        self.sink.duplicate(Path(source), emitted.path)
        self._next_index += 1
        return emitted
