"""
Test Configuration
==================

Pytest fixtures and test helpers for ebb.

Frames are synthetic RGB arrays; the frame source and image sink are
in-memory stand-ins so the pipeline can be exercised without video files.
"""

from fractions import Fraction
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pytest

from ebb.output.sink import ImageWriteError
from ebb.stream.decoder import VideoDecodeError
from ebb.stream.frame import VideoInfo


WIDTH = 32
HEIGHT = 24


def solid_frame(value: int, width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    """Frame with every channel of every pixel set to `value`."""
    return np.full((height, width, 3), value, dtype=np.uint8)


class ListFrameSource:
    """
    FrameSource that replays a list of frames.

    Frames listed in `fail_at` raise VideoDecodeError instead of decoding.
    """

    def __init__(
        self,
        frames: Sequence[np.ndarray],
        frame_rate: Fraction = Fraction(25, 1),
        fail_at: Optional[int] = None,
    ) -> None:
        height, width = frames[0].shape[:2]
        self.info = VideoInfo(width=width, height=height, frame_rate=frame_rate)
        self._frames = list(frames)
        self._fail_at = fail_at
        self._position = 0
        self.targets: List[int] = []

    def read_into(self, out: np.ndarray) -> bool:
        if self._position == self._fail_at:
            raise VideoDecodeError(f"Could not decode frame {self._position}")
        if self._position >= len(self._frames):
            return False
        out[...] = self._frames[self._position]
        self.targets.append(id(out))
        self._position += 1
        return True


class RecordingSink:
    """ImageSink that keeps written frames in memory."""

    def __init__(self, fail_duplicate_after: Optional[int] = None) -> None:
        self.written: Dict[Path, np.ndarray] = {}
        self.duplicated: Dict[Path, Path] = {}
        self._fail_duplicate_after = fail_duplicate_after

    def write(self, path: Path, frame: np.ndarray) -> None:
        self.written[path] = frame.copy()

    def duplicate(self, source: Path, path: Path) -> None:
        if (
            self._fail_duplicate_after is not None
            and len(self.duplicated) >= self._fail_duplicate_after
        ):
            raise ImageWriteError(f"Too many links to {source}")
        if not Path(source).exists():
            raise ImageWriteError(f"No such file: {source}")
        self.duplicated[path] = source

    @property
    def paths(self) -> List[Path]:
        return sorted(list(self.written) + list(self.duplicated))


@pytest.fixture
def recording_sink():
    """Provide an in-memory image sink."""
    return RecordingSink()


@pytest.fixture
def splash_file(tmp_path):
    """Provide an existing splash image path."""
    path = tmp_path / "splash.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nnot-really-a-png")
    return path
