"""
Image Sink
==========

Writes kept frames to disk as PNG files.

This is the ONLY place in the codebase that encodes images. Frames
arrive in RGB order and are converted to OpenCV's BGR order on write.
Splash slots are produced by duplicating an existing file rather than
re-encoding it.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Literal, Protocol

import cv2
import numpy as np

from ebb import EbbError


logger = logging.getLogger(__name__)


class ImageWriteError(EbbError):
    """Raised when an output image cannot be written."""
    pass


class ImageSink(Protocol):
    """
    Protocol for output image writers.

    Implementations must either fully produce the target file or raise
    ImageWriteError.
    """

    def write(self, path: Path, frame: np.ndarray) -> None:
        """Encode an RGB frame (H, W, 3), uint8 to `path`."""
        ...

    def duplicate(self, source: Path, path: Path) -> None:
        """Make `path` a duplicate of the existing image `source`."""
        ...


class PngImageSink:
    """
    PNG writer backed by OpenCV.

    Attributes:
        duplicate_mode: "link" to hard link duplicates, "copy" to copy bytes
    """

    def __init__(self, duplicate_mode: Literal["link", "copy"] = "link") -> None:
        if duplicate_mode not in ("link", "copy"):
            raise ValueError(f"Unknown duplicate mode: {duplicate_mode}")
        self.duplicate_mode = duplicate_mode

    def write(self, path: Path, frame: np.ndarray) -> None:
        # An old slot may be a hard link to the splash image; replace it
        # rather than writing through the link.
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise ImageWriteError(f"Could not replace {path}: {e}") from e

        try:
            bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
            ok = cv2.imwrite(str(path), bgr)
        except cv2.error as e:
            raise ImageWriteError(f"Failed to encode {path}: {e}") from e
        if not ok:
            raise ImageWriteError(f"Failed to write {path}")

    def duplicate(self, source: Path, path: Path) -> None:
        try:
            if self.duplicate_mode == "link":
                os.link(source, path)
            else:
                shutil.copyfile(source, path)
        except OSError as e:
            raise ImageWriteError(
                f"Could not {self.duplicate_mode} {source} to {path}: {e}"
            ) from e
