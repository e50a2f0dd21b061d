"""
Video Decoder
=============

Dedicated module for decoding video files into RGB numpy frames.

Design Rules:
    - This is the ONLY place in the codebase that decodes video
    - Frames are normalised to 3 x 8-bit RGB, written into a caller buffer
    - End of stream and decode failure are reported differently:
      read_into() returns False at the end, raises VideoDecodeError on failure
    - OpenCV's grab() also returns False on a corrupt packet, so a stream
      that stops short of the frame count the container reports is treated
      as a decode failure. Containers without a frame count cannot be
      checked this way.
"""

import logging
from fractions import Fraction
from pathlib import Path
from typing import Optional, Protocol, Union

import cv2
import numpy as np

from ebb import EbbError
from ebb.stream.frame import VideoInfo


logger = logging.getLogger(__name__)


# Largest denominator considered when recovering a rational frame rate
# from a float, enough for NTSC rates such as 30000/1001.
FPS_MAX_DENOMINATOR = 1001


class VideoOpenError(EbbError):
    """Raised when the input video cannot be opened."""
    pass


class VideoDecodeError(EbbError):
    """Raised when a frame cannot be decoded mid-stream."""
    pass


class FrameSource(Protocol):
    """
    Protocol for frame producers.

    Frames are delivered in decode order by writing them into a buffer
    owned by the caller.
    """

    info: VideoInfo

    def read_into(self, out: np.ndarray) -> bool:
        """
        Decode the next frame into `out`.

        Args:
            out: Destination (height, width, 3), uint8

        Returns:
            True if a frame was written, False at end of stream

        Raises:
            VideoDecodeError: If the next frame cannot be decoded
        """
        ...


def frame_rate_from_float(fps: float) -> Optional[Fraction]:
    """
    Recover a rational frame rate from OpenCV's float value.

    Returns:
        The frame rate, or None if the value is not a positive finite number
    """
    if not fps or fps != fps or fps <= 0 or fps == float("inf"):
        return None
    return Fraction(fps).limit_denominator(FPS_MAX_DENOMINATOR)


class VideoSource:
    """
    OpenCV-backed frame source.

    Attributes:
        path: Input video path
        info: Stream geometry and frame rate
        frames_read: Frames successfully decoded so far
        expected_frames: Frame count reported by the container, if any

    Example:
        with VideoSource("talk.mp4") as source:
            frame = np.empty(source.info.shape, dtype=np.uint8)
            while source.read_into(frame):
                ...
    """

    def __init__(
        self,
        path: Union[str, Path],
        fallback_frame_rate: Fraction = Fraction(25, 1),
    ) -> None:
        """
        Open a video file.

        Args:
            path: Input video path
            fallback_frame_rate: Used when the container reports no frame rate

        Raises:
            VideoOpenError: If the file cannot be opened or has no video size
        """
        self.path = Path(path)
        self._capture = cv2.VideoCapture(str(self.path))
        if not self._capture.isOpened():
            self._capture.release()
            raise VideoOpenError(f"Could not open input video: '{self.path}'")

        width = int(self._capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if width <= 0 or height <= 0:
            self._capture.release()
            raise VideoOpenError(
                f"Could not find video stream in input file: '{self.path}'"
            )

        frame_rate = frame_rate_from_float(self._capture.get(cv2.CAP_PROP_FPS))
        if frame_rate is None:
            logger.warning(
                f"Frame rate could not be determined, defaulting to "
                f"{fallback_frame_rate.numerator}/{fallback_frame_rate.denominator}"
            )
            frame_rate = fallback_frame_rate

        self.info = VideoInfo(width=width, height=height, frame_rate=frame_rate)
        frame_count = self._capture.get(cv2.CAP_PROP_FRAME_COUNT)
        self.expected_frames: Optional[int] = (
            int(frame_count) if frame_count and frame_count > 0 else None
        )
        self.frames_read = 0
        self._scratch: Optional[np.ndarray] = None

        logger.debug(
            f"Frame rate: {frame_rate.numerator}/{frame_rate.denominator}"
        )

    def read_into(self, out: np.ndarray) -> bool:
        index = self.frames_read
        if not self._capture.grab():
            if self.expected_frames is not None and index < self.expected_frames:
                raise VideoDecodeError(
                    f"Could not decode frame {index}: stream ended before "
                    f"the {self.expected_frames} frames the container reports"
                )
            return False

        try:
            ok, bgr = self._capture.retrieve(self._scratch)
        except cv2.error as e:
            raise VideoDecodeError(f"Could not decode frame {index}: {e}") from e
        if not ok or bgr is None:
            raise VideoDecodeError(f"Could not decode frame {index}")

        if bgr.ndim != 3 or bgr.shape != self.info.shape:
            raise VideoDecodeError(
                f"Frame {index} has shape {bgr.shape}, expected {self.info.shape}"
            )

        cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB, dst=out)
        self._scratch = bgr
        self.frames_read += 1
        return True

    def close(self) -> None:
        """Release the underlying capture."""
        self._capture.release()

    def __enter__(self) -> "VideoSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
