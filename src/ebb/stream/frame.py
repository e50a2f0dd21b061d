"""
Video Info
==========

Stream-level metadata shared by the decoder and the pipeline.

Frames themselves are plain numpy arrays of shape (height, width, 3),
dtype uint8, RGB order. Only the geometry and frame rate of the stream
need a dedicated type.
"""

from dataclasses import dataclass
from fractions import Fraction


@dataclass(frozen=True, slots=True)
class VideoInfo:
    """
    Geometry and timing of a decoded video stream.

    Attributes:
        width: Frame width in pixels
        height: Frame height in pixels
        frame_rate: Frames per second as a rational
    """

    width: int
    height: int
    frame_rate: Fraction

    @property
    def shape(self) -> tuple:
        """numpy shape of one normalised frame."""
        return (self.height, self.width, 3)

    def __repr__(self) -> str:
        return (
            f"VideoInfo({self.width}x{self.height}, "
            f"fps={self.frame_rate.numerator}/{self.frame_rate.denominator})"
        )
