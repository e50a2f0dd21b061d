"""
Comparison Region
=================

Border-excluded area of a frame that takes part in difference tests.

Sample positions are the top-left corners of 2x2 blocks. For a frame of
width W, height H and border B they span rows B .. H-B-2 and columns
B .. W-B-2 inclusive, so every sampled pixel (including the one-pixel
lookahead to the right and below) lies inside the border.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ComparisonRegion:
    """
    Sample grid for one frame geometry.

    Attributes:
        top: First sampled row
        left: First sampled column
        rows: Number of sampled rows (0 when degenerate)
        cols: Number of sampled columns (0 when degenerate)
    """

    top: int
    left: int
    rows: int
    cols: int

    @classmethod
    def from_frame(cls, width: int, height: int, border: int) -> "ComparisonRegion":
        """
        Build the region for a frame geometry.

        A region is usable only when border >= 0 and
        2 * border + 2 < min(width, height). Anything else yields an
        empty region, which compares as "no difference".
        """
        if border < 0 or 2 * border + 2 >= min(width, height):
            return cls(top=0, left=0, rows=0, cols=0)
        return cls(
            top=border,
            left=border,
            rows=height - 2 * border - 1,
            cols=width - 2 * border - 1,
        )

    @property
    def is_degenerate(self) -> bool:
        """True if the region holds no sample positions."""
        return self.rows <= 0 or self.cols <= 0

    @property
    def size(self) -> int:
        """Total number of sample positions."""
        return self.rows * self.cols

    @property
    def bottom(self) -> int:
        """One past the last sampled row."""
        return self.top + self.rows

    @property
    def right(self) -> int:
        """One past the last sampled column."""
        return self.left + self.cols
