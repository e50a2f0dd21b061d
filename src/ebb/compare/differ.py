"""
Frame Differencer
=================

Decides whether two frames of the same size differ meaningfully.

The comparison region is scanned in raster order. The first block is
classified alone, then the rest of the first sample row, then bands of
rows. Each piece is classified with numpy in a single pass and the scan
stops at the first piece containing a different block. A change at the
first block costs one block; a later change costs at most one band
beyond the block that differs.

Key Design Decisions:
    - Frames are never modified or copied as a whole
    - A degenerate region (border too large) means "no difference"
    - The reported block is the first different one in raster order
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from ebb.compare.metrics import block_difference_mask, pixel_difference_map
from ebb.compare.region import ComparisonRegion


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiffResult:
    """
    Outcome of one frame comparison.

    Attributes:
        differs: True if a different block was found
        blocks_examined: Blocks actually classified before the scan stopped
            (the whole region when nothing differs)
        first_block: (row, column) of the first different block, if any
    """

    differs: bool
    blocks_examined: int
    first_block: Optional[Tuple[int, int]] = None


class FrameDiffer:
    """
    Border-excluding, noise-tolerant frame comparison.

    Attributes:
        border: Margin in pixels ignored on every edge
        band_rows: Sample rows classified per numpy pass

    Example:
        differ = FrameDiffer(border=5)
        if differ.differs(previous, current):
            ...
    """

    def __init__(self, border: int = 5, band_rows: int = 16) -> None:
        if band_rows < 1:
            raise ValueError("band_rows must be >= 1")

        self.border = border
        self.band_rows = band_rows
        self._region: Optional[ComparisonRegion] = None
        self._region_shape: Optional[Tuple[int, int]] = None

    def region_for(self, width: int, height: int) -> ComparisonRegion:
        """Comparison region for a frame geometry (cached per geometry)."""
        if self._region_shape != (width, height):
            self._region = ComparisonRegion.from_frame(width, height, self.border)
            self._region_shape = (width, height)
            if self._region.is_degenerate:
                logger.warning(
                    f"Border {self.border}px leaves no comparison region in "
                    f"{width}x{height} frames; all frames will compare as unchanged"
                )
        return self._region

    def compare(self, previous: np.ndarray, current: np.ndarray) -> DiffResult:
        """
        Compare two frames.

        Args:
            previous: Last retained frame (H, W, 3), uint8
            current: Frame being evaluated (H, W, 3), uint8

        Returns:
            DiffResult describing the first different block, if any

        Raises:
            ValueError: If the frames do not have the same shape
        """
        if previous.shape != current.shape:
            raise ValueError(
                f"Cannot compare frames of different shapes: "
                f"{previous.shape} vs {current.shape}"
            )

        height, width = previous.shape[:2]
        region = self.region_for(width, height)
        if region.is_degenerate:
            return DiffResult(differs=False, blocks_examined=0)

        # Pixel slices include the one-pixel lookahead of the last block
        examined = 0
        for block_rows, block_cols in self._segments(region):
            rows = slice(block_rows.start, block_rows.stop + 1)
            cols = slice(block_cols.start, block_cols.stop + 1)

            blocks = block_difference_mask(
                pixel_difference_map(previous[rows, cols], current[rows, cols])
            )
            examined += blocks.size
            if not blocks.any():
                continue

            block_y, block_x = divmod(int(np.argmax(blocks)), blocks.shape[1])
            return DiffResult(
                differs=True,
                blocks_examined=examined,
                first_block=(block_rows.start + block_y, block_cols.start + block_x),
            )

        return DiffResult(differs=False, blocks_examined=examined)

    def _segments(self, region: ComparisonRegion) -> Iterator[Tuple[slice, slice]]:
        """
        Block ranges of the region in raster order, each classified in one pass.

        The first block is tested on its own, then the rest of the first
        sample row, then bands of `band_rows` rows. Every block is covered
        exactly once.
        """
        yield slice(region.top, region.top + 1), slice(region.left, region.left + 1)
        if region.cols > 1:
            yield slice(region.top, region.top + 1), slice(region.left + 1, region.right)

        all_cols = slice(region.left, region.right)
        for band_top in range(region.top + 1, region.bottom, self.band_rows):
            band_bottom = min(band_top + self.band_rows, region.bottom)
            yield slice(band_top, band_bottom), all_cols

    def differs(self, previous: np.ndarray, current: np.ndarray) -> bool:
        """True if the frames differ meaningfully."""
        return self.compare(previous, current).differs
