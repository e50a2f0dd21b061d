"""
Difference Metrics
==================

Pixel and 2x2 neighbourhood difference tests.

Two forms are provided for each test:
    - Scalar functions operating on single pixels / four difference values
    - Vectorised numpy equivalents operating on whole frame regions

Both forms apply the same tolerance and the same block rule, so a frame
compared with the vectorised path classifies every block exactly as the
scalar functions would.

Block Rule:
    A 2x2 block counts as different only when MORE THAN THREE of its four
    corner pixels differ by more than PIXEL_TOLERANCE, i.e. all four must.
"""

from typing import Sequence

import numpy as np


# Roughly 10% of the largest possible per-pixel difference (255 * 3).
PIXEL_TOLERANCE = (255 * 3) // 10

# A block is different when the number of corners over tolerance exceeds this.
NEIGHBOURHOOD_MAX_EXCEEDING = 3


def pixel_difference(prev: Sequence[int], curr: Sequence[int]) -> int:
    """
    Find the degree to which two pixels differ.

    Args:
        prev: Three channel values of the previous pixel
        curr: Three channel values of the current pixel

    Returns:
        Sum of absolute per-channel differences, 0 to 765
    """
    return (
        abs(int(prev[0]) - int(curr[0]))
        + abs(int(prev[1]) - int(curr[1]))
        + abs(int(prev[2]) - int(curr[2]))
    )


def neighbourhood_differs(
    top_left: int,
    top_right: int,
    bottom_left: int,
    bottom_right: int,
) -> bool:
    """
    Decide whether a 2x2 block may be considered different.

    Args:
        top_left: Pixel difference at the block's top-left corner
        top_right: Pixel difference at the top-right corner
        bottom_left: Pixel difference at the bottom-left corner
        bottom_right: Pixel difference at the bottom-right corner

    Returns:
        True if more than three corners exceed PIXEL_TOLERANCE
    """
    exceeding = sum(
        1
        for diff in (top_left, top_right, bottom_left, bottom_right)
        if diff > PIXEL_TOLERANCE
    )
    return exceeding > NEIGHBOURHOOD_MAX_EXCEEDING


def pixel_difference_map(prev: np.ndarray, curr: np.ndarray) -> np.ndarray:
    """
    Per-pixel difference of two RGB regions.

    Args:
        prev: Previous region (H, W, 3), uint8
        curr: Current region (H, W, 3), uint8

    Returns:
        (H, W) int16 array of summed absolute channel differences
    """
    delta = prev.astype(np.int16) - curr.astype(np.int16)
    return np.abs(delta).sum(axis=2, dtype=np.int16)


def block_difference_mask(diff_map: np.ndarray) -> np.ndarray:
    """
    Classify every 2x2 block of a pixel difference map.

    Block (y, x) has its top-left corner at diff_map[y, x], so the
    result is one row and one column smaller than the input.

    Args:
        diff_map: (H, W) pixel difference values

    Returns:
        (H-1, W-1) boolean array, True where the block is different
    """
    exceeds = (diff_map > PIXEL_TOLERANCE).astype(np.uint8)
    exceeding = (
        exceeds[:-1, :-1]
        + exceeds[:-1, 1:]
        + exceeds[1:, :-1]
        + exceeds[1:, 1:]
    )
    return exceeding > NEIGHBOURHOOD_MAX_EXCEEDING
