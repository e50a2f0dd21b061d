"""
Compare Module
==============

Frame comparison for boring-bit detection.

This module provides:
    - Pixel and 2x2 neighbourhood difference tests
    - The border-excluded comparison region
    - FrameDiffer, the short-circuiting whole-frame test
"""

from ebb.compare.metrics import (
    PIXEL_TOLERANCE,
    pixel_difference,
    neighbourhood_differs,
)
from ebb.compare.region import ComparisonRegion
from ebb.compare.differ import DiffResult, FrameDiffer

__all__ = [
    "PIXEL_TOLERANCE",
    "pixel_difference",
    "neighbourhood_differs",
    "ComparisonRegion",
    "DiffResult",
    "FrameDiffer",
]
