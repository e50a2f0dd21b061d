"""
Frame Slots
===========

The two frame buffers reused for the whole run.

One slot holds the last retained frame ("previous"), the other receives
the frame being evaluated ("current"). When a frame is retained the
slots swap roles; no frame buffer is allocated after start-up.

Design Rules:
    - Exactly two buffers, allocated once
    - Swapping exchanges references, never copies pixels
    - Allocation failure is fatal to the run
"""

import logging

import numpy as np

from ebb import EbbError


logger = logging.getLogger(__name__)


class FrameAllocationError(EbbError):
    """Raised when the frame buffers cannot be allocated."""
    pass


class FrameSlots:
    """
    Double buffer of RGB frames.

    Attributes:
        previous: Last retained frame
        current: Frame being evaluated; the decoder writes into this
        swap_count: Number of swaps performed

    Example:
        slots = FrameSlots.allocate(width=1280, height=720)
        source.read_into(slots.current)
        slots.swap()
    """

    def __init__(self, previous: np.ndarray, current: np.ndarray) -> None:
        if previous.shape != current.shape:
            raise ValueError("Frame slots must have the same shape")
        if previous is current:
            raise ValueError("Frame slots must be distinct buffers")

        self._previous = previous
        self._current = current
        self._swap_count = 0

    @classmethod
    def allocate(cls, width: int, height: int) -> "FrameSlots":
        """
        Allocate both slots for a frame geometry.

        Raises:
            FrameAllocationError: If memory for either buffer is unavailable
        """
        shape = (height, width, 3)
        try:
            previous = np.zeros(shape, dtype=np.uint8)
            current = np.zeros(shape, dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise FrameAllocationError(
                f"Could not allocate frame buffers for {width}x{height}: {e}"
            ) from e

        logger.debug(f"Allocated two {width}x{height} RGB frame buffers")
        return cls(previous, current)

    @property
    def previous(self) -> np.ndarray:
        return self._previous

    @property
    def current(self) -> np.ndarray:
        return self._current

    @property
    def swap_count(self) -> int:
        return self._swap_count

    def swap(self) -> None:
        """Make the current frame the retained one."""
        self._previous, self._current = self._current, self._previous
        self._swap_count += 1
