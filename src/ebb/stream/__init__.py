"""
Stream Module
=============

Video ingestion and frame buffering.

This module provides the ingestion layer for ebb:
    - VideoInfo: Stream geometry and rational frame rate
    - FrameSlots: The two reusable frame buffers (previous / current)
    - FrameSource: Protocol for frame producers
    - VideoSource: OpenCV decoder normalising frames to RGB

Example:
    from ebb.stream import FrameSlots, VideoSource

    with VideoSource("talk.mp4") as source:
        slots = FrameSlots.allocate(source.info.width, source.info.height)
        while source.read_into(slots.current):
            process(slots)
"""

from ebb.stream.frame import VideoInfo
from ebb.stream.buffer import FrameAllocationError, FrameSlots
from ebb.stream.decoder import (
    FrameSource,
    VideoDecodeError,
    VideoOpenError,
    VideoSource,
)


__all__ = [
    "VideoInfo",
    "FrameAllocationError",
    "FrameSlots",
    "FrameSource",
    "VideoDecodeError",
    "VideoOpenError",
    "VideoSource",
]
