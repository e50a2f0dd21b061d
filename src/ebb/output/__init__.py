"""
Output Module
=============

Output numbering and image writing.

    - OutputSequencer: Contiguous 8-digit output indices
    - ImageSink / PngImageSink: Encodes or duplicates output images
"""

from ebb.output.sink import ImageSink, ImageWriteError, PngImageSink
from ebb.output.sequencer import EmittedFrame, OutputSequencer


__all__ = [
    "ImageSink",
    "ImageWriteError",
    "PngImageSink",
    "EmittedFrame",
    "OutputSequencer",
]
