"""
Excise Boring Bits (ebb)
========================

Removes stretches of a video where the picture is effectively unchanging,
writing the remaining frames as a contiguous numbered PNG sequence.

Typical use is trimming screencasts: pauses longer than a configurable slack
window are cut, shorter pauses are kept verbatim so pacing stays natural.

Components:
    - compare: Pixel, neighbourhood and whole-frame difference tests
    - engine: Skip accumulator, timeline reporting, splash injection
    - output: Output sequencing and PNG sink
    - stream: Video decoding and the reusable frame slots
    - pipeline: Main loop tying the above together

Example:
    from ebb.config import load_config
    from ebb.pipeline import run

    settings = load_config()
    result = run("talk.mp4", "out/frame", settings)

Rebuild a video from the output with something like:

    ffmpeg -framerate 25 -i out/frame%08d.png -vcodec libx264 \\
        -profile:v high -crf 20 -pix_fmt yuv420p -r 25 result.mp4
"""

__version__ = "0.2.0"


class EbbError(Exception):
    """Base class for errors raised by ebb."""
    pass


__all__ = [
    "__version__",
    "EbbError",
]
