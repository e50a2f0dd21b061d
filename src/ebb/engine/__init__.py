"""
Engine Module
=============

Frame-retention decisions and their reporting.

This module provides:
    - SkipAccumulator: Retain / repeat / drop state machine
    - TimelineReporter: Frame index to elapsed time logging
    - SplashInjector: Leading splash segment
"""

from ebb.engine.accumulator import (
    FrameDecision,
    SkipAccumulator,
    SkipRange,
    SkipStep,
)
from ebb.engine.timeline import Timestamp, TimelineReporter, frame_to_timestamp
from ebb.engine.splash import SplashInjector

__all__ = [
    "FrameDecision",
    "SkipAccumulator",
    "SkipRange",
    "SkipStep",
    "Timestamp",
    "TimelineReporter",
    "frame_to_timestamp",
    "SplashInjector",
]
