"""
Excise Boring Bits Configuration
================================

This module handles configuration loading for the frame-retention engine.

Configuration Sources (in order of precedence):
    1. Command-line flags (applied by ebb.main)
    2. Environment variables
    3. YAML config file
    4. Default values (lowest priority)

Environment Variable Mapping:
    EBB_BORDER       -> comparison.border
    EBB_SLACK_CS     -> timing.slack_cs
    EBB_SPLASH_CS    -> splash.duration_cs
    EBB_SPLASH_MODE  -> splash.mode
    EBB_LOG_LEVEL    -> logging.level

Example:
    from ebb.config import load_config

    settings = load_config("ebb.yaml")
    print(settings.comparison.border)
    print(settings.timing.slack_frames(Fraction(25, 1)))
"""

import os
import logging
from fractions import Fraction
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)


# Centiseconds per second; all durations are configured in cs.
SECOND_IN_CS = 100

# Run summary level, sits between INFO and WARNING.
RESULT = 25
logging.addLevelName(RESULT, "RESULT")


def centiseconds_to_frames(centiseconds: int, frame_rate: Fraction) -> int:
    """
    Convert a duration in centiseconds to a whole number of frames.

    Uses integer arithmetic on the rational frame rate, rounding down.

    Args:
        centiseconds: Duration in hundredths of a second
        frame_rate: Frames per second as numerator/denominator

    Returns:
        Number of frames that fit in the duration
    """
    return (centiseconds * frame_rate.numerator) // (
        SECOND_IN_CS * frame_rate.denominator
    )


# =============================================================================
# Configuration Models
# =============================================================================

class ComparisonConfig(BaseModel):
    """Frame comparison configuration."""

    border: int = Field(
        default=5,
        ge=0,
        description="Margin in pixels excluded from frame comparison",
    )
    band_rows: int = Field(
        default=16,
        ge=1,
        description="Rows compared per vectorised band before short-circuit check",
    )


class TimingConfig(BaseModel):
    """Slack timing configuration."""

    slack_cs: int = Field(
        default=80,
        ge=0,
        description="Unchanging time allowed before frames are dropped (cs)",
    )

    def slack_frames(self, frame_rate: Fraction) -> int:
        """Slack allowance expressed in source frames."""
        return centiseconds_to_frames(self.slack_cs, frame_rate)


class SplashConfig(BaseModel):
    """Splash (intro) screen configuration."""

    path: Optional[str] = Field(
        default=None,
        description="Path to splash PNG, duplicated into the first output slots",
    )
    duration_cs: int = Field(
        default=300,
        ge=0,
        description="Time to display the splash screen (cs)",
    )
    mode: Literal["link", "copy"] = Field(
        default="link",
        description="How splash slots are produced: hard link or byte copy",
    )

    def splash_frames(self, frame_rate: Fraction) -> int:
        """Splash duration expressed in output frames."""
        return centiseconds_to_frames(self.duration_cs, frame_rate)


class InputConfig(BaseModel):
    """Input video configuration."""

    fallback_fps: str = Field(
        default="25",
        description="Frame rate used when the container does not report one",
    )

    @field_validator("fallback_fps")
    @classmethod
    def _check_fps(cls, value: str) -> str:
        if parse_frame_rate(value) <= 0:
            raise ValueError("fallback_fps must be positive")
        return value

    @property
    def fallback_frame_rate(self) -> Fraction:
        return parse_frame_rate(self.fallback_fps)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="RESULT", description="Log level")
    format: Literal["json", "text"] = Field(
        default="text", description="Log format: json or text"
    )


class Settings(BaseModel):
    """
    Main settings class for ebb.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    splash: SplashConfig = Field(default_factory=SplashConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def parse_frame_rate(raw_fps) -> Fraction:
    """
    Parse a frame rate given as int, float, or "num/den" string.

    Raises:
        ValueError: If the value cannot be interpreted
    """
    if isinstance(raw_fps, Fraction):
        return raw_fps
    if isinstance(raw_fps, int):
        return Fraction(raw_fps, 1)
    if isinstance(raw_fps, float):
        return Fraction(str(raw_fps))
    if isinstance(raw_fps, str):
        value = raw_fps.strip()
        if "/" in value:
            num, den = value.split("/", 1)
            if int(den) == 0:
                raise ValueError(f"Frame rate denominator must be non-zero: {raw_fps!r}")
            return Fraction(int(num), int(den))
        return Fraction(value)
    raise ValueError(f"Frame rate must be int, float, or fraction string: {raw_fps!r}")


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to YAML config. If None, searches common locations.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        search_paths = [
            Path("ebb.yaml"),
            Path("ebb.yml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.debug(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    elif config_path:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    if env_border := os.environ.get("EBB_BORDER"):
        config_data.setdefault("comparison", {})["border"] = int(env_border)

    if env_slack := os.environ.get("EBB_SLACK_CS"):
        config_data.setdefault("timing", {})["slack_cs"] = int(env_slack)

    if env_splash := os.environ.get("EBB_SPLASH_CS"):
        config_data.setdefault("splash", {})["duration_cs"] = int(env_splash)
    if env_mode := os.environ.get("EBB_SPLASH_MODE"):
        config_data.setdefault("splash", {})["mode"] = env_mode

    if env_log := os.environ.get("EBB_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def resolve_log_level(name: str) -> int:
    """Map a level name (including RESULT) to its numeric value."""
    level = logging.getLevelName(name.upper())
    if isinstance(level, int):
        return level
    return RESULT


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = resolve_log_level(settings.logging.level)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=True,
    )
