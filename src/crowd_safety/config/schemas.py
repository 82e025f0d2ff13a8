"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..utils.constants import (
    DENSITY_GRID_SIZE,
    DENSITY_THRESHOLD,
    FALLING_VELOCITY_THRESHOLD,
    FALLING_WINDOW,
    LYING_ASPECT_RATIO,
    MATCH_DISTANCE,
    MAX_FRAME_HISTORY,
    POSITION_WINDOW_MS,
    SURGE_THRESHOLD,
    TRACK_TIMEOUT_MS,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class AnalyzerConfig(StrictModel):
    """Thresholds and bounds for one safety analyzer."""

    max_frame_history: int = Field(
        default=MAX_FRAME_HISTORY, gt=0, description="Frames and density snapshots retained"
    )
    grid_size: int = Field(default=DENSITY_GRID_SIZE, gt=0, description="Cells per grid side")
    density_threshold: float = Field(
        default=DENSITY_THRESHOLD, ge=0, description="Minimum cell density for a surge"
    )
    surge_threshold: float = Field(
        default=SURGE_THRESHOLD, ge=0, description="Relative increase that counts as a surge"
    )
    falling_velocity_threshold: float = Field(
        default=FALLING_VELOCITY_THRESHOLD,
        gt=0,
        description="Downward velocity (normalized units/s) that counts as falling",
    )
    falling_window: int = Field(
        default=FALLING_WINDOW, ge=2, description="Latest positions examined for falling"
    )
    track_timeout_ms: float = Field(default=TRACK_TIMEOUT_MS, gt=0)
    position_window_ms: float = Field(default=POSITION_WINDOW_MS, gt=0)
    match_distance: float = Field(
        default=MATCH_DISTANCE, gt=0, description="Max center distance for track association"
    )
    lying_aspect_ratio: float = Field(default=LYING_ASPECT_RATIO, gt=0)


class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class Config(StrictModel):
    """Complete configuration schema."""

    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
