"""
tslatency Configuration
=======================

Validated configuration for stamp and measure elements.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TSLATENCY_X              -> stamper.x, measure.x
    TSLATENCY_Y              -> stamper.y, measure.y
    TSLATENCY_WIDTH          -> stamper.width, measure.width
    TSLATENCY_HEIGHT         -> stamper.height, measure.height
    TSLATENCY_STAMPER_TYPE   -> stamper.stamper_type, measure.stamper_type
    TSLATENCY_CELL_SIZE      -> stamper.cell_size, measure.cell_size
    TSLATENCY_CLOCK          -> stamper.clock, measure.clock
    TSLATENCY_TOLERANCE      -> measure.tolerance
    TSLATENCY_MAX_LATENCY_MS -> measure.max_latency_ms
    TSLATENCY_LOG_LEVEL      -> logging.level

Option names follow the element property names; hyphenated spellings
(`stamper-type`, `cell-size`, ...) and snake_case are both accepted.

There is no module-level settings instance: each element
owns the configuration it was constructed with.

Example:
    from tslatency.config import load_config, setup_logging

    settings = load_config("config.yaml")
    setup_logging(settings)
    stamper = Stamper(settings.stamper)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tslatency.clock import ClockSource
from tslatency.models.region import Region
from tslatency.models.variant import StamperVariant


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class StamperConfig(BaseModel):
    """
    Stamp-side options.

    Region, variant and cell size must match the measure side exactly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    x: int = Field(default=0, ge=0, description="Time code X position")
    y: int = Field(default=0, ge=0, description="Time code Y position")
    width: int = Field(default=64, ge=1, description="Time code width")
    height: int = Field(default=64, ge=1, description="Time code height")
    stamper_type: StamperVariant = Field(
        default=StamperVariant.OPTIMIZED,
        alias="stamper-type",
        description="Integrity scheme: original, optimized or fast-robust",
    )
    cell_size: int = Field(
        default=4,
        ge=1,
        le=64,
        alias="cell-size",
        description="Pixels per cell edge (one bit per cell)",
    )
    clock: ClockSource = Field(
        default=ClockSource.MONOTONIC,
        description="Clock source: monotonic or realtime",
    )

    @field_validator("stamper_type", mode="before")
    @classmethod
    def parse_stamper_type(cls, v):
        """Accept nicknames case-insensitively."""
        if isinstance(v, str):
            return StamperVariant.from_str(v)
        return v

    @property
    def region(self) -> Region:
        return Region(x=self.x, y=self.y, width=self.width, height=self.height)


class MeasureConfig(StamperConfig):
    """Measure-side options: stamp options plus classification and sanity limits."""

    tolerance: int = Field(
        default=5,
        ge=0,
        le=127,
        description="Vote dead-band around the mid-level threshold",
    )
    clock_skew_tolerance_ms: float = Field(
        default=5.0,
        ge=0,
        alias="clock-skew-tolerance-ms",
        description="How far in the future a stamp may be before it is SUSPECT",
    )
    max_latency_ms: float = Field(
        default=10_000.0,
        gt=0,
        alias="max-latency-ms",
        description="Deltas above this are SUSPECT",
    )

    @property
    def clock_skew_tolerance_ns(self) -> int:
        return int(self.clock_skew_tolerance_ms * 1_000_000)

    @property
    def max_latency_ns(self) -> int:
        return int(self.max_latency_ms * 1_000_000)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Top-level settings for an application embedding both elements.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    stamper: StamperConfig = Field(default_factory=StamperConfig)
    measure: MeasureConfig = Field(default_factory=MeasureConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

_SHARED_ENV = {
    "TSLATENCY_X": ("x", int),
    "TSLATENCY_Y": ("y", int),
    "TSLATENCY_WIDTH": ("width", int),
    "TSLATENCY_HEIGHT": ("height", int),
    "TSLATENCY_STAMPER_TYPE": ("stamper_type", str),
    "TSLATENCY_CELL_SIZE": ("cell_size", int),
    "TSLATENCY_CLOCK": ("clock", str),
}

_MEASURE_ENV = {
    "TSLATENCY_TOLERANCE": ("tolerance", int),
    "TSLATENCY_MAX_LATENCY_MS": ("max_latency_ms", float),
}


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches the working directory.

    Returns:
        Settings: Loaded configuration

    Raises:
        pydantic.ValidationError: If any option is invalid
    """
    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.warning("No config file found, using defaults and environment variables")

    config_data = {
        section: _normalize_keys(values) if isinstance(values, dict) else values
        for section, values in config_data.items()
    }

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _normalize_keys(values: dict) -> dict:
    """Map hyphenated property names to field names."""
    return {str(key).replace("-", "_"): value for key, value in values.items()}


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Session options shared by both sides
    for env_name, (key, cast) in _SHARED_ENV.items():
        if env_value := os.environ.get(env_name):
            for section in ("stamper", "measure"):
                config_data.setdefault(section, {})[key] = cast(env_value)

    # Measure-only options
    for env_name, (key, cast) in _MEASURE_ENV.items():
        if env_value := os.environ.get(env_name):
            config_data.setdefault("measure", {})[key] = cast(env_value)

    # Logging settings
    if env_log := os.environ.get("TSLATENCY_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
