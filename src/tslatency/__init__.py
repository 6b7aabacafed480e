"""
tslatency
=========

In-band video latency measurement.

A Stamper writes the current clock reading into a small rectangle of each
frame as a grid of black/white cells. Downstream, after encoders, networks
and decoders, a Measurer reads the grid back and compares the recovered
timestamp with its own clock.

Components:
    - models: frame geometry, regions, variants, measurements
    - codec: pixel-region bit read/write
    - integrity: raw, CRC-16 and BCH schemes
    - elements: Stamper and Measurer
    - observability: measurement reporters and statistics
    - registry: name -> element factories

Example:
    from tslatency import Measurer, Stamper, StamperConfig, MeasureConfig

    stamper = Stamper(StamperConfig(stamper_type="fast-robust"))
    measurer = Measurer(MeasureConfig(stamper_type="fast-robust"))

    stamper.apply(frame)
    ...
    measurement = measurer.apply(frame)
"""

__version__ = "0.1.0"

from tslatency.clock import ClockSource, ManualClock, MonotonicClock, RealtimeClock
from tslatency.config import MeasureConfig, Settings, StamperConfig, load_config
from tslatency.elements import Measurer, Stamper
from tslatency.errors import (
    ConfigurationError,
    DecodeError,
    IntegrityCheckFailed,
    PayloadTooLarge,
    RegionOutOfBounds,
    TsLatencyError,
    UncorrectableError,
    UnsupportedFormat,
)
from tslatency.models import (
    DecodeStatus,
    Measurement,
    PixelFormat,
    ReasonCode,
    Region,
    StamperVariant,
    VideoFrame,
    VideoInfo,
)
from tslatency.registry import ElementRegistry, init_registry, plugin_init

__all__ = [
    "__version__",
    "ClockSource",
    "ManualClock",
    "MonotonicClock",
    "RealtimeClock",
    "MeasureConfig",
    "Settings",
    "StamperConfig",
    "load_config",
    "Measurer",
    "Stamper",
    "ConfigurationError",
    "DecodeError",
    "IntegrityCheckFailed",
    "PayloadTooLarge",
    "RegionOutOfBounds",
    "TsLatencyError",
    "UncorrectableError",
    "UnsupportedFormat",
    "DecodeStatus",
    "Measurement",
    "PixelFormat",
    "ReasonCode",
    "Region",
    "StamperVariant",
    "VideoFrame",
    "VideoInfo",
    "ElementRegistry",
    "init_registry",
    "plugin_init",
]
