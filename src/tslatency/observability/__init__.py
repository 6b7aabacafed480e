"""
Observability Module
====================

Reporting for Measurer output.

This module provides:
    - LoggingReporter: per-frame log lines
    - LatencyStatistics: rolling latency summary
    - CompositeReporter: fan-out

DESIGN RULES:
    - Reporters never influence decoding
    - No global state; attach reporters to a Measurer explicitly
"""

from tslatency.observability.reporter import (
    CompositeReporter,
    LoggingReporter,
    MeasurementReporter,
)
from tslatency.observability.statistics import (
    DEFAULT_WINDOW,
    LatencySnapshot,
    LatencyStatistics,
)


__all__ = [
    "CompositeReporter",
    "LoggingReporter",
    "MeasurementReporter",
    "DEFAULT_WINDOW",
    "LatencySnapshot",
    "LatencyStatistics",
]
