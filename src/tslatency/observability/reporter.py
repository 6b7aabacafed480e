"""
Measurement Reporters
=====================

Sinks for per-frame Measurements.

Reporters observe results only; nothing they do feeds back into decoding.

Components:
    - MeasurementReporter: protocol
    - LoggingReporter: one log line per frame
    - CompositeReporter: fan-out to several reporters
"""

import logging
from typing import Iterable, List, Optional, Protocol

from tslatency.models.measurement import DecodeStatus, Measurement


logger = logging.getLogger(__name__)


class MeasurementReporter(Protocol):
    """Receives every Measurement a Measurer produces."""

    def report(self, measurement: Measurement) -> None:
        ...


class LoggingReporter:
    """
    Logs each measurement.

    Levels:
        OK, CORRECTED -> INFO    "Delay <n> usecs"
        SUSPECT       -> WARNING with reason and delta
        FAILED        -> ERROR with reason
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log if log is not None else logger

    def report(self, measurement: Measurement) -> None:
        m = measurement

        if m.status is DecodeStatus.FAILED:
            self.log.error(f"Frame {m.sequence}: no timestamp ({m.reason.value})")
            return

        delay_us = m.delta_ns // 1_000
        if m.status is DecodeStatus.SUSPECT:
            self.log.warning(
                f"Frame {m.sequence}: suspect delay {delay_us} usecs ({m.reason.value})"
            )
            return

        if m.corrected_bits:
            self.log.info(f"Delay {delay_us} usecs ({m.corrected_bits} bits corrected)")
        else:
            self.log.info(f"Delay {delay_us} usecs")


class CompositeReporter:
    """Forwards each measurement to every child reporter, in order."""

    def __init__(self, reporters: Iterable[MeasurementReporter]) -> None:
        self.reporters: List[MeasurementReporter] = list(reporters)

    def report(self, measurement: Measurement) -> None:
        for reporter in self.reporters:
            reporter.report(measurement)
