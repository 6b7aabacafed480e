"""
Latency Statistics
==================

Rolling summary of measured latencies.

Derived from Measurements only:
    - accepted deltas (OK, CORRECTED) feed the rolling window
    - every status feeds the counters
    - sequence numbers reveal frames the reporter never saw
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Optional

import numpy as np

from tslatency.models.measurement import DecodeStatus, Measurement


logger = logging.getLogger(__name__)


DEFAULT_WINDOW = 300


@dataclass(frozen=True, slots=True)
class LatencySnapshot:
    """
    Statistics at one point in time.

    Latencies are in milliseconds over the rolling window; None until
    at least one delta has been accepted. Counters cover the whole run.
    """

    count: int
    mean_ms: Optional[float]
    min_ms: Optional[float]
    max_ms: Optional[float]
    p50_ms: Optional[float]
    p95_ms: Optional[float]
    total_frames: int
    status_counts: Dict[str, int]
    failure_count: int
    longest_failure_run: int
    sequence_gaps: int

    @property
    def failure_rate(self) -> float:
        if self.total_frames == 0:
            return 0.0
        return self.failure_count / self.total_frames

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "mean_ms": self.mean_ms,
            "min_ms": self.min_ms,
            "max_ms": self.max_ms,
            "p50_ms": self.p50_ms,
            "p95_ms": self.p95_ms,
            "total_frames": self.total_frames,
            "status_counts": dict(self.status_counts),
            "failure_count": self.failure_count,
            "longest_failure_run": self.longest_failure_run,
            "sequence_gaps": self.sequence_gaps,
        }


class LatencyStatistics:
    """
    MeasurementReporter that aggregates latencies.

    Example:
        stats = LatencyStatistics(window=300)
        measurer = Measurer(config, reporter=stats)
        ...
        print(stats.snapshot().p95_ms)
    """

    def __init__(self, window: int = DEFAULT_WINDOW) -> None:
        """
        Initialize statistics.

        Args:
            window: Number of accepted deltas kept for the latency figures
        """
        if window < 1:
            raise ValueError("window must be >= 1")

        self.window = window
        self._deltas: Deque[int] = deque(maxlen=window)
        self._status_counts: Dict[str, int] = {s.value: 0 for s in DecodeStatus}
        self._total = 0
        self._failure_run = 0
        self._longest_failure_run = 0
        self._sequence_gaps = 0
        self._last_sequence: Optional[int] = None

        logger.info(f"LatencyStatistics initialized: window={window}")

    def report(self, measurement: Measurement) -> None:
        m = measurement
        self._total += 1
        self._status_counts[m.status.value] += 1

        if self._last_sequence is not None and m.sequence != self._last_sequence + 1:
            self._sequence_gaps += 1
        self._last_sequence = m.sequence

        if m.status is DecodeStatus.FAILED:
            self._failure_run += 1
            self._longest_failure_run = max(self._longest_failure_run, self._failure_run)
        else:
            self._failure_run = 0

        if m.accepted:
            self._deltas.append(m.delta_ns)

    def snapshot(self) -> LatencySnapshot:
        """Compute a frozen summary of the current state."""
        failures = self._status_counts[DecodeStatus.FAILED.value]

        if self._deltas:
            deltas_ms = np.fromiter(self._deltas, dtype=np.float64) / 1e6
            p50, p95 = np.percentile(deltas_ms, [50, 95])
            latency = dict(
                mean_ms=round(float(deltas_ms.mean()), 4),
                min_ms=round(float(deltas_ms.min()), 4),
                max_ms=round(float(deltas_ms.max()), 4),
                p50_ms=round(float(p50), 4),
                p95_ms=round(float(p95), 4),
            )
        else:
            latency = dict(mean_ms=None, min_ms=None, max_ms=None, p50_ms=None, p95_ms=None)

        return LatencySnapshot(
            count=len(self._deltas),
            total_frames=self._total,
            status_counts=dict(self._status_counts),
            failure_count=failures,
            longest_failure_run=self._longest_failure_run,
            sequence_gaps=self._sequence_gaps,
            **latency,
        )

    def reset(self) -> None:
        """Clear the window and all counters."""
        self._deltas.clear()
        self._status_counts = {s.value: 0 for s in DecodeStatus}
        self._total = 0
        self._failure_run = 0
        self._longest_failure_run = 0
        self._sequence_gaps = 0
        self._last_sequence = None
