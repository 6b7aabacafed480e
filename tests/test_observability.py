"""
Observability Tests
===================

Reporters and rolling latency statistics.
"""

import logging

import pytest

from tslatency.models import DecodeStatus, Measurement, ReasonCode
from tslatency.observability import CompositeReporter, LatencyStatistics, LoggingReporter

from conftest import CollectingReporter


def ok(sequence, delta_ms, corrected=0):
    delta_ns = int(delta_ms * 1_000_000)
    return Measurement(
        sequence=sequence,
        status=DecodeStatus.CORRECTED if corrected else DecodeStatus.OK,
        receive_time_ns=10_000_000_000 + delta_ns,
        stamp_time_ns=10_000_000_000,
        delta_ns=delta_ns,
        corrected_bits=corrected,
    )


def failed(sequence):
    return Measurement(
        sequence=sequence,
        status=DecodeStatus.FAILED,
        receive_time_ns=0,
        reason=ReasonCode.INTEGRITY_CHECK_FAILED,
    )


def suspect(sequence):
    return Measurement(
        sequence=sequence,
        status=DecodeStatus.SUSPECT,
        receive_time_ns=0,
        reason=ReasonCode.FUTURE_TIMESTAMP,
        stamp_time_ns=2_000_000,
        delta_ns=-2_000_000,
    )


class TestLoggingReporter:
    """Tests for per-frame log lines."""

    def test_ok_logs_delay(self, caplog):
        """Verify accepted deltas log at INFO in microseconds."""
        caplog.set_level(logging.INFO)
        LoggingReporter().report(ok(0, 1.5))

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "Delay 1500 usecs"

    def test_corrected_mentions_bits(self, caplog):
        """Verify corrected measurements note the repair."""
        caplog.set_level(logging.INFO)
        LoggingReporter().report(ok(0, 2.0, corrected=3))

        assert "Delay 2000 usecs" in caplog.text
        assert "3 bits corrected" in caplog.text

    def test_suspect_logs_warning(self, caplog):
        """Verify SUSPECT measurements log at WARNING with the reason."""
        caplog.set_level(logging.INFO)
        LoggingReporter().report(suspect(4))

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "FUTURE_TIMESTAMP" in record.getMessage()

    def test_failed_logs_error(self, caplog):
        """Verify FAILED measurements log at ERROR with the reason."""
        caplog.set_level(logging.INFO)
        LoggingReporter().report(failed(7))

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert "INTEGRITY_CHECK_FAILED" in record.getMessage()

    def test_custom_logger(self, caplog):
        """Verify a caller-provided logger is used."""
        caplog.set_level(logging.INFO)
        LoggingReporter(logging.getLogger("latency.sink")).report(ok(0, 1.0))
        assert caplog.records[-1].name == "latency.sink"


class TestCompositeReporter:
    """Tests for fan-out."""

    def test_forwards_to_all(self):
        """Verify every child sees every measurement."""
        first, second = CollectingReporter(), CollectingReporter()
        composite = CompositeReporter([first, second])
        measurement = ok(0, 1.0)

        composite.report(measurement)

        assert first.measurements == [measurement]
        assert second.measurements == [measurement]


class TestLatencyStatistics:
    """Tests for the rolling summary."""

    def test_empty_snapshot(self):
        """Verify latency figures are None before any accepted delta."""
        snapshot = LatencyStatistics().snapshot()
        assert snapshot.count == 0
        assert snapshot.mean_ms is None
        assert snapshot.p95_ms is None
        assert snapshot.failure_rate == 0.0

    def test_latency_figures(self):
        """Verify mean, extremes and percentiles in milliseconds."""
        stats = LatencyStatistics()
        for sequence, delta in enumerate([1, 2, 3, 4, 5]):
            stats.report(ok(sequence, delta))

        snapshot = stats.snapshot()

        assert snapshot.count == 5
        assert snapshot.mean_ms == 3.0
        assert snapshot.min_ms == 1.0
        assert snapshot.max_ms == 5.0
        assert snapshot.p50_ms == 3.0
        assert snapshot.p95_ms == pytest.approx(4.8)

    def test_window_evicts_oldest(self):
        """Verify only the most recent deltas are kept."""
        stats = LatencyStatistics(window=3)
        for sequence, delta in enumerate([100, 1, 2, 3]):
            stats.report(ok(sequence, delta))

        snapshot = stats.snapshot()

        assert snapshot.count == 3
        assert snapshot.max_ms == 3.0
        assert snapshot.total_frames == 4

    def test_only_accepted_deltas_counted(self):
        """Verify SUSPECT and FAILED do not feed the latency window."""
        stats = LatencyStatistics()
        stats.report(ok(0, 10))
        stats.report(suspect(1))
        stats.report(failed(2))

        snapshot = stats.snapshot()

        assert snapshot.count == 1
        assert snapshot.mean_ms == 10.0
        assert snapshot.status_counts == {"OK": 1, "CORRECTED": 0, "SUSPECT": 1, "FAILED": 1}
        assert snapshot.failure_rate == pytest.approx(1 / 3)

    def test_longest_failure_run(self):
        """Verify consecutive failures are tracked."""
        stats = LatencyStatistics()
        pattern = [failed, ok, failed, failed, failed, ok, failed]
        for sequence, make in enumerate(pattern):
            stats.report(make(sequence) if make is failed else make(sequence, 1))

        snapshot = stats.snapshot()

        assert snapshot.failure_count == 5
        assert snapshot.longest_failure_run == 3

    def test_sequence_gaps(self):
        """Verify skipped sequence numbers are counted."""
        stats = LatencyStatistics()
        for sequence in (0, 1, 5, 6, 9):
            stats.report(ok(sequence, 1))

        assert stats.snapshot().sequence_gaps == 2

    def test_reset(self):
        """Verify reset clears everything."""
        stats = LatencyStatistics()
        stats.report(failed(0))
        stats.report(ok(3, 1))

        stats.reset()

        snapshot = stats.snapshot()
        assert snapshot.total_frames == 0
        assert snapshot.sequence_gaps == 0
        assert snapshot.longest_failure_run == 0

    def test_invalid_window(self):
        """Verify the window must hold at least one delta."""
        with pytest.raises(ValueError):
            LatencyStatistics(window=0)

    def test_to_dict(self):
        """Verify the exported summary."""
        stats = LatencyStatistics()
        stats.report(ok(0, 2))

        summary = stats.snapshot().to_dict()

        assert summary["count"] == 1
        assert summary["p50_ms"] == 2.0
        assert summary["status_counts"]["OK"] == 1
