"""
Measurer
========

Decode side: recovers the stamped time from each frame and reports the
latency against the local clock.

Per frame:
    1. Read the clock (receive time)
    2. Classify the region's cells into bits
    3. Decode the codeword with the session's integrity scheme
    4. Classify the outcome (OK / CORRECTED / SUSPECT / FAILED)
    5. Hand the Measurement to the reporter

A frame that fails to decode is reported as FAILED; it is never an error
for the pipeline. The frame itself is never modified.
"""

import logging
from typing import Optional

from tslatency.clock import Clock, create_clock
from tslatency.config import MeasureConfig
from tslatency.elements.transform import Session, negotiate
from tslatency.errors import IntegrityCheckFailed, UncorrectableError
from tslatency.models.frame import VideoFrame, VideoInfo
from tslatency.models.measurement import DecodeStatus, Measurement
from tslatency.models.reason_codes import ReasonCode
from tslatency.observability.reporter import MeasurementReporter


logger = logging.getLogger(__name__)


class Measurer:
    """
    Binary time code measurer.

    Attributes:
        config: Measure-side configuration (immutable)
        clock: Receive-time source; must match the stamper's clock
        reporter: Optional sink for every Measurement

    Example:
        measurer = Measurer(MeasureConfig(), reporter=LoggingReporter())

        for frame in frames:
            measurement = measurer.apply(frame)
    """

    name = "tslatencymeasure"

    def __init__(
        self,
        config: Optional[MeasureConfig] = None,
        clock: Optional[Clock] = None,
        reporter: Optional[MeasurementReporter] = None,
    ) -> None:
        """
        Initialize the measurer.

        Args:
            config: Measure-side configuration, defaults if None
            clock: Receive clock; defaults to the configured source
            reporter: Receives every Measurement, if set
        """
        self.config = config if config is not None else MeasureConfig()
        self.clock = clock if clock is not None else create_clock(self.config.clock)
        self.reporter = reporter
        self._session: Optional[Session] = None
        self._sequence = 0

        logger.info(
            f"Measurer initialized: region={self.config.region}, "
            f"variant={self.config.stamper_type.value}, "
            f"tolerance={self.config.tolerance}, clock={self.clock!r}"
        )

    @property
    def session(self) -> Optional[Session]:
        """Current negotiated session, if any."""
        return self._session

    @property
    def frames_measured(self) -> int:
        return self._sequence

    def validate_configuration(self, info: VideoInfo) -> None:
        """
        Negotiate against a frame geometry.

        Raises:
            RegionOutOfBounds: If the region does not fit the frame
            PayloadTooLarge: If the codeword does not fit the region
        """
        self._session = negotiate(self.config, info, tolerance=self.config.tolerance)

    def apply(self, frame: VideoFrame) -> Measurement:
        """
        Measure the latency of one frame.

        Args:
            frame: Frame stamped upstream (read only)

        Returns:
            Measurement for this frame
        """
        receive_time = self.clock.now_ns()

        session = self._session
        if session is None or session.info != frame.info:
            logger.info(f"Negotiating measurer for {frame!r}")
            self.validate_configuration(frame.info)
            session = self._session

        sequence = self._sequence
        self._sequence += 1

        readout = session.codec.read(frame, session.scheme.codeword_bits)

        try:
            decoded = session.scheme.decode(readout.bits)
        except IntegrityCheckFailed as e:
            logger.debug(f"Frame {sequence}: {e}")
            measurement = Measurement(
                sequence=sequence,
                status=DecodeStatus.FAILED,
                reason=ReasonCode.INTEGRITY_CHECK_FAILED,
                receive_time_ns=receive_time,
                ambiguous_cells=readout.ambiguous_cells,
            )
        except UncorrectableError as e:
            logger.debug(f"Frame {sequence}: {e}")
            measurement = Measurement(
                sequence=sequence,
                status=DecodeStatus.FAILED,
                reason=ReasonCode.UNCORRECTABLE_ERROR,
                receive_time_ns=receive_time,
                ambiguous_cells=readout.ambiguous_cells,
            )
        else:
            status, reason = self._classify(
                decoded.payload, receive_time, decoded.corrected_bits
            )
            measurement = Measurement(
                sequence=sequence,
                status=status,
                reason=reason,
                receive_time_ns=receive_time,
                stamp_time_ns=decoded.payload,
                delta_ns=receive_time - decoded.payload,
                corrected_bits=decoded.corrected_bits,
                ambiguous_cells=readout.ambiguous_cells,
            )

        if self.reporter is not None:
            self.reporter.report(measurement)

        return measurement

    def _classify(self, stamp_time: int, receive_time: int, corrected_bits: int):
        """Map a decoded timestamp to a status and optional reason."""
        delta = receive_time - stamp_time

        # Small negative deltas are tolerated as clock jitter
        if delta < -self.config.clock_skew_tolerance_ns:
            return DecodeStatus.SUSPECT, ReasonCode.FUTURE_TIMESTAMP

        if delta > self.config.max_latency_ns:
            return DecodeStatus.SUSPECT, ReasonCode.LATENCY_EXCEEDS_MAXIMUM

        if corrected_bits:
            return DecodeStatus.CORRECTED, None

        return DecodeStatus.OK, None
