"""
Stamper
=======

Encode side: writes the current clock reading into each frame.

Per frame:
    1. Read the clock
    2. Encode the reading with the session's integrity scheme
    3. Write the codeword into the region

Only the region's pixels change. Work is bounded by the region size and
nothing blocks.
"""

import logging
from typing import Optional

from tslatency.clock import Clock, create_clock
from tslatency.config import StamperConfig
from tslatency.elements.transform import Session, negotiate
from tslatency.models.frame import VideoFrame, VideoInfo


logger = logging.getLogger(__name__)


class Stamper:
    """
    Binary time code stamper.

    Attributes:
        config: Stamp-side configuration (immutable)
        clock: Timestamp source
        frames_stamped: Number of frames processed

    Example:
        stamper = Stamper(StamperConfig(stamper_type="fast-robust"))
        stamper.validate_configuration(VideoInfo("I420", 1920, 1080))

        for frame in frames:
            stamper.apply(frame)
    """

    name = "tslatencystamper"

    def __init__(
        self,
        config: Optional[StamperConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize the stamper.

        Args:
            config: Stamp-side configuration, defaults if None
            clock: Clock to stamp with; defaults to the configured source
        """
        self.config = config if config is not None else StamperConfig()
        self.clock = clock if clock is not None else create_clock(self.config.clock)
        self.frames_stamped: int = 0
        self._session: Optional[Session] = None

        logger.info(
            f"Stamper initialized: region={self.config.region}, "
            f"variant={self.config.stamper_type.description}, clock={self.clock!r}"
        )

    @property
    def session(self) -> Optional[Session]:
        """Current negotiated session, if any."""
        return self._session

    def validate_configuration(self, info: VideoInfo) -> None:
        """
        Negotiate against a frame geometry.

        Raises:
            RegionOutOfBounds: If the region does not fit the frame
            PayloadTooLarge: If the codeword does not fit the region
        """
        self._session = negotiate(self.config, info)

    def apply(self, frame: VideoFrame) -> int:
        """
        Stamp the current time into a frame.

        Args:
            frame: Writable frame

        Returns:
            The stamped timestamp in nanoseconds
        """
        session = self._session
        if session is None or session.info != frame.info:
            logger.info(f"Negotiating stamper for {frame!r}")
            self.validate_configuration(frame.info)
            session = self._session

        timestamp = self.clock.now_ns()
        session.codec.write(frame, session.scheme.encode(timestamp))
        self.frames_stamped += 1

        logger.debug(f"Stamped {timestamp} ns into {frame!r}")
        return timestamp
