"""
Frame Transform Interface
=========================

The contract between the hosting pipeline and the two elements.

The host calls validate_configuration() once the frame geometry is known
(caps negotiation) and apply() once per frame. Elements also negotiate
lazily on the first frame, and again whenever the geometry changes.

Design Rules:
    - All configuration errors surface from validate_configuration()
    - apply() is synchronous, bounded by the region size, never blocks
    - Each element instance owns its session; nothing is shared
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from tslatency.codec.pixel_region import PixelRegionCodec
from tslatency.config import StamperConfig
from tslatency.integrity.base import IntegrityScheme
from tslatency.integrity.factory import create_scheme
from tslatency.models.frame import VideoFrame, VideoInfo


logger = logging.getLogger(__name__)


class FrameTransform(Protocol):
    """
    Capability interface implemented by Stamper and Measurer.
    """

    def validate_configuration(self, info: VideoInfo) -> None:
        """
        Check the configuration against negotiated frame geometry.

        Raises:
            ConfigurationError: If the session cannot run on this geometry
        """
        ...

    def apply(self, frame: VideoFrame):
        """Process one frame."""
        ...


@dataclass(frozen=True, slots=True)
class Session:
    """
    Negotiated per-stream state: geometry, codec and scheme.

    Immutable once built; renegotiation replaces the whole session.
    """

    info: VideoInfo
    codec: PixelRegionCodec
    scheme: IntegrityScheme


def negotiate(config: StamperConfig, info: VideoInfo, tolerance: int = 0) -> Session:
    """
    Build a session for a configuration and frame geometry.

    Args:
        config: Stamp or measure configuration
        info: Negotiated frame geometry
        tolerance: Read-side vote dead-band

    Raises:
        RegionOutOfBounds: If the region is outside the frame
        PayloadTooLarge: If the variant's codeword exceeds the region capacity
    """
    codec = PixelRegionCodec(
        info=info,
        region=config.region,
        cell_size=config.cell_size,
        tolerance=tolerance,
    )
    scheme = create_scheme(config.stamper_type, codec.capacity)
    logger.info(
        f"Session negotiated: {info.format.value} {info.width}x{info.height}, "
        f"variant={config.stamper_type.value}, scheme={scheme!r}, "
        f"codeword={scheme.codeword_bits}/{codec.capacity} bits"
    )
    return Session(info=info, codec=codec, scheme=scheme)
