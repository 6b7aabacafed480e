"""
Error Taxonomy
==============

Exceptions raised by the timestamp codec.

Two families with different lifetimes:
    - ConfigurationError: raised while validating a session's configuration
      against the negotiated frame geometry. Fatal to starting the stream.
    - DecodeError: raised per frame by an integrity scheme. The Measurer
      turns these into FAILED measurements; they never abort the pipeline.
"""


class TsLatencyError(Exception):
    """Base class for all tslatency errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(TsLatencyError):
    """Raised when a session configuration cannot be used."""
    pass


class RegionOutOfBounds(ConfigurationError):
    """Raised when the stamp region does not fit inside the frame."""

    def __init__(self, region, frame_width: int, frame_height: int) -> None:
        self.region = region
        self.frame_width = frame_width
        self.frame_height = frame_height
        super().__init__(
            f"Region {region} does not fit in a "
            f"{frame_width}x{frame_height} frame"
        )


class UnsupportedFormat(ConfigurationError):
    """Raised when a pixel format is not in the supported set."""

    def __init__(self, format_name: str) -> None:
        self.format_name = format_name
        super().__init__(f"Unsupported pixel format: {format_name!r}")


class PayloadTooLarge(ConfigurationError):
    """Raised when a codeword needs more cells than the region provides."""

    def __init__(self, bit_count: int, capacity: int) -> None:
        self.bit_count = bit_count
        self.capacity = capacity
        super().__init__(
            f"{bit_count} bits requested but region capacity is {capacity} bits"
        )


# =============================================================================
# Decode Errors
# =============================================================================

class DecodeError(TsLatencyError):
    """Raised when a codeword cannot be turned back into a timestamp."""
    pass


class IntegrityCheckFailed(DecodeError):
    """Raised when a received checksum does not match the payload."""
    pass


class UncorrectableError(DecodeError):
    """Raised when forward error correction cannot repair a codeword."""
    pass
