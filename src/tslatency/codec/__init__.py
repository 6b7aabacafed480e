"""
Codec Module
============

Pixel-level bit transport.

Components:
    - PixelRegionCodec: bits to/from cells of a Region
    - CellReadout: classified bits plus ambiguity count
"""

from tslatency.codec.pixel_region import (
    LEVEL_ONE,
    LEVEL_ZERO,
    THRESHOLD,
    CellReadout,
    PixelRegionCodec,
)

__all__ = [
    "PixelRegionCodec",
    "CellReadout",
    "LEVEL_ZERO",
    "LEVEL_ONE",
    "THRESHOLD",
]
