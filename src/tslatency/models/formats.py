"""
Pixel Formats
=============

Enumerated pixel formats and their memory layout.

Every frame is stored as a tuple of planes, each a uint8 array shaped
(rows, cols, components). FormatInfo describes those planes and which
channels of plane 0 carry the encoded bits:

    Family   Layout        Carrier
    ------   ------        -------
    RGB      packed        all color channels (alpha/padding untouched)
    GRAY     packed        the single channel
    YUV      planar        luma plane
    YUV      semi-planar   luma plane
    YUV      packed 4:2:2  luma byte of each pixel pair

Chroma is never written: sub-sampling destroys bit-level fidelity there.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from tslatency.errors import UnsupportedFormat


class FormatFamily(str, Enum):
    """Color model of a pixel format."""

    RGB = "RGB"
    GRAY = "GRAY"
    YUV = "YUV"


class PixelFormat(str, Enum):
    """
    Supported 8-bit pixel formats.

    Names follow GStreamer's video format naming so configurations can be
    copied from caps strings.
    """

    # Packed RGB family
    RGB = "RGB"
    BGR = "BGR"
    RGBA = "RGBA"
    BGRA = "BGRA"
    ARGB = "ARGB"
    ABGR = "ABGR"
    RGBX = "RGBx"
    BGRX = "BGRx"
    XRGB = "xRGB"
    XBGR = "xBGR"

    # Gray
    GRAY8 = "GRAY8"

    # Planar YUV
    I420 = "I420"
    YV12 = "YV12"
    Y42B = "Y42B"
    Y444 = "Y444"

    # Semi-planar YUV
    NV12 = "NV12"
    NV21 = "NV21"
    NV16 = "NV16"
    NV61 = "NV61"
    NV24 = "NV24"

    # Packed 4:2:2 YUV
    YUY2 = "YUY2"
    YVYU = "YVYU"
    UYVY = "UYVY"
    VYUY = "VYUY"

    @classmethod
    def parse(cls, value) -> "PixelFormat":
        """
        Resolve a format from an enum member or a case-insensitive name.

        Raises:
            UnsupportedFormat: If the name is not a supported format
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        raise UnsupportedFormat(str(value))

    @property
    def info(self) -> "FormatInfo":
        """Layout description for this format."""
        return _FORMAT_INFO[self]


@dataclass(frozen=True, slots=True)
class PlaneLayout:
    """
    Geometry of one plane relative to the frame size.

    Attributes:
        h_sub: Vertical sub-sampling shift (rows = ceil(height / 2**h_sub))
        w_sub: Horizontal sub-sampling shift (cols = ceil(width / 2**w_sub))
        components: Bytes per plane sample
    """

    h_sub: int
    w_sub: int
    components: int

    def shape(self, width: int, height: int) -> Tuple[int, int, int]:
        """Array shape of this plane for a frame of the given size."""
        rows = -((-height) >> self.h_sub)
        cols = -((-width) >> self.w_sub)
        return rows, cols, self.components


@dataclass(frozen=True, slots=True)
class FormatInfo:
    """
    Memory layout of a pixel format.

    Attributes:
        family: Color model
        planes: Layout of each plane, in memory order
        carrier_offset: First channel of plane 0 that carries bits
        carrier_channels: Number of contiguous carrier channels
    """

    family: FormatFamily
    planes: Tuple[PlaneLayout, ...]
    carrier_offset: int
    carrier_channels: int

    @property
    def carrier_slice(self) -> slice:
        """Channel slice of plane 0 that carries encoded bits."""
        return slice(self.carrier_offset, self.carrier_offset + self.carrier_channels)


def _packed(family: FormatFamily, components: int, offset: int, channels: int) -> FormatInfo:
    return FormatInfo(
        family=family,
        planes=(PlaneLayout(0, 0, components),),
        carrier_offset=offset,
        carrier_channels=channels,
    )


def _planar(*chroma: PlaneLayout) -> FormatInfo:
    return FormatInfo(
        family=FormatFamily.YUV,
        planes=(PlaneLayout(0, 0, 1),) + chroma,
        carrier_offset=0,
        carrier_channels=1,
    )


_RGB = FormatFamily.RGB
_YUV = FormatFamily.YUV

_FORMAT_INFO = {
    PixelFormat.RGB: _packed(_RGB, 3, 0, 3),
    PixelFormat.BGR: _packed(_RGB, 3, 0, 3),
    PixelFormat.RGBA: _packed(_RGB, 4, 0, 3),
    PixelFormat.BGRA: _packed(_RGB, 4, 0, 3),
    PixelFormat.RGBX: _packed(_RGB, 4, 0, 3),
    PixelFormat.BGRX: _packed(_RGB, 4, 0, 3),
    PixelFormat.ARGB: _packed(_RGB, 4, 1, 3),
    PixelFormat.ABGR: _packed(_RGB, 4, 1, 3),
    PixelFormat.XRGB: _packed(_RGB, 4, 1, 3),
    PixelFormat.XBGR: _packed(_RGB, 4, 1, 3),
    PixelFormat.GRAY8: _packed(FormatFamily.GRAY, 1, 0, 1),
    PixelFormat.I420: _planar(PlaneLayout(1, 1, 1), PlaneLayout(1, 1, 1)),
    PixelFormat.YV12: _planar(PlaneLayout(1, 1, 1), PlaneLayout(1, 1, 1)),
    PixelFormat.Y42B: _planar(PlaneLayout(0, 1, 1), PlaneLayout(0, 1, 1)),
    PixelFormat.Y444: _planar(PlaneLayout(0, 0, 1), PlaneLayout(0, 0, 1)),
    PixelFormat.NV12: _planar(PlaneLayout(1, 1, 2)),
    PixelFormat.NV21: _planar(PlaneLayout(1, 1, 2)),
    PixelFormat.NV16: _planar(PlaneLayout(0, 1, 2)),
    PixelFormat.NV61: _planar(PlaneLayout(0, 1, 2)),
    PixelFormat.NV24: _planar(PlaneLayout(0, 0, 2)),
    PixelFormat.YUY2: _packed(_YUV, 2, 0, 1),
    PixelFormat.YVYU: _packed(_YUV, 2, 0, 1),
    PixelFormat.UYVY: _packed(_YUV, 2, 1, 1),
    PixelFormat.VYUY: _packed(_YUV, 2, 1, 1),
}
