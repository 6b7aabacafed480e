"""
Data Models
===========

Frame buffers, formats and per-frame results.

Models:
    Formats:
        - PixelFormat, FormatFamily, FormatInfo, PlaneLayout
    Frames:
        - VideoInfo: negotiated geometry
        - VideoFrame: plane arrays over host memory
    Session:
        - Region: the stamp rectangle
        - StamperVariant: integrity scheme identity
    Output:
        - DecodeStatus, ReasonCode, Measurement
"""

from tslatency.models.formats import FormatFamily, FormatInfo, PixelFormat, PlaneLayout
from tslatency.models.frame import VideoFrame, VideoInfo
from tslatency.models.region import Region
from tslatency.models.variant import StamperVariant
from tslatency.models.reason_codes import ReasonCode
from tslatency.models.measurement import DecodeStatus, Measurement

__all__ = [
    # Formats
    "FormatFamily",
    "FormatInfo",
    "PixelFormat",
    "PlaneLayout",
    # Frames
    "VideoInfo",
    "VideoFrame",
    # Session
    "Region",
    "StamperVariant",
    # Output
    "DecodeStatus",
    "ReasonCode",
    "Measurement",
]
