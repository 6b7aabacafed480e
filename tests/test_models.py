"""
Model Tests
===========

Pixel formats, frame buffers, regions, variants and measurements.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from tslatency.errors import RegionOutOfBounds, UnsupportedFormat
from tslatency.models import (
    DecodeStatus,
    FormatFamily,
    Measurement,
    PixelFormat,
    ReasonCode,
    Region,
    StamperVariant,
    VideoFrame,
    VideoInfo,
)


class TestPixelFormat:
    """Tests for format parsing and layout."""

    def test_parse_is_case_insensitive(self):
        """Verify names resolve regardless of case."""
        assert PixelFormat.parse("i420") is PixelFormat.I420
        assert PixelFormat.parse("rgbx") is PixelFormat.RGBX
        assert PixelFormat.parse(PixelFormat.NV12) is PixelFormat.NV12

    def test_parse_unknown_raises(self):
        """Verify unknown formats raise UnsupportedFormat."""
        with pytest.raises(UnsupportedFormat):
            PixelFormat.parse("P010")

    def test_families(self):
        """Verify the color model of representative formats."""
        assert PixelFormat.BGRA.info.family is FormatFamily.RGB
        assert PixelFormat.GRAY8.info.family is FormatFamily.GRAY
        assert PixelFormat.YUY2.info.family is FormatFamily.YUV

    def test_carrier_channels(self):
        """Verify YUV carries luma only and RGB carries all color channels."""
        assert PixelFormat.I420.info.carrier_slice == slice(0, 1)
        assert PixelFormat.RGBA.info.carrier_slice == slice(0, 3)
        assert PixelFormat.ARGB.info.carrier_slice == slice(1, 4)
        assert PixelFormat.UYVY.info.carrier_slice == slice(1, 2)


class TestVideoInfo:
    """Tests for frame geometry."""

    def test_format_from_string(self):
        """Verify the format is normalized to the enum."""
        info = VideoInfo("nv12", 64, 48)
        assert info.format is PixelFormat.NV12

    def test_i420_plane_shapes_round_up(self):
        """Verify odd dimensions round chroma planes up."""
        info = VideoInfo("I420", 101, 51)
        assert info.plane_shapes == ((51, 101, 1), (26, 51, 1), (26, 51, 1))
        assert info.size == 51 * 101 + 2 * 26 * 51

    def test_non_positive_dimensions_raise(self):
        """Verify empty frames are rejected."""
        with pytest.raises(ValueError):
            VideoInfo("RGB", 0, 10)

    def test_equality(self):
        """Verify geometry compares by value."""
        assert VideoInfo("I420", 64, 64) == VideoInfo(PixelFormat.I420, 64, 64)
        assert VideoInfo("I420", 64, 64) != VideoInfo("NV12", 64, 64)


class TestVideoFrame:
    """Tests for frame buffers."""

    def test_allocate(self):
        """Verify allocation fills every plane."""
        frame = VideoFrame.allocate(VideoInfo("NV12", 32, 16), fill=7)
        assert len(frame.planes) == 2
        assert frame.planes[1].shape == (8, 16, 2)
        assert all((p == 7).all() for p in frame.planes)

    def test_from_buffer_is_zero_copy(self):
        """Verify writes through the frame land in the caller's buffer."""
        info = VideoInfo("I420", 8, 4)
        buffer = bytearray(info.size)
        frame = VideoFrame.from_buffer(buffer, info)

        frame.planes[0][0, 0, 0] = 200
        frame.planes[2][0, 0, 0] = 99

        assert buffer[0] == 200
        assert buffer[8 * 4 + 4 * 2] == 99

    def test_from_buffer_bytes_is_read_only(self):
        """Verify immutable buffers give read-only frames."""
        info = VideoInfo("GRAY8", 4, 4)
        frame = VideoFrame.from_buffer(bytes(16), info)
        assert not frame.writable

    def test_from_buffer_wrong_size_raises(self):
        """Verify size mismatches are rejected."""
        with pytest.raises(ValueError):
            VideoFrame.from_buffer(bytearray(10), VideoInfo("GRAY8", 4, 4))

    def test_from_buffer_row_padded_view_raises(self):
        """Verify strided host views are rejected instead of silently copied."""
        host = np.full((64, 100), 128, dtype=np.uint8)
        with pytest.raises(ValueError, match="C-contiguous"):
            VideoFrame.from_buffer(host[:, :64], VideoInfo("GRAY8", 64, 64))
        assert (host == 128).all()

    def test_from_buffer_ndarray_shares_memory(self):
        """Verify contiguous host arrays are wrapped in place."""
        host = np.full((64, 64), 128, dtype=np.uint8)
        frame = VideoFrame.from_buffer(host, VideoInfo("GRAY8", 64, 64))

        frame.planes[0][0, 0, 0] = 7

        assert host[0, 0] == 7
        assert np.shares_memory(frame.planes[0], host)

    def test_from_array_packed(self):
        """Verify OpenCV-style matrices are wrapped."""
        image = np.zeros((10, 20, 3), dtype=np.uint8)
        frame = VideoFrame.from_array(image, "BGR")
        assert frame.info == VideoInfo("BGR", 20, 10)
        assert np.shares_memory(frame.planes[0], image)

    def test_from_array_gray_adds_channel(self):
        """Verify 2-D images gain a component axis."""
        frame = VideoFrame.from_array(np.zeros((4, 6), dtype=np.uint8), "GRAY8")
        assert frame.planes[0].shape == (4, 6, 1)

    def test_from_array_planar_raises(self):
        """Verify planar formats cannot be wrapped from one array."""
        with pytest.raises(ValueError):
            VideoFrame.from_array(np.zeros((6, 4), dtype=np.uint8), "I420")

    def test_wrong_plane_shape_raises(self):
        """Verify plane shapes are checked against the geometry."""
        info = VideoInfo("GRAY8", 4, 4)
        with pytest.raises(ValueError):
            VideoFrame(info=info, planes=(np.zeros((4, 5, 1), dtype=np.uint8),))

    def test_to_bytes_round_trip(self):
        """Verify serialization matches the packed layout."""
        info = VideoInfo("I420", 4, 2)
        data = bytes(range(info.size))
        assert VideoFrame.from_buffer(data, info).to_bytes() == data


class TestRegion:
    """Tests for the stamp rectangle."""

    def test_defaults(self):
        """Verify the default 64x64 region at the origin."""
        region = Region()
        assert (region.x, region.y, region.width, region.height) == (0, 0, 64, 64)
        assert str(region) == "64x64+0+0"

    def test_cell_grid_truncates(self):
        """Verify partial cells are not counted."""
        assert Region(width=66, height=35).cell_grid(4) == (8, 16)

    def test_check_bounds(self):
        """Verify containment checks."""
        region = Region(x=1900, y=0, width=64, height=64)
        assert not region.fits_within(1920, 1080)
        with pytest.raises(RegionOutOfBounds):
            region.check_bounds(1920, 1080)
        Region(x=1856, y=1016).check_bounds(1920, 1080)

    def test_negative_origin_rejected(self):
        """Verify pydantic rejects negative coordinates."""
        with pytest.raises(ValidationError):
            Region(x=-1)


class TestStamperVariant:
    """Tests for variant parsing."""

    def test_default(self):
        """Verify optimized is the default."""
        assert StamperVariant.default() is StamperVariant.OPTIMIZED

    @pytest.mark.parametrize("name", ["fast-robust", "FAST_ROBUST", "fastrobust", " Fast-Robust "])
    def test_fast_robust_aliases(self, name):
        """Verify nicknames resolve to fast-robust."""
        assert StamperVariant.from_str(name) is StamperVariant.FAST_ROBUST

    def test_unknown_raises(self):
        """Verify unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown stamper type"):
            StamperVariant.from_str("turbo")


class TestMeasurement:
    """Tests for the per-frame result."""

    def test_accepted_and_units(self):
        """Verify derived properties."""
        m = Measurement(
            sequence=3,
            status=DecodeStatus.CORRECTED,
            receive_time_ns=2_500_000,
            stamp_time_ns=1_000_000,
            delta_ns=1_500_000,
            corrected_bits=2,
        )
        assert m.accepted
        assert m.delta_us == 1_500
        assert m.delta_ms == 1.5

    def test_failed_has_no_delta(self):
        """Verify FAILED measurements carry no delta."""
        m = Measurement(
            sequence=0,
            status=DecodeStatus.FAILED,
            receive_time_ns=10,
            reason=ReasonCode.UNCORRECTABLE_ERROR,
        )
        assert not m.accepted
        assert m.delta_ms is None

    def test_to_dict(self):
        """Verify the sink event layout."""
        m = Measurement(
            sequence=1,
            status=DecodeStatus.SUSPECT,
            receive_time_ns=0,
            reason=ReasonCode.FUTURE_TIMESTAMP,
            stamp_time_ns=10,
            delta_ns=-10,
        )
        event = m.to_dict()
        assert event["decode_status"] == "SUSPECT"
        assert event["reason"] == "FUTURE_TIMESTAMP"
        assert event["delta_ns"] == -10
