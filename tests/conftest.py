"""
Test Configuration
==================

Pytest fixtures and helpers shared across the tslatency test suite.
"""

import numpy as np
import pytest

from tslatency.clock import ManualClock
from tslatency.config import MeasureConfig, StamperConfig
from tslatency.models.frame import VideoFrame, VideoInfo


# 2023-11-14T22:13:20Z in nanoseconds
SAMPLE_TIMESTAMP_NS = 1_700_000_000_000_000_000


class CollectingReporter:
    """Reporter that keeps every measurement it receives."""

    def __init__(self):
        self.measurements = []

    def report(self, measurement):
        self.measurements.append(measurement)


def invert_cells(frame, region_x, region_y, cell_size, cols, indices):
    """Invert the luma/colour samples of the given cell indices in place."""
    carrier = frame.carrier()
    for index in indices:
        row, col = divmod(index, cols)
        y = region_y + row * cell_size
        x = region_x + col * cell_size
        block = carrier[y:y + cell_size, x:x + cell_size, :]
        block[...] = 255 - block


@pytest.fixture
def i420_info():
    """Provide a 640x480 I420 geometry."""
    return VideoInfo("I420", 640, 480)


@pytest.fixture
def i420_frame(i420_info):
    """Provide a mid-grey I420 frame with distinct chroma planes."""
    frame = VideoFrame.allocate(i420_info, fill=128)
    frame.planes[1][...] = 90
    frame.planes[2][...] = 170
    return frame


@pytest.fixture
def noisy_i420_frame(i420_info):
    """Provide an I420 frame with a noisy luma plane."""
    rng = np.random.default_rng(1234)
    frame = VideoFrame.allocate(i420_info, fill=128)
    frame.planes[0][...] = rng.integers(0, 256, size=frame.planes[0].shape, dtype=np.uint8)
    return frame


@pytest.fixture
def manual_clock():
    """Provide a manual clock starting at the sample timestamp."""
    return ManualClock(start_ns=SAMPLE_TIMESTAMP_NS)


@pytest.fixture
def reporter():
    """Provide a collecting reporter."""
    return CollectingReporter()


@pytest.fixture
def stamper_config():
    """Provide the default 64x64 optimized stamp configuration."""
    return StamperConfig()


@pytest.fixture
def measure_config():
    """Provide the matching measure configuration."""
    return MeasureConfig()
