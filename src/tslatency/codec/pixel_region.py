"""
Pixel Region Codec
==================

Bit-level transport between a bit vector and the pixels of a Region.

The codec knows nothing about what the bits mean. It splits the Region
into square cells, one bit per cell, scanned row-major from the top-left:

    +----+----+----+----+
    | b0 | b1 | b2 | b3 |   cell_size x cell_size pixels each
    +----+----+----+----+
    | b4 | b5 | ...     |
    +----+----+---------+

Writing fills a cell with one of two saturating levels (0 for bit 0, 255
for bit 1). Reading samples the inner pixels of each cell and votes
against the midpoint threshold; samples within `tolerance` of the
threshold abstain so compression noise near mid-gray cannot flip a cell.

Only the carrier channels are touched: luma for YUV formats, every color
channel for RGB formats (alpha and padding bytes are left alone).
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from tslatency.errors import ConfigurationError, PayloadTooLarge
from tslatency.models.frame import VideoFrame, VideoInfo
from tslatency.models.region import Region


logger = logging.getLogger(__name__)


LEVEL_ZERO = 0
LEVEL_ONE = 255
THRESHOLD = (LEVEL_ZERO + LEVEL_ONE) / 2.0

# Cells this large or larger skip a one-pixel guard ring when sampling
GUARD_MIN_CELL_SIZE = 4


@dataclass(frozen=True, slots=True)
class CellReadout:
    """
    Bits classified from a frame.

    Attributes:
        bits: uint8 vector of 0/1 decisions, one per requested cell
        ambiguous_cells: Cells decided by the mean fallback (vote tie)
    """

    bits: np.ndarray
    ambiguous_cells: int


class PixelRegionCodec:
    """
    Writes and reads one bit per cell inside a fixed Region.

    All validation happens in the constructor: format support, region
    containment and cell geometry. Per-frame calls only check that the
    frame matches the validated geometry and that the bit count fits.

    Attributes:
        info: Frame geometry the codec was validated against
        region: Stamp rectangle
        cell_size: Edge length of a cell in pixels
        tolerance: Vote dead-band around the threshold
        capacity: Number of whole cells in the region (bits)

    Example:
        codec = PixelRegionCodec(VideoInfo("I420", 1920, 1080), Region())
        codec.write(frame, bits)
        readout = codec.read(frame, len(bits))
    """

    def __init__(
        self,
        info: VideoInfo,
        region: Region,
        cell_size: int = 4,
        tolerance: int = 5,
    ) -> None:
        """
        Validate the region against the frame geometry.

        Args:
            info: Negotiated frame geometry
            region: Stamp rectangle
            cell_size: Pixels per cell edge
            tolerance: Samples within this distance of the threshold abstain

        Raises:
            UnsupportedFormat: If info carries an unknown format
            RegionOutOfBounds: If the region is not inside the frame
            ValueError: If cell_size or tolerance is out of range
        """
        if cell_size < 1:
            raise ValueError("cell_size must be >= 1")
        if not 0 <= tolerance < THRESHOLD:
            raise ValueError(f"tolerance must be in [0, {int(THRESHOLD)}]")

        region.check_bounds(info.width, info.height)

        self.info = info
        self.region = region
        self.cell_size = cell_size
        self.tolerance = tolerance
        self.rows, self.cols = region.cell_grid(cell_size)
        self.capacity = self.rows * self.cols
        self._margin = 1 if cell_size >= GUARD_MIN_CELL_SIZE else 0

        logger.info(
            f"PixelRegionCodec initialized: format={info.format.value}, "
            f"region={region}, cell={cell_size}px, capacity={self.capacity} bits"
        )

    def write(self, frame: VideoFrame, bits: Union[Sequence[int], np.ndarray]) -> None:
        """
        Write bits into the region, overwriting every region pixel.

        Cells past the last bit and the partial-cell margin are set to the
        zero level.

        Args:
            frame: Writable frame matching the validated geometry
            bits: 0/1 values in transmission order

        Raises:
            PayloadTooLarge: If there are more bits than cells
            ConfigurationError: If the frame geometry differs
            ValueError: If the frame is read-only
        """
        self._check_frame(frame)
        if not frame.writable:
            raise ValueError(f"{frame!r} is read-only")

        bits = np.asarray(bits, dtype=np.uint8).reshape(-1)
        self._check_capacity(bits.size)

        grid = np.zeros(self.capacity, dtype=np.uint8)
        grid[:bits.size] = bits & 1
        levels = np.where(grid, LEVEL_ONE, LEVEL_ZERO).astype(np.uint8)
        levels = levels.reshape(self.rows, self.cols)
        block = np.repeat(np.repeat(levels, self.cell_size, axis=0), self.cell_size, axis=1)

        r = self.region
        target = frame.carrier()[r.y:r.bottom, r.x:r.right, :]
        target[...] = LEVEL_ZERO
        target[:block.shape[0], :block.shape[1], :] = block[:, :, np.newaxis]

    def read(self, frame: VideoFrame, bit_count: int) -> CellReadout:
        """
        Classify the first `bit_count` cells of the region.

        Args:
            frame: Frame matching the validated geometry (not modified)
            bit_count: Number of cells to classify

        Returns:
            CellReadout with one 0/1 decision per cell

        Raises:
            PayloadTooLarge: If bit_count exceeds the capacity
            ConfigurationError: If the frame geometry differs
        """
        self._check_frame(frame)
        self._check_capacity(bit_count)
        if bit_count == 0:
            return CellReadout(bits=np.zeros(0, dtype=np.uint8), ambiguous_cells=0)

        cs = self.cell_size
        m = self._margin
        r = self.region
        view = frame.carrier()[r.y:r.y + self.rows * cs, r.x:r.x + self.cols * cs, :]
        channels = view.shape[2]

        cells = view.reshape(self.rows, cs, self.cols, cs, channels)
        inner = cells[:, m:cs - m, :, m:cs - m, :]
        samples = inner.transpose(0, 2, 1, 3, 4).reshape(self.capacity, -1)
        samples = samples[:bit_count].astype(np.float32) - THRESHOLD

        ones = np.count_nonzero(samples > self.tolerance, axis=1)
        zeros = np.count_nonzero(samples < -self.tolerance, axis=1)
        bits = (ones > zeros).astype(np.uint8)

        tie = ones == zeros
        ambiguous = int(np.count_nonzero(tie))
        if ambiguous:
            bits[tie] = samples[tie].mean(axis=1) > 0
            logger.debug(f"{ambiguous} ambiguous cells in {frame!r}")

        return CellReadout(bits=bits, ambiguous_cells=ambiguous)

    def _check_frame(self, frame: VideoFrame) -> None:
        if frame.info != self.info:
            raise ConfigurationError(
                f"Frame geometry {frame.info} differs from negotiated {self.info}"
            )

    def _check_capacity(self, bit_count: int) -> None:
        if bit_count > self.capacity:
            raise PayloadTooLarge(bit_count, self.capacity)
