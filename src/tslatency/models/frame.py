"""
Frame Data Model
================

Video frame buffers as handed over by the hosting pipeline.

A VideoFrame is a thin view over pixel memory: a VideoInfo describing the
negotiated geometry plus one writable numpy array per plane. Nothing here
copies pixel data unless asked to (allocate, to_bytes).

Design Rules:
    - Planes are uint8 arrays shaped (rows, cols, components)
    - Buffers are tightly packed (no row padding)
    - from_buffer() wraps host memory zero-copy, so stamping writes straight
      into the host's buffer
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from tslatency.models.formats import FormatInfo, PixelFormat


BufferLike = Union[bytearray, memoryview, np.ndarray, bytes]


@dataclass(frozen=True, slots=True)
class VideoInfo:
    """
    Negotiated frame geometry.

    Attributes:
        format: Pixel format
        width: Frame width in pixels
        height: Frame height in pixels
    """

    format: PixelFormat
    width: int
    height: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", PixelFormat.parse(self.format))
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def format_info(self) -> FormatInfo:
        return self.format.info

    @property
    def plane_shapes(self) -> Tuple[Tuple[int, int, int], ...]:
        """Array shape of every plane."""
        return tuple(
            plane.shape(self.width, self.height) for plane in self.format_info.planes
        )

    @property
    def size(self) -> int:
        """Total buffer size in bytes."""
        return sum(int(np.prod(shape)) for shape in self.plane_shapes)


@dataclass(frozen=True, slots=True)
class VideoFrame:
    """
    One video frame: geometry plus writable plane arrays.

    Attributes:
        info: Negotiated geometry
        planes: Plane arrays in memory order
    """

    info: VideoInfo
    planes: Tuple[np.ndarray, ...]

    def __post_init__(self) -> None:
        expected = self.info.plane_shapes
        if len(self.planes) != len(expected):
            raise ValueError(
                f"{self.info.format.value} expects {len(expected)} planes, "
                f"got {len(self.planes)}"
            )
        for index, (plane, shape) in enumerate(zip(self.planes, expected)):
            if plane.dtype != np.uint8:
                raise ValueError(f"Plane {index} has dtype {plane.dtype}, expected uint8")
            if plane.shape != shape:
                raise ValueError(
                    f"Plane {index} has shape {plane.shape}, expected {shape}"
                )

    @classmethod
    def allocate(cls, info: VideoInfo, fill: int = 0) -> "VideoFrame":
        """Allocate a new frame with every byte set to `fill`."""
        planes = tuple(
            np.full(shape, fill, dtype=np.uint8) for shape in info.plane_shapes
        )
        return cls(info=info, planes=planes)

    @classmethod
    def from_buffer(cls, buffer: BufferLike, info: VideoInfo) -> "VideoFrame":
        """
        Wrap a tightly packed buffer without copying.

        The planes are views into `buffer`, so writes land in the caller's
        memory. Read-only buffers (bytes) give read-only planes, which is
        enough for measuring but not for stamping.

        Raises:
            ValueError: If the buffer size does not match the geometry, or
                an ndarray is not C-contiguous (a view could not be taken)
        """
        if isinstance(buffer, np.ndarray):
            if not buffer.flags.c_contiguous:
                raise ValueError(
                    "Buffer must be C-contiguous; strided or row-padded arrays "
                    "cannot be wrapped without copying"
                )
            flat = buffer.reshape(-1)
            if flat.dtype != np.uint8:
                raise ValueError(f"Buffer dtype must be uint8, got {flat.dtype}")
        else:
            flat = np.frombuffer(buffer, dtype=np.uint8)

        if flat.size != info.size:
            raise ValueError(
                f"Buffer holds {flat.size} bytes, {info.format.value} "
                f"{info.width}x{info.height} needs {info.size}"
            )

        planes = []
        offset = 0
        for shape in info.plane_shapes:
            length = int(np.prod(shape))
            planes.append(flat[offset:offset + length].reshape(shape))
            offset += length
        return cls(info=info, planes=tuple(planes))

    @classmethod
    def from_array(cls, image: np.ndarray, format: PixelFormat) -> "VideoFrame":
        """
        Wrap a packed (H, W) or (H, W, C) image such as an OpenCV matrix.

        Only single-plane formats can be wrapped this way.
        """
        pixel_format = PixelFormat.parse(format)
        if len(pixel_format.info.planes) != 1:
            raise ValueError(f"{pixel_format.value} is not a packed format")
        if image.ndim == 2:
            image = image[:, :, np.newaxis]
        height, width = image.shape[:2]
        info = VideoInfo(format=pixel_format, width=width, height=height)
        return cls(info=info, planes=(image,))

    @property
    def writable(self) -> bool:
        return all(plane.flags.writeable for plane in self.planes)

    def copy(self) -> "VideoFrame":
        """Deep copy of the frame."""
        return VideoFrame(info=self.info, planes=tuple(p.copy() for p in self.planes))

    def to_bytes(self) -> bytes:
        """Serialize planes back into a tightly packed buffer."""
        return b"".join(np.ascontiguousarray(p).tobytes() for p in self.planes)

    def carrier(self) -> np.ndarray:
        """(H, W, C) view of the channels that carry encoded bits."""
        fmt = self.info.format_info
        return self.planes[0][:, :, fmt.carrier_slice]

    def __repr__(self) -> str:
        """Compact repr that doesn't dump pixel data."""
        return (
            f"VideoFrame(format={self.info.format.value}, "
            f"width={self.info.width}, height={self.info.height})"
        )
