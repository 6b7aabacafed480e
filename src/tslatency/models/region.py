"""
Region Model
============

The rectangle of a frame that carries the encoded timestamp.

A Region is declared once per session and never changes while streaming.
Containment in the frame is checked when the frame geometry becomes known
(caps negotiation), not per frame.

Example:
    region = Region(x=0, y=0, width=64, height=64)
    region.check_bounds(1920, 1080)
"""

from pydantic import BaseModel, ConfigDict, Field

from tslatency.errors import RegionOutOfBounds


class Region(BaseModel):
    """
    Rectangle in pixel coordinates, origin at the top-left of the frame.

    Attributes:
        x: Left edge (pixels)
        y: Top edge (pixels)
        width: Width (pixels)
        height: Height (pixels)
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(default=0, ge=0, description="Left edge in pixels")
    y: int = Field(default=0, ge=0, description="Top edge in pixels")
    width: int = Field(default=64, ge=1, description="Width in pixels")
    height: int = Field(default=64, ge=1, description="Height in pixels")

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def fits_within(self, frame_width: int, frame_height: int) -> bool:
        """Whether the region lies entirely inside the frame."""
        return self.right <= frame_width and self.bottom <= frame_height

    def check_bounds(self, frame_width: int, frame_height: int) -> None:
        """
        Validate containment in a frame.

        Raises:
            RegionOutOfBounds: If any part of the region is outside the frame
        """
        if not self.fits_within(frame_width, frame_height):
            raise RegionOutOfBounds(self, frame_width, frame_height)

    def cell_grid(self, cell_size: int) -> tuple:
        """Number of whole (rows, cols) cells of `cell_size` pixels."""
        return self.height // cell_size, self.width // cell_size

    def __str__(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"
