"""
Pixel containers used throughout the transform pipeline.

- PixelSource: read-only decoded input image
- PixelSurface: mutable drawable target with a raw RGBA buffer
- Rect / ClipPath: geometry passed to the surface backend
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

import numpy as np

from core.constants import SurfaceConstants
from core.enums import CropShapeType


def _as_rgba(pixels: np.ndarray) -> np.ndarray:
    """Validate that an array is an (H, W, 4) uint8 raster."""
    if pixels.ndim != 3 or pixels.shape[2] != SurfaceConstants.CHANNELS:
        raise ValueError(f"Expected an (H, W, 4) RGBA array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixels, got {pixels.dtype}")
    return pixels


class PixelSource:
    """Read-only decoded image. The pipeline never mutates it."""

    def __init__(self, pixels: np.ndarray):
        pixels = np.array(_as_rgba(pixels), copy=True)
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(f"Source image must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}")
        pixels.flags.writeable = False
        self._pixels = pixels

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def __repr__(self) -> str:
        return f"PixelSource({self.width}x{self.height})"


@dataclass
class PixelSurface:
    """
    Mutable RGBA drawing target.

    Fields:
        pixels: Row-major (H, W, 4) uint8 buffer, unpremultiplied
        clip_mask: Optional (H, W) float32 coverage in [0, 1]; draws are
            multiplied by it, so pixels outside the clip path stay untouched
    """

    pixels: np.ndarray
    clip_mask: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        _as_rgba(self.pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def __repr__(self) -> str:
        clipped = ", clipped" if self.clip_mask is not None else ""
        return f"PixelSurface({self.width}x{self.height}{clipped})"


Drawable = Union[PixelSource, PixelSurface]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in canvas coordinates (may be fractional or negative)."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def of(cls, drawable: Drawable) -> "Rect":
        """Full-size rectangle covering a surface or source."""
        return cls(0, 0, drawable.width, drawable.height)

    def rounded(self) -> Tuple[int, int, int, int]:
        """Snap to whole pixels (half-up)."""
        return tuple(int(np.floor(v + 0.5)) for v in (self.x, self.y, self.width, self.height))


@dataclass(frozen=True)
class ClipPath:
    """
    Clip path handed to the backend.

    Fields:
        shape: Which outline to rasterize
        width: Path bounding-box width
        height: Path bounding-box height
        radius: Corner radius for rounded rectangles
    """

    shape: CropShapeType
    width: float
    height: float
    radius: float = 0.0
