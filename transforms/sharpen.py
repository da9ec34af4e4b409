"""
Local-contrast sharpening filter.
"""

import logging
from typing import Optional

import numpy as np

from core.constants import TransformConstants
from core.image.backends import SurfaceBackend
from core.image.surface import PixelSurface

logger = logging.getLogger(__name__)


def sharpen_intensity(level: int) -> float:
    """Intensity for a sharpen level (1 = moderate, anything higher = strong)."""
    if level == 1:
        return TransformConstants.SHARPEN_INTENSITY_MODERATE
    return TransformConstants.SHARPEN_INTENSITY_STRONG


def sharpen(surface: PixelSurface, level: Optional[int], backend: SurfaceBackend) -> None:
    """
    Sharpen surface in place.

    Every interior pixel's RGB channels move away from the mean of their
    4-connected neighbours by (current - mean) * intensity, clamped to
    0..255. Reads come from a snapshot taken before any write, so results
    do not depend on scan order. Alpha and the 1-pixel border are untouched.

    Args:
        surface: Surface to modify
        level: 0/None = no-op, 1 = moderate, 2 = strong
        backend: Backend providing raw pixel access
    """
    if not level or level <= 0:
        return
    if surface.width < 3 or surface.height < 3:
        return

    intensity = sharpen_intensity(level)
    data = backend.get_pixels(surface)
    backup = data.astype(np.float64)

    current = backup[1:-1, 1:-1, :3]
    neighbors = (
        backup[:-2, 1:-1, :3]  # north
        + backup[2:, 1:-1, :3]  # south
        + backup[1:-1, :-2, :3]  # west
        + backup[1:-1, 2:, :3]  # east
    ) / 4
    sharpened = current + (current - neighbors) * intensity

    data[1:-1, 1:-1, :3] = np.clip(np.rint(sharpened), 0, 255).astype(np.uint8)
    backend.put_pixels(surface, data)
    logger.debug(f"Sharpened {surface.width}x{surface.height} surface (level={level})")
