"""
Rotation with canvas growth.
"""

import logging
import math
from typing import Tuple

import numpy as np

from core.constants import TransformConstants
from core.image.backends import SurfaceBackend
from core.image.surface import PixelSurface
from transforms.kernels import round_half_up

logger = logging.getLogger(__name__)


def normalize_angle(degrees: float) -> float:
    """Map any angle into [0, 360)."""
    turn = TransformConstants.FULL_TURN_DEGREES
    return ((degrees % turn) + turn) % turn


def rotated_bounds(width: int, height: int, degrees: float) -> Tuple[int, int]:
    """Size of the axis-aligned box that holds a width x height rectangle rotated by degrees."""
    radians = math.radians(degrees)
    sin = abs(math.sin(radians))
    cos = abs(math.cos(radians))
    return (
        round_half_up(width * cos + height * sin),
        round_half_up(width * sin + height * cos),
    )


def rotation_matrix(
    width: int, height: int, new_width: int, new_height: int, degrees: float
) -> np.ndarray:
    """
    Canvas-space affine matrix: translate to the new center, rotate,
    then offset by minus half the source size.
    """
    radians = math.radians(degrees)
    sin, cos = math.sin(radians), math.cos(radians)
    cx, cy = width / 2, height / 2
    return np.array(
        [
            [cos, -sin, new_width / 2 - (cos * cx - sin * cy)],
            [sin, cos, new_height / 2 - (sin * cx + cos * cy)],
        ]
    )


def rotate(surface: PixelSurface, degrees: float, backend: SurfaceBackend) -> PixelSurface:
    """
    Rotate surface clockwise (screen coordinates) by degrees.

    The output grows so no corner is clipped; uncovered areas are
    transparent. Returns the input unchanged for a zero angle.
    """
    degrees = normalize_angle(degrees)
    if degrees == 0:
        return surface

    new_width, new_height = rotated_bounds(surface.width, surface.height, degrees)
    rotated = backend.create(new_width, new_height)
    matrix = rotation_matrix(surface.width, surface.height, new_width, new_height, degrees)
    backend.draw_affine(rotated, surface, matrix)

    logger.debug(
        f"Rotated {surface.width}x{surface.height} by {degrees} deg -> {new_width}x{new_height}"
    )
    return rotated
