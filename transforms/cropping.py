"""
Crop-shape clipping.

Cuts a circle, square, rectangle or rounded rectangle out of a surface.
The crop box is positioned by gravity: a named anchor or an explicit offset.
Offsets are not bounds-checked; areas outside the source come out
transparent.
"""

import logging
from typing import Optional, Tuple, Union

from core.constants import TransformConstants
from core.enums import CropShapeType, Gravity
from core.image.backends import SurfaceBackend
from core.image.surface import ClipPath, PixelSurface, Rect
from schemas.transform import CropShape, GravityOffset

logger = logging.getLogger(__name__)


def crop_size(shape: CropShape, width: int, height: int) -> Tuple[int, int]:
    """Crop box size for a shape on a width x height surface."""
    shape_type = CropShapeType(shape.type)
    if shape_type in (CropShapeType.CIRCLE, CropShapeType.SQUARE):
        side = min(width, height)
        return side, side
    return shape.width or width, shape.height or height


def gravity_offset(
    gravity: Optional[Union[Gravity, GravityOffset]],
    width: int,
    height: int,
    crop_width: int,
    crop_height: int,
) -> Tuple[float, float]:
    """
    Top-left corner of the crop box.

    Named positions are flush along the named axis and centered along the
    other; center, auto and missing gravity center both ways. An explicit
    offset is returned verbatim.
    """
    if isinstance(gravity, GravityOffset):
        return gravity.x, gravity.y

    center_x = (width - crop_width) / 2
    center_y = (height - crop_height) / 2
    right = width - crop_width
    bottom = height - crop_height

    offsets = {
        Gravity.TOP: (center_x, 0),
        Gravity.BOTTOM: (center_x, bottom),
        Gravity.LEFT: (0, center_y),
        Gravity.RIGHT: (right, center_y),
        Gravity.TOP_LEFT: (0, 0),
        Gravity.TOP_RIGHT: (right, 0),
        Gravity.BOTTOM_LEFT: (0, bottom),
        Gravity.BOTTOM_RIGHT: (right, bottom),
    }
    return offsets.get(gravity, (center_x, center_y))


def clip_path(shape: CropShape, crop_width: int, crop_height: int) -> ClipPath:
    """Clip path for a shape; rounded corners shrink to fit the box."""
    shape_type = CropShapeType(shape.type)
    if shape_type == CropShapeType.CIRCLE:
        return ClipPath(CropShapeType.CIRCLE, crop_width, crop_height)

    if shape_type == CropShapeType.ROUNDED_RECT:
        radius = shape.radius or TransformConstants.DEFAULT_CORNER_RADIUS
        if crop_width < 2 * radius:
            radius = crop_width / 2
        if crop_height < 2 * radius:
            radius = crop_height / 2
        return ClipPath(CropShapeType.ROUNDED_RECT, crop_width, crop_height, radius)

    return ClipPath(CropShapeType.RECTANGLE, crop_width, crop_height)


def clip_shape(
    surface: PixelSurface,
    shape: Optional[CropShape],
    gravity: Optional[Union[Gravity, GravityOffset]],
    backend: SurfaceBackend,
) -> PixelSurface:
    """
    Cut shape out of surface onto a new surface.

    Args:
        surface: Input surface
        shape: Crop shape, or None for no crop
        gravity: Anchor for the crop box
        backend: Surface backend

    Returns:
        New clipped surface, or the input unchanged when shape is None
    """
    if shape is None:
        return surface

    crop_width, crop_height = crop_size(shape, surface.width, surface.height)
    offset_x, offset_y = gravity_offset(gravity, surface.width, surface.height, crop_width, crop_height)

    cropped = backend.create(crop_width, crop_height)
    backend.clip(cropped, clip_path(shape, crop_width, crop_height))
    backend.draw(
        cropped,
        surface,
        src_rect=Rect(offset_x, offset_y, crop_width, crop_height),
        dest_rect=Rect(0, 0, crop_width, crop_height),
    )

    logger.debug(
        f"Cropped {shape.type} {crop_width}x{crop_height} at ({offset_x}, {offset_y}) "
        f"from {surface.width}x{surface.height}"
    )
    return cropped
