"""
Dimension resolution - turns a ResizeDirective into concrete target pixels.
"""

import logging
from typing import Optional, Tuple

from core.enums import CropMode
from schemas.transform import ORIGINAL_ASPECT, ResizeDirective
from transforms.kernels import round_half_up

logger = logging.getLogger(__name__)


def resolve_dimensions(
    source_width: int, source_height: int, directive: Optional[ResizeDirective]
) -> Tuple[int, int]:
    """
    Derive target width and height for a resize.

    Args:
        source_width: Source width in pixels
        source_height: Source height in pixels
        directive: Resize directive (None = keep source size)

    Returns:
        (target_width, target_height), both >= 1

    Raises:
        ValueError: If the source has no area
    """
    if source_width < 1 or source_height < 1:
        raise ValueError(f"Cannot resize a {source_width}x{source_height} source")

    if directive is None:
        return source_width, source_height

    target_height = directive.height or source_height
    target_width = directive.width or source_width
    source_aspect = source_width / source_height

    if directive.aspect_ratio == ORIGINAL_ASPECT:
        if directive.height and not directive.width:
            target_width = round_half_up(target_height * source_aspect)
        elif directive.width and not directive.height:
            target_height = round_half_up(target_width / source_aspect)
    elif directive.aspect_ratio:
        # Explicit ratios always derive width from height
        ratio_w, ratio_h = directive.ratio()
        target_width = round_half_up(target_height * (ratio_w / ratio_h))

    if directive.crop_mode in (CropMode.THUMB, CropMode.THUMBNAIL):
        target_width, target_height = _cover_box(target_width, target_height, source_aspect)

    target_width, target_height = max(1, int(target_width)), max(1, int(target_height))
    logger.debug(
        f"Resolved {source_width}x{source_height} -> {target_width}x{target_height} "
        f"(aspect={directive.aspect_ratio}, crop={directive.crop_mode})"
    )
    return target_width, target_height


def _cover_box(width: int, height: int, source_aspect: float) -> Tuple[int, int]:
    """Grow one side so the box keeps the source aspect while covering (width, height)."""
    if source_aspect > width / height:
        return round_half_up(height * source_aspect), height
    return width, round_half_up(width / source_aspect)
