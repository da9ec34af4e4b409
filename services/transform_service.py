"""
Transform Service - runs the pixel pipeline for one image.

Stage order is fixed: resolve dimensions -> resample -> rotate ->
crop-shape clip -> sharpen. Rotation works on the resized image, the crop
box is taken from the rotated result, and sharpening runs on the final
pixels.
"""

import logging
from dataclasses import dataclass

from core.image.backends import SurfaceBackend
from core.image.surface import Drawable, PixelSurface
from core.utils.decorators import timer
from schemas.transform import TransformDirectives
from transforms.cropping import clip_shape
from transforms.dimensions import resolve_dimensions
from transforms.resampler import Resampler
from transforms.rotation import rotate
from transforms.sharpen import sharpen

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Final surface plus the output settings for the encoder."""

    surface: PixelSurface
    format: str
    quality: float
    processing_time_ms: float = 0.0

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height


class TransformPipeline:
    """
    Synchronous transform pipeline.

    Holds no per-call state; one instance can serve any number of calls.
    """

    def __init__(self, backend: SurfaceBackend):
        """
        Initialize pipeline.

        Args:
            backend: Surface backend used by every stage
        """
        self.backend = backend
        self.resampler = Resampler(backend)

    def run(self, source: Drawable, directives: TransformDirectives) -> TransformResult:
        """
        Apply directives to source.

        Args:
            source: Decoded input image (never modified)
            directives: Transform directives

        Returns:
            TransformResult with the final surface and resolved format/quality

        Raises:
            SurfaceUnavailable: If a surface cannot be allocated
        """
        with timer() as t:
            resize = directives.resize
            target_width, target_height = resolve_dimensions(source.width, source.height, resize)

            surface = self.resampler.resample(source, target_width, target_height, directives.algorithm)

            if directives.rotate:
                surface = rotate(surface, directives.rotate, self.backend)

            if directives.crop_shape is not None:
                gravity = resize.gravity if resize is not None else None
                surface = clip_shape(surface, directives.crop_shape, gravity, self.backend)

            if directives.sharpen > 0:
                sharpen(surface, directives.sharpen, self.backend)

        logger.info(
            f"Transformed {source.width}x{source.height} -> {surface.width}x{surface.height} "
            f"({directives.algorithm.value}) in {t['ms']} ms"
        )
        return TransformResult(
            surface=surface,
            format=directives.format,
            quality=directives.quality,
            processing_time_ms=t["ms"],
        )
