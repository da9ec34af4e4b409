"""
Resampling engine.

Three strategies produce a new surface at the target size:
- standard: one unsmoothed blit, staged like multistep below half scale
- lanczos: windowed-sinc convolution, used at every scale factor
- multistep: staged 30% reductions for large shrinks, smoothing enabled
"""

import logging
import math
from typing import List, Tuple

import numpy as np

from core.constants import TransformConstants
from core.enums import Algorithm
from core.image.backends import SurfaceBackend
from core.image.surface import Drawable, PixelSurface, Rect
from transforms.kernels import distance_weight, round_half_up

logger = logging.getLogger(__name__)


def plan_multistep(
    source_width: int, source_height: int, target_width: int, target_height: int
) -> List[Tuple[int, int]]:
    """
    Compute the intermediate sizes of a staged downscale.

    Returns an empty list when the scale factor is at least
    MULTISTEP_THRESHOLD (a single blit suffices). Otherwise returns
    ceil(log2(1 / scale)) sizes; every stage shrinks by
    MULTISTEP_REDUCTION without passing the target, and the last one
    is exactly the target.
    """
    scale = min(target_width / source_width, target_height / source_height)
    if scale >= TransformConstants.MULTISTEP_THRESHOLD:
        return []

    steps = math.ceil(math.log2(1 / scale))
    reduction = TransformConstants.MULTISTEP_REDUCTION
    width, height = source_width, source_height
    plan = []
    for step in range(steps):
        if step == steps - 1:
            width, height = target_width, target_height
        else:
            width = max(target_width, round_half_up(width * reduction))
            height = max(target_height, round_half_up(height * reduction))
        plan.append((width, height))
    return plan


class Resampler:
    """Produces resized surfaces with a selectable quality strategy."""

    def __init__(self, backend: SurfaceBackend, radius: int = TransformConstants.LANCZOS_RADIUS):
        """
        Initialize resampler.

        Args:
            backend: Surface backend used for allocation and blits
            radius: Lanczos support radius in source pixels
        """
        self.backend = backend
        self.radius = radius

    def resample(
        self, source: Drawable, target_width: int, target_height: int, algorithm: Algorithm
    ) -> PixelSurface:
        """
        Resize source to (target_width, target_height).

        Args:
            source: Source image or surface
            target_width: Output width
            target_height: Output height
            algorithm: Strategy to use

        Returns:
            New surface owned by the caller

        Raises:
            SurfaceUnavailable: If the backend cannot allocate a surface
        """
        logger.debug(
            f"Resampling {source.width}x{source.height} -> {target_width}x{target_height} "
            f"with {Algorithm(algorithm).value}"
        )
        if algorithm == Algorithm.LANCZOS:
            return self.resize_lanczos(source, target_width, target_height)
        if algorithm == Algorithm.MULTISTEP:
            return self.resize_multistep(source, target_width, target_height)
        return self.resize_standard(source, target_width, target_height)

    def resize_standard(self, source: Drawable, target_width: int, target_height: int) -> PixelSurface:
        """Single unsmoothed blit; large shrinks take the staged path."""
        plan = plan_multistep(source.width, source.height, target_width, target_height)
        if plan:
            return self._run_stages(source, plan)

        surface = self.backend.create(target_width, target_height)
        self.backend.draw(surface, source, dest_rect=Rect(0, 0, target_width, target_height))
        return surface

    def resize_multistep(self, source: Drawable, target_width: int, target_height: int) -> PixelSurface:
        """Staged downscale; falls back to one smoothed blit for mild reductions."""
        plan = plan_multistep(source.width, source.height, target_width, target_height)
        if plan:
            return self._run_stages(source, plan)

        surface = self.backend.create(target_width, target_height)
        self.backend.draw(surface, source, dest_rect=Rect(0, 0, target_width, target_height), smoothing=True)
        return surface

    def _run_stages(self, source: Drawable, plan: List[Tuple[int, int]]) -> PixelSurface:
        current = self.backend.create(source.width, source.height)
        self.backend.draw(current, source)

        for step_width, step_height in plan:
            stage = self.backend.create(step_width, step_height)
            self.backend.draw(stage, current, dest_rect=Rect(0, 0, step_width, step_height), smoothing=True)
            logger.debug(f"Multistep stage {current.width}x{current.height} -> {step_width}x{step_height}")
            current = stage

        return current

    def resize_lanczos(self, source: Drawable, target_width: int, target_height: int) -> PixelSurface:
        """
        Windowed-sinc resample.

        Each destination pixel (x, y) maps to source point
        (x * src_w / dst_w, y * src_h / dst_h). Source pixels between
        floor(p - radius) and ceil(p + radius) on each axis contribute with
        weight L(distance / radius); non-positive weights are skipped and the
        sum is normalized. The loops run over kernel taps, vectorized across
        the whole destination grid.
        """
        staging = self.backend.create(source.width, source.height)
        self.backend.draw(staging, source)
        src = self.backend.get_pixels(staging).astype(np.float64)
        src_height, src_width = src.shape[:2]

        src_x = np.arange(target_width, dtype=np.float64) * (src_width / target_width)
        src_y = np.arange(target_height, dtype=np.float64) * (src_height / target_height)

        taps_x = self._taps(src_x, src_width)
        taps_y = self._taps(src_y, src_height)

        accum = np.zeros((target_height, target_width, src.shape[2]), dtype=np.float64)
        weight_sum = np.zeros((target_height, target_width), dtype=np.float64)

        for sy, valid_y in taps_y:
            dy = (src_y - sy)[:, None]
            rows = src[np.clip(sy, 0, src_height - 1)]
            for sx, valid_x in taps_x:
                dx = (src_x - sx)[None, :]
                weight = distance_weight(dx, dy, self.radius)
                weight = weight * (valid_y[:, None] & valid_x[None, :])
                if not weight.any():
                    continue
                samples = rows[:, np.clip(sx, 0, src_width - 1)]
                accum += samples * weight[..., None]
                weight_sum += weight

        with np.errstate(divide="ignore", invalid="ignore"):
            normalized = np.where(weight_sum[..., None] > 0, accum / weight_sum[..., None], accum)

        pixels = np.clip(round_half_up(normalized), 0, 255).astype(np.uint8)
        surface = self.backend.create(target_width, target_height)
        self.backend.put_pixels(surface, pixels)
        return surface

    def _taps(self, positions: np.ndarray, limit: int) -> List[Tuple[np.ndarray, np.ndarray]]:
        """
        Candidate source indices along one axis, one entry per tap.

        Returns (index, valid) pairs; index is floor(p - radius) + k and valid
        marks indices inside [floor(p - radius), ceil(p + radius)] and the image.
        """
        start = np.floor(positions - self.radius).astype(np.int64)
        end = np.ceil(positions + self.radius).astype(np.int64)
        taps = []
        for k in range(2 * self.radius + 2):
            index = start + k
            valid = (index >= 0) & (index <= limit - 1) & (index <= end)
            taps.append((index, valid))
        return taps
