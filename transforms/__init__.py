"""
Transform algorithms.

- kernels: Lanczos weights and rounding helpers
- dimensions: Target size resolution
- resampler: standard / lanczos / multistep resizing
- rotation: Rotation with canvas growth
- cropping: Gravity-aware crop-shape clipping
- sharpen: Local-contrast sharpening
"""

from transforms.cropping import clip_shape
from transforms.dimensions import resolve_dimensions
from transforms.resampler import Resampler, plan_multistep
from transforms.rotation import rotate
from transforms.sharpen import sharpen

__all__ = [
    "Resampler",
    "clip_shape",
    "plan_multistep",
    "resolve_dimensions",
    "rotate",
    "sharpen",
]
