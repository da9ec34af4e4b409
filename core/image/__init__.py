"""
Image handling - modular architecture.

This package provides the pixel-level building blocks of the pipeline:
- surface: PixelSource / PixelSurface containers and geometry
- backends: Surface allocation, blitting, clipping and encoding (OpenCV, Pillow)
- converters: Format conversions (NumPy, PIL, base64, data URLs)
- loader: Async decoding of caller-supplied sources
"""

from core.image.backends import OpenCVBackend, PillowBackend, SurfaceBackend, get_backend
from core.image.converters import ImageConverters
from core.image.loader import ImageLoader
from core.image.surface import ClipPath, PixelSource, PixelSurface, Rect

__all__ = [
    "ClipPath",
    "ImageConverters",
    "ImageLoader",
    "OpenCVBackend",
    "PillowBackend",
    "PixelSource",
    "PixelSurface",
    "Rect",
    "SurfaceBackend",
    "get_backend",
]
