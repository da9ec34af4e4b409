"""
Core modules for the Pixel Transform service
"""

from .exceptions import CancelledError, EncodeUnavailable, LoadError, SurfaceUnavailable, TransformError
from .image import ImageLoader, PixelSource, PixelSurface, SurfaceBackend, get_backend

__all__ = [
    "CancelledError",
    "EncodeUnavailable",
    "LoadError",
    "SurfaceUnavailable",
    "TransformError",
    "ImageLoader",
    "PixelSource",
    "PixelSurface",
    "SurfaceBackend",
    "get_backend",
]
