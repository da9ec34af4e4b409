"""
Image loader - turns caller-supplied descriptors into a PixelSource.

Decoding is CPU-bound and runs in a worker thread, so load() is the single
await point of a transform call.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np
from PIL import Image

from core.enums import DeliveryType
from core.exceptions import LoadError
from core.image.converters import ImageConverters
from core.image.surface import PixelSource

logger = logging.getLogger(__name__)


class ImageLoader:
    """
    Default loader.

    Accepted descriptors:
    - bytes / bytearray / memoryview with encoded image data
    - pathlib.Path or a filesystem path string
    - base64 string or data URL
    - file-like objects with read()
    - PIL Images
    - NumPy arrays (RGBA, RGB or grayscale; bgr flag selects channel order)
    - an existing PixelSource (returned as-is)
    """

    def __init__(self, bgr: bool = False):
        """
        Initialize loader.

        Args:
            bgr: Treat 3/4-channel NumPy input as OpenCV BGR(A)
        """
        self.bgr = bgr

    async def load(self, descriptor: Any, delivery: Optional[DeliveryType] = None) -> PixelSource:
        """
        Load and decode a descriptor.

        Args:
            descriptor: Image descriptor (see class docstring)
            delivery: Optional delivery hint

        Returns:
            Read-only PixelSource

        Raises:
            LoadError: If the source cannot be read or decoded
        """
        if delivery == DeliveryType.FETCH:
            logger.debug("Delivery hint 'fetch' supplied; loading through default loader")
        return await asyncio.to_thread(self.load_sync, descriptor)

    def load_sync(self, descriptor: Any) -> PixelSource:
        """Blocking variant of load()."""
        if isinstance(descriptor, PixelSource):
            return descriptor

        try:
            pixels = self._decode(descriptor)
            source = PixelSource(pixels)
        except LoadError:
            raise
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load image: {e}")
            raise LoadError(f"Failed to load image: {e}") from e

        logger.debug(f"Loaded {source}")
        return source

    def _decode(self, descriptor: Any) -> np.ndarray:
        if isinstance(descriptor, np.ndarray):
            return ImageConverters.numpy_to_rgba(descriptor, bgr=self.bgr)

        if isinstance(descriptor, Image.Image):
            return ImageConverters.pil_to_rgba(descriptor)

        if isinstance(descriptor, (bytes, bytearray, memoryview)):
            return ImageConverters.decode_bytes(bytes(descriptor))

        if isinstance(descriptor, Path):
            return ImageConverters.decode_bytes(descriptor.read_bytes())

        if isinstance(descriptor, str):
            return self._decode_string(descriptor)

        if hasattr(descriptor, "read"):
            return ImageConverters.decode_bytes(descriptor.read())

        raise LoadError(f"Unsupported image source type: {type(descriptor).__name__}")

    def _decode_string(self, value: str) -> np.ndarray:
        if value.startswith(("http://", "https://")):
            raise LoadError(f"Remote sources need a network-capable loader: {value}")

        if ImageConverters.is_data_url(value):
            return ImageConverters.decode_bytes(ImageConverters.from_base64(value))

        path = Path(value)
        if len(value) < 4096 and path.is_file():
            return ImageConverters.decode_bytes(path.read_bytes())

        # Anything else is treated as a bare base64 payload
        return ImageConverters.decode_bytes(ImageConverters.from_base64(value))
