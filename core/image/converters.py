"""
Image format conversion utilities.

Handles conversions between different image representations:
- NumPy arrays (OpenCV BGR/BGRA or grayscale)
- PIL Images (any mode)
- RGBA rasters used by the transform pipeline
- Base64 strings and data URLs
"""

import base64
import binascii
import io
import logging
import re
from typing import Union

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

_DATA_URL_PATTERN = re.compile(r"^data:(?P<media_type>[\w/+.-]*)(?P<params>(;[\w=.-]+)*);base64,(?P<data>.*)$", re.S)


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def pil_to_rgba(image: Image.Image) -> np.ndarray:
        """
        Convert a PIL Image of any mode to an (H, W, 4) uint8 RGBA array.

        Args:
            image: PIL Image

        Returns:
            RGBA NumPy array
        """
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return np.array(image, dtype=np.uint8)

    @staticmethod
    def rgba_to_pil(pixels: np.ndarray) -> Image.Image:
        """Convert an RGBA array to a PIL Image."""
        return Image.fromarray(np.ascontiguousarray(pixels))

    @staticmethod
    def numpy_to_rgba(image: np.ndarray, bgr: bool = True) -> np.ndarray:
        """
        Convert a NumPy image to RGBA.

        Args:
            image: Grayscale (H, W), 3-channel or 4-channel array
            bgr: If True, 3/4-channel input is in OpenCV channel order

        Returns:
            RGBA NumPy array (uint8)
        """
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)

        if image.ndim == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)

        channels = image.shape[2]
        if channels == 1:
            return cv2.cvtColor(image[..., 0], cv2.COLOR_GRAY2RGBA)
        if channels == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA if bgr else cv2.COLOR_RGB2RGBA)
        if channels == 4:
            return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA) if bgr else image.copy()

        raise ValueError(f"Unsupported channel count: {channels}")

    @staticmethod
    def to_base64(data: Union[bytes, bytearray]) -> str:
        """Encode raw bytes as a base64 string."""
        return base64.b64encode(bytes(data)).decode("utf-8")

    @staticmethod
    def to_data_url(data: Union[bytes, bytearray], media_type: str) -> str:
        """
        Build a data URL from encoded image bytes.

        Args:
            data: Encoded image bytes
            media_type: MIME type, e.g. "image/png"

        Returns:
            "data:<media_type>;base64,<payload>"
        """
        return f"data:{media_type};base64,{ImageConverters.to_base64(data)}"

    @staticmethod
    def from_base64(value: str) -> bytes:
        """
        Decode a base64 string or data URL into raw bytes.

        Raises:
            ValueError: If the payload is not valid base64
        """
        match = _DATA_URL_PATTERN.match(value.strip())
        payload = match.group("data") if match else value

        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Failed to decode base64 image: {e}")
            raise ValueError(f"Invalid base64 image data: {e}") from e

    @staticmethod
    def is_data_url(value: str) -> bool:
        """Check whether a string is a base64 data URL."""
        return bool(_DATA_URL_PATTERN.match(value.strip()))

    @staticmethod
    def decode_bytes(data: bytes) -> np.ndarray:
        """
        Decode encoded image bytes (PNG, JPEG, WebP, ...) to RGBA.

        Raises:
            ValueError: If Pillow cannot identify the image
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                return ImageConverters.pil_to_rgba(image)
        except (OSError, Image.DecompressionBombError) as e:
            logger.error(f"Failed to decode image bytes: {e}")
            raise ValueError(f"Cannot decode image: {e}") from e
