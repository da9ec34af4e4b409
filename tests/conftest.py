"""
Pytest configuration and fixtures for Pixel Transform tests
"""

import cv2
import numpy as np
import pytest

from core.image.backends import get_backend
from core.image.surface import PixelSource, PixelSurface


@pytest.fixture(params=["opencv", "pillow"])
def backend(request):
    """Each surface backend in turn"""
    return get_backend(request.param)


@pytest.fixture
def opencv_backend():
    """OpenCV surface backend"""
    return get_backend("opencv")


@pytest.fixture
def test_image():
    """Create an opaque 400x300 RGBA test image"""
    image = np.zeros((300, 400, 4), dtype=np.uint8)
    image[..., 3] = 255
    # Add some content
    cv2.rectangle(image, (50, 50), (200, 200), (255, 255, 255, 255), -1)
    cv2.circle(image, (300, 150), 60, (40, 120, 220, 255), -1)
    cv2.line(image, (0, 299), (399, 0), (255, 0, 0, 255), 3)
    return image


@pytest.fixture
def test_source(test_image):
    """Read-only source wrapping test_image"""
    return PixelSource(test_image)


@pytest.fixture
def png_bytes(test_image):
    """test_image encoded as PNG"""
    success, buffer = cv2.imencode(".png", cv2.cvtColor(test_image, cv2.COLOR_RGBA2BGRA))
    assert success
    return buffer.tobytes()


@pytest.fixture
def wide_source():
    """Opaque 200x100 image, red left half and blue right half"""
    image = np.zeros((100, 200, 4), dtype=np.uint8)
    image[:, :100] = (255, 0, 0, 255)
    image[:, 100:] = (0, 0, 255, 255)
    return PixelSource(image)


@pytest.fixture
def gradient_source():
    """Opaque 32x24 image whose red channel rises linearly left to right"""
    image = np.zeros((24, 32, 4), dtype=np.uint8)
    image[..., 0] = (np.arange(32) * 8).astype(np.uint8)[None, :]
    image[..., 1] = 100
    image[..., 3] = 255
    return PixelSource(image)


def make_surface(width, height, color=(0, 0, 0, 0)):
    """Surface filled with a single RGBA color"""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:] = color
    return PixelSurface(pixels)


@pytest.fixture
def solid_surface():
    """Factory for single-color surfaces"""
    return make_surface
