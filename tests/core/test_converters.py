"""
Tests for ImageConverters
"""

import numpy as np
import pytest
from PIL import Image

from core.image.converters import ImageConverters


class TestImageConverters:
    """Test format conversion helpers"""

    def test_data_url_round_trip(self):
        data = b"\x89PNG fake payload"
        url = ImageConverters.to_data_url(data, "image/png")
        assert url.startswith("data:image/png;base64,")
        assert ImageConverters.is_data_url(url)
        assert ImageConverters.from_base64(url) == data

    def test_plain_strings_are_not_data_urls(self):
        assert not ImageConverters.is_data_url("aGVsbG8=")
        assert not ImageConverters.is_data_url("/tmp/image.png")

    def test_from_base64_bare(self):
        assert ImageConverters.from_base64("aGVsbG8=") == b"hello"

    def test_numpy_bgra_to_rgba(self):
        bgra = np.zeros((2, 2, 4), dtype=np.uint8)
        bgra[:] = (1, 2, 3, 4)
        assert tuple(ImageConverters.numpy_to_rgba(bgra)[0, 0]) == (3, 2, 1, 4)
        assert tuple(ImageConverters.numpy_to_rgba(bgra, bgr=False)[0, 0]) == (1, 2, 3, 4)

    def test_numpy_float_is_clipped(self):
        rgb = np.full((2, 2, 3), 300.0)
        assert tuple(ImageConverters.numpy_to_rgba(rgb, bgr=False)[0, 0]) == (255, 255, 255, 255)

    def test_numpy_unsupported_channels(self):
        with pytest.raises(ValueError):
            ImageConverters.numpy_to_rgba(np.zeros((2, 2, 5), dtype=np.uint8))

    def test_pil_round_trip(self):
        pixels = np.zeros((3, 4, 4), dtype=np.uint8)
        pixels[..., 0] = 99
        pixels[..., 3] = 128
        image = ImageConverters.rgba_to_pil(pixels)
        assert image.mode == "RGBA"
        np.testing.assert_array_equal(ImageConverters.pil_to_rgba(image), pixels)

    def test_pil_palette_image(self):
        image = Image.new("P", (4, 4))
        assert ImageConverters.pil_to_rgba(image).shape == (4, 4, 4)

    def test_decode_bytes_rejects_garbage(self):
        with pytest.raises(ValueError):
            ImageConverters.decode_bytes(b"nope")
