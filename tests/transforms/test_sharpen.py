"""
Tests for the sharpen filter
"""

import numpy as np
import pytest

from transforms.sharpen import sharpen, sharpen_intensity


class TestSharpen:
    """Test local-contrast sharpening"""

    @pytest.fixture
    def spot_surface(self, solid_surface):
        """Gray 5x5 surface with one bright pixel in the middle"""
        surface = solid_surface(5, 5, (100, 100, 100, 255))
        surface.pixels[2, 2, :3] = 150
        return surface

    def test_intensity_levels(self):
        assert sharpen_intensity(1) == 0.5
        assert sharpen_intensity(2) == 1.0

    @pytest.mark.parametrize("level", [0, None])
    def test_level_zero_is_bit_identical(self, backend, spot_surface, level):
        before = spot_surface.pixels.copy()
        sharpen(spot_surface, level, backend)
        np.testing.assert_array_equal(spot_surface.pixels, before)

    def test_moderate_level(self, backend, spot_surface):
        sharpen(spot_surface, 1, backend)
        # 150 + (150 - 100) * 0.5
        assert tuple(spot_surface.pixels[2, 2, :3]) == (175, 175, 175)
        # 100 + (100 - (150 + 300) / 4) * 0.5 = 93.75
        assert tuple(spot_surface.pixels[1, 2, :3]) == (94, 94, 94)

    def test_strong_level(self, backend, spot_surface):
        sharpen(spot_surface, 2, backend)
        assert tuple(spot_surface.pixels[2, 2, :3]) == (200, 200, 200)

    def test_reads_from_snapshot(self, backend, spot_surface):
        sharpen(spot_surface, 1, backend)
        # Left and right neighbours see the same original values
        np.testing.assert_array_equal(spot_surface.pixels[2, 1], spot_surface.pixels[2, 3])
        np.testing.assert_array_equal(spot_surface.pixels[1, 2], spot_surface.pixels[3, 2])

    def test_clamps_to_byte_range(self, backend, solid_surface):
        surface = solid_surface(3, 3, (0, 0, 0, 255))
        surface.pixels[1, 1, :3] = 250
        sharpen(surface, 2, backend)
        assert tuple(surface.pixels[1, 1, :3]) == (255, 255, 255)

    def test_border_and_alpha_untouched(self, backend, spot_surface):
        spot_surface.pixels[0, :, :3] = 255
        before = spot_surface.pixels.copy()
        sharpen(spot_surface, 2, backend)
        np.testing.assert_array_equal(spot_surface.pixels[0], before[0])
        np.testing.assert_array_equal(spot_surface.pixels[-1], before[-1])
        np.testing.assert_array_equal(spot_surface.pixels[:, 0], before[:, 0])
        np.testing.assert_array_equal(spot_surface.pixels[:, -1], before[:, -1])
        np.testing.assert_array_equal(spot_surface.pixels[..., 3], before[..., 3])

    def test_uniform_surface_unchanged(self, backend, solid_surface):
        surface = solid_surface(8, 8, (60, 120, 180, 255))
        sharpen(surface, 2, backend)
        assert (surface.pixels == np.array([60, 120, 180, 255], dtype=np.uint8)).all()

    def test_tiny_surface_is_noop(self, backend, solid_surface):
        surface = solid_surface(2, 2, (10, 20, 30, 255))
        surface.pixels[0, 0, :3] = 200
        before = surface.pixels.copy()
        sharpen(surface, 2, backend)
        np.testing.assert_array_equal(surface.pixels, before)
