"""
Tests for the resampling engine
"""

import numpy as np
import pytest

from core.enums import Algorithm
from core.image.surface import PixelSource, Rect
from transforms.resampler import Resampler, plan_multistep


class TestPlanMultistep:
    """Test staged downscale planning"""

    def test_mild_reduction_needs_no_stages(self):
        assert plan_multistep(100, 100, 60, 60) == []

    def test_half_scale_needs_no_stages(self):
        assert plan_multistep(200, 100, 100, 50) == []

    def test_tenth_scale_stage_count(self):
        plan = plan_multistep(1000, 1000, 100, 100)
        assert len(plan) == 4
        assert plan[-1] == (100, 100)

    def test_stages_shrink_by_reduction_factor(self):
        plan = plan_multistep(1000, 1000, 100, 100)
        assert plan[:3] == [(700, 700), (490, 490), (343, 343)]

    def test_stages_never_pass_target(self):
        plan = plan_multistep(1000, 800, 90, 200)
        widths = [w for w, _ in plan]
        heights = [h for _, h in plan]
        assert all(w >= 90 for w in widths)
        assert all(h >= 200 for h in heights)
        assert widths == sorted(widths, reverse=True)
        assert plan[-1] == (90, 200)


class TestResampler:
    """Test Resampler strategies on every backend"""

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_output_size(self, backend, test_source, algorithm):
        surface = Resampler(backend).resample(test_source, 100, 75, algorithm)
        assert surface.size == (100, 75)

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_upscale_output_size(self, backend, gradient_source, algorithm):
        surface = Resampler(backend).resample(gradient_source, 48, 36, algorithm)
        assert surface.size == (48, 36)

    def test_multistep_large_shrink(self, backend, test_source):
        surface = Resampler(backend).resample(test_source, 20, 15, Algorithm.MULTISTEP)
        assert surface.size == (20, 15)
        assert surface.pixels[..., 3].min() == 255

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_source_is_not_modified(self, backend, test_source, algorithm):
        before = test_source.pixels.copy()
        Resampler(backend).resample(test_source, 50, 50, algorithm)
        np.testing.assert_array_equal(test_source.pixels, before)

    def test_lanczos_identity_on_linear_gradient(self, backend, gradient_source):
        surface = Resampler(backend).resize_lanczos(gradient_source, 32, 24)
        interior = surface.pixels[:, 3:-3].astype(int)
        expected = gradient_source.pixels[:, 3:-3].astype(int)
        assert np.abs(interior - expected).max() <= 1

    def test_lanczos_preserves_uniform_color(self, backend):
        pixels = np.zeros((48, 64, 4), dtype=np.uint8)
        pixels[:] = (10, 200, 30, 255)
        surface = Resampler(backend).resize_lanczos(PixelSource(pixels), 16, 12)
        assert (surface.pixels == np.array([10, 200, 30, 255], dtype=np.uint8)).all()

    def test_lanczos_downscale_averages_stripes(self, backend):
        pixels = np.zeros((40, 40, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        pixels[:, ::2, :3] = 255
        surface = Resampler(backend).resize_lanczos(PixelSource(pixels), 10, 10)
        center = surface.pixels[3:7, 3:7, 0].astype(int)
        assert 64 < center.mean() < 192

    def test_standard_mild_scale_is_single_blit(self, backend, test_source):
        direct = backend.create(300, 225)
        backend.draw(direct, test_source, dest_rect=Rect(0, 0, 300, 225))
        surface = Resampler(backend).resize_standard(test_source, 300, 225)
        np.testing.assert_array_equal(surface.pixels, direct.pixels)

    def test_standard_large_shrink_matches_multistep_stages(self, backend, monkeypatch):
        pixels = np.zeros((1000, 1000, 4), dtype=np.uint8)
        pixels[..., 0] = 200
        pixels[..., 3] = 255
        source = PixelSource(pixels)

        created = []
        allocate = backend.create

        def recording_create(width, height):
            created.append((int(width), int(height)))
            return allocate(width, height)

        monkeypatch.setattr(backend, "create", recording_create)
        resampler = Resampler(backend)

        surface = resampler.resample(source, 100, 100, Algorithm.STANDARD)
        standard_sizes = list(created)
        created.clear()
        resampler.resample(source, 100, 100, Algorithm.MULTISTEP)

        assert surface.size == (100, 100)
        assert standard_sizes == created
        assert standard_sizes[1:] == plan_multistep(1000, 1000, 100, 100)
