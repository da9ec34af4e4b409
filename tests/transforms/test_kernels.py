"""
Tests for resampling kernel math
"""

import numpy as np
import pytest

from transforms.kernels import distance_weight, lanczos, round_half_up


class TestRoundHalfUp:
    """Test rounding helper"""

    def test_ties_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2

    def test_scalar_returns_int(self):
        assert isinstance(round_half_up(1.2), int)

    def test_array_input(self):
        result = round_half_up(np.array([0.5, 1.49, 1.5]))
        np.testing.assert_array_equal(result, [1.0, 1.0, 2.0])


class TestLanczos:
    """Test windowed-sinc kernel"""

    def test_center_weight_is_one(self):
        assert lanczos(0) == 1.0

    def test_zero_outside_support(self):
        assert lanczos(3) == 0.0
        assert lanczos(4.2) == 0.0

    def test_zero_at_integers(self):
        assert lanczos(1) == pytest.approx(0.0, abs=1e-12)
        assert lanczos(2) == pytest.approx(0.0, abs=1e-12)

    def test_positive_main_lobe(self):
        assert 0 < lanczos(0.5) < 1

    def test_negative_side_lobe(self):
        assert lanczos(1.5) < 0

    def test_broadcasts(self):
        weights = lanczos(np.array([0.0, 0.5, 3.0]))
        assert weights.shape == (3,)
        assert weights[0] == 1.0
        assert weights[2] == 0.0


class TestDistanceWeight:
    """Test 2-D distance weighting"""

    def test_origin(self):
        assert distance_weight(0, 0) == 1.0

    def test_distance_is_normalized_by_radius(self):
        # distance 1.5 -> kernel input 0.5
        assert distance_weight(1.5, 0) == pytest.approx(lanczos(0.5))

    def test_negative_weights_dropped(self):
        # distance 4.5 -> kernel input 1.5, a negative lobe
        assert distance_weight(4.5, 0) == 0.0

    def test_radial_symmetry(self):
        assert distance_weight(1, 2) == pytest.approx(distance_weight(2, -1))
