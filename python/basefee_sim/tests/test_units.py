"""
Unit tests for the integer unit system and fixed-point arithmetic.
"""

import math

import pytest

from basefee_sim.core.units import (
    apply_basis_points, apply_delta_pct, clamp_pct, clamp_wei, gas_used_for,
    gwei_to_wei, non_negative_finite, pct_to_basis_points, wei_to_gwei
)


class TestPercentages:
    """Percentage clamping and coercion."""

    def test_clamp_pct_inside_range(self):
        assert clamp_pct(42.5) == 42.5

    def test_clamp_pct_saturates(self):
        assert clamp_pct(-5) == 0
        assert clamp_pct(150) == 100
        assert clamp_pct(math.inf) == 100
        assert clamp_pct(-math.inf) == 0

    def test_clamp_pct_nan_is_zero(self):
        assert clamp_pct(math.nan) == 0

    def test_non_negative_finite(self):
        assert non_negative_finite(2.5) == 2.5
        assert non_negative_finite(-1) == 0
        assert non_negative_finite(math.inf) == 0
        assert non_negative_finite(math.nan) == 0


class TestFixedPoint:
    """Basis-point quantization and integer fee scaling."""

    def test_quantization_floors(self):
        assert pct_to_basis_points(2) == 200
        assert pct_to_basis_points(2.5) == 250
        assert pct_to_basis_points(0.004) == 0
        assert pct_to_basis_points(-2) == -200
        # Floor, not truncation: tiny negative deltas still round down
        assert pct_to_basis_points(-0.004) == -1

    def test_apply_basis_points_exact(self):
        assert apply_basis_points(100, 200) == 102
        assert apply_basis_points(102, 200) == 104   # 104.04 floored
        assert apply_basis_points(106, -200) == 103  # 103.88 floored

    def test_apply_delta_pct_large_integers(self):
        fee = 10 ** 30 + 7
        assert apply_delta_pct(fee, 2) == (fee * 10200) // 10000

    def test_tiny_negative_delta_moves_fee(self):
        assert apply_delta_pct(10_000, -0.004) == 9_999

    def test_clamp_wei(self):
        assert clamp_wei(50, 100, 200) == 100
        assert clamp_wei(250, 100, 200) == 200
        assert clamp_wei(150, 100, 200) == 150

    def test_clamp_wei_inverted_range_collapses_to_lo(self):
        assert clamp_wei(150, 300, 200) == 300
        assert clamp_wei(10, 300, 200) == 300
        assert clamp_wei(1000, 300, 200) == 300


class TestGas:
    """Gas used derivation."""

    def test_integer_percentages(self):
        assert gas_used_for(1000, 50) == 500
        assert gas_used_for(1000, 5) == 50
        assert gas_used_for(30_000_000, 33) == 9_900_000

    def test_floor_division(self):
        assert gas_used_for(7, 50) == 3

    def test_fractional_percentage_is_exact(self):
        # 33.3 is not exact in binary; gas is computed from its decimal form
        assert gas_used_for(1000, 33.3) == 333
        assert gas_used_for(1000, 12.5) == 125


class TestConversions:
    def test_gwei_round_trip(self):
        assert gwei_to_wei(1.5) == 1_500_000_000
        assert wei_to_gwei(2_000_000_000) == 2.0


class TestOversizedNumbers:
    """Integers beyond float range and float overflow never raise."""

    def test_non_negative_finite_huge_int(self):
        assert non_negative_finite(10 ** 400) == 0
        assert non_negative_finite(-10 ** 400) == 0
        assert non_negative_finite(10 ** 300) == 10 ** 300

    def test_quantization_saturates_on_overflow(self):
        bp = pct_to_basis_points(1e308)
        assert bp > 0
        assert pct_to_basis_points(-1e308) == -bp

    def test_quantization_of_huge_int_delta_is_exact(self):
        assert pct_to_basis_points(10 ** 300) == 10 ** 302
