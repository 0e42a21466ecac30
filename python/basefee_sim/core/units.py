"""
Integer unit system for deterministic base fee arithmetic

Fees and gas are carried as Python integers end to end. Percentage deltas are
quantized to basis points before they touch a fee, so a fee series never
depends on platform floating-point rounding.
"""

import math
import sys
from fractions import Fraction
from typing import NewType, Union


# === BASE UNIT TYPES ===

Wei = NewType('Wei', int)                 # Base unit: wei (10^-18 ETH)
GasAmount = NewType('GasAmount', int)     # Gas units
BasisPoints = NewType('BasisPoints', int)  # 1 bp = 0.01%

BASIS_POINTS_PER_UNIT = 10_000  # 100% expressed in basis points
WEI_PER_GWEI = 10 ** 9

Number = Union[int, float]


# === PERCENTAGES ===

def clamp_pct(value: Number, lo: float = 0, hi: float = 100) -> float:
    """
    Clamp a percentage into [lo, hi].

    NaN maps to lo, infinities saturate at the matching bound.
    """
    if isinstance(value, float) and math.isnan(value):
        return lo
    return max(lo, min(hi, value))


def non_negative_finite(value: Number) -> Number:
    """
    Coerce a rate or weight to a non-negative finite number (otherwise 0).

    Integers beyond float range count as non-finite.
    """
    if isinstance(value, int):
        if abs(value) > sys.float_info.max:
            return 0
    elif not math.isfinite(value):
        return 0
    return max(0, value)


# === FIXED POINT ===

def pct_to_basis_points(delta_pct: float) -> BasisPoints:
    """
    Quantize a percentage delta to basis points by flooring.

    +2.5 -> 250, -2 -> -200, 0.004 -> 0

    Deltas that overflow a float saturate at +/-sys.float_info.max.
    """
    scaled = delta_pct * 100
    if isinstance(scaled, float) and math.isinf(scaled):
        scaled = math.copysign(sys.float_info.max, scaled)
    return BasisPoints(math.floor(scaled))


def apply_basis_points(fee: Wei, bp: BasisPoints) -> Wei:
    """Scale a fee by (1 + bp/10000) using exact integer floor division."""
    return Wei(fee * (BASIS_POINTS_PER_UNIT + bp) // BASIS_POINTS_PER_UNIT)


def apply_delta_pct(fee: Wei, delta_pct: float) -> Wei:
    """Apply a percentage delta to a fee through basis-point quantization."""
    return apply_basis_points(fee, pct_to_basis_points(delta_pct))


def clamp_wei(value: Wei, lo: Wei, hi: Wei) -> Wei:
    """
    Clamp a fee into [lo, hi].

    When lo > hi the range collapses to lo.
    """
    return Wei(max(lo, min(hi, value)))


# === GAS ===

def gas_used_for(gas_limit: GasAmount, utilization_pct: Number) -> GasAmount:
    """
    Gas consumed at a utilization percentage: floor(gas_limit * pct / 100).

    The percentage is read as its shortest decimal form (33.3 -> 333/10) so
    the product is exact and independent of binary float representation.
    """
    pct = Fraction(str(utilization_pct))
    return GasAmount(math.floor(gas_limit * pct / 100))


# === CONVERSION UTILITIES ===

def gwei_to_wei(gwei: Number) -> Wei:
    """Convert gwei to wei"""
    return Wei(int(gwei * WEI_PER_GWEI))


def wei_to_gwei(wei: Wei) -> float:
    """Convert wei to gwei (display only)"""
    return wei / WEI_PER_GWEI
