"""
Delta Calculator

Maps the previous block's utilization to a signed percentage delta.

Rule (thresholds clamped to [0,100], rate and k coerced to >= 0):

Dead band (checked first):
    dec_th <= u <= inc_th            ->  0, hold

Linear:
    u > inc_th                       ->  +rate, inc
    u < dec_th                       ->  -rate, dec

Weighted-quadratic:
    over  = (u - inc_th) / (100 - inc_th)      (0 when inc_th = 100)
    under = (dec_th - u) / dec_th              (0 when dec_th = 0)
    u > inc_th                       ->  +rate * (1 + k * over^2), inc
    u < dec_th                       ->  -rate * (1 + k * under^2), dec

The quadratic term grows the correction the further utilization drifts from
the dead band; at over = under = 0 both strategies agree.
"""

from .parameters import Action, BaseFeeParameters, FeeDelta
from .units import clamp_pct, non_negative_finite


HOLD = FeeDelta(delta_pct=0, action=Action.HOLD)


def overshoot_ratio(utilization_pct: float, increasing_threshold_pct: float) -> float:
    """Normalized distance above the increasing threshold, in [0, 1]."""
    headroom = 100 - increasing_threshold_pct
    if headroom == 0:
        return 0.0
    return (utilization_pct - increasing_threshold_pct) / headroom


def undershoot_ratio(utilization_pct: float, decreasing_threshold_pct: float) -> float:
    """Normalized distance below the decreasing threshold, in [0, 1]."""
    if decreasing_threshold_pct == 0:
        return 0.0
    return (decreasing_threshold_pct - utilization_pct) / decreasing_threshold_pct


def linear_delta(utilization_pct: float, increasing_threshold_pct: float, rate_pct: float) -> FeeDelta:
    """Constant-rate step; assumes the dead band was already excluded."""
    if utilization_pct > increasing_threshold_pct:
        return FeeDelta(delta_pct=+rate_pct, action=Action.INC)
    return FeeDelta(delta_pct=-rate_pct, action=Action.DEC)


def weighted_quadratic_delta(
    utilization_pct: float,
    increasing_threshold_pct: float,
    decreasing_threshold_pct: float,
    rate_pct: float,
    k: float
) -> FeeDelta:
    """Rate scaled by (1 + k * distance^2); assumes the dead band was already excluded."""
    if utilization_pct > increasing_threshold_pct:
        over = overshoot_ratio(utilization_pct, increasing_threshold_pct)
        return FeeDelta(delta_pct=+rate_pct * (1 + k * over ** 2), action=Action.INC)

    under = undershoot_ratio(utilization_pct, decreasing_threshold_pct)
    return FeeDelta(delta_pct=-rate_pct * (1 + k * under ** 2), action=Action.DEC)


def calculate_delta(prev_utilization_pct: float, params: BaseFeeParameters) -> FeeDelta:
    """
    Compute the fee delta reacting to the previous block's utilization.

    Args:
        prev_utilization_pct: Utilization of block i-1, already clamped to [0,100]
        params: Simulation parameters

    Returns:
        FeeDelta with the signed percentage change and its action tag
    """
    inc_th = clamp_pct(params.increasing_threshold_pct)
    dec_th = clamp_pct(params.decreasing_threshold_pct)
    rate = non_negative_finite(params.base_fee_change_rate_pct)

    if dec_th <= prev_utilization_pct <= inc_th:
        return HOLD

    if params.is_linear:
        return linear_delta(prev_utilization_pct, inc_th, rate)

    k = non_negative_finite(params.k)
    return weighted_quadratic_delta(prev_utilization_pct, inc_th, dec_th, rate, k)
