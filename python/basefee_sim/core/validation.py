"""
Caller-facing input validation

The engine itself never rejects numeric input: it clamps and coerces. This
module holds the structural checks a caller runs before invoking it, most
importantly the cap on expanded blocks that bounds memory use.
"""

import logging
from functools import wraps
from typing import Iterable

from .parameters import BaseFeeParameters, Segment, Strategy
from .segments import total_blocks

logger = logging.getLogger(__name__)


MAX_EXPANDED_BLOCKS = 1_000_000


class SimulationInputError(ValueError):
    """Raised when simulation input is structurally invalid"""
    pass


class InvalidParameterError(SimulationInputError):
    """Raised when a parameter cannot be normalized by the engine"""
    pass


class SegmentLimitError(SimulationInputError):
    """Raised when segments expand to more blocks than allowed"""
    pass


# === VALIDATION FUNCTIONS ===

def validate_parameters(params: BaseFeeParameters) -> BaseFeeParameters:
    """
    Reject parameters that are structurally invalid.

    Out-of-range thresholds, rates and k are not errors here; the engine
    normalizes them.

    Raises:
        InvalidParameterError: On negative gas limit, negative fee bounds or
            an unknown strategy
    """
    if params.gas_limit < 0:
        raise InvalidParameterError(f"gas_limit must be non-negative, got {params.gas_limit}")
    if params.min_base_fee_wei < 0:
        raise InvalidParameterError(f"min_base_fee_wei must be non-negative, got {params.min_base_fee_wei}")
    if params.max_base_fee_wei < 0:
        raise InvalidParameterError(f"max_base_fee_wei must be non-negative, got {params.max_base_fee_wei}")

    try:
        Strategy(params.strategy)
    except ValueError:
        valid = ", ".join(s.value for s in Strategy)
        raise InvalidParameterError(f"Unknown strategy {params.strategy!r}, expected one of: {valid}")

    if params.decreasing_threshold_pct > params.increasing_threshold_pct:
        logger.warning(
            f"decreasing_threshold_pct {params.decreasing_threshold_pct} exceeds "
            f"increasing_threshold_pct {params.increasing_threshold_pct}: dead band is empty"
        )

    return params


def validate_segments(segments: Iterable[Segment], max_blocks: int = MAX_EXPANDED_BLOCKS) -> int:
    """
    Check the expanded length of segments against a cap.

    Returns:
        Number of blocks the segments expand to

    Raises:
        SegmentLimitError: If the expansion would exceed max_blocks
    """
    count = total_blocks(segments)
    if count > max_blocks:
        raise SegmentLimitError(
            f"Segments expand to {count:,} blocks, above the limit of {max_blocks:,}"
        )
    return count


# === DECORATORS ===

def validate_simulation_inputs(func):
    """Validate (params, segments) on a simulation method before running it."""
    @wraps(func)
    def wrapper(self, segments: Iterable[Segment], *args, **kwargs):
        segments = list(segments)
        validate_parameters(self.params)
        validate_segments(segments, self.max_blocks)
        return func(self, segments, *args, **kwargs)
    return wrapper
