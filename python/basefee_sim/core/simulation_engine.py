"""
Simulation Engine Implementation

Drives the per-block base fee loop:

- Segment expansion (run-length utilization -> per-block sequence)
- Delta calculation (previous block's utilization -> signed % delta)
- Fixed-point fee update (basis-point quantization, exact integer math)

Block i's fee reacts to block i-1's utilization; block 0 only reports its
own utilization and the starting fee.
"""

import logging
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from ..metrics.calculator import calculate_fee_metrics
from .delta_calculator import calculate_delta
from .parameters import Action, BaseFeeParameters, ResultPoint, Segment
from .segments import expand_segments
from .units import apply_delta_pct, clamp_wei, gas_used_for, wei_to_gwei
from .validation import MAX_EXPANDED_BLOCKS, validate_parameters, validate_simulation_inputs

logger = logging.getLogger(__name__)


RESULT_COLUMNS = ['block', 'gas_used', 'gas_used_pct', 'base_fee_wei', 'action', 'clamped']


def simulate_base_fee(params: BaseFeeParameters, segments: Iterable[Segment]) -> List[ResultPoint]:
    """
    Simulate the base fee over the blocks described by segments.

    Args:
        params: Simulation parameters
        segments: Ordered utilization segments

    Returns:
        One ResultPoint per expanded block, in block order. Empty when the
        segments expand to no blocks.
    """
    gas_limit = params.effective_gas_limit
    min_fee = params.min_base_fee_wei
    max_fee = params.max_base_fee_wei

    base_fee = clamp_wei(min_fee, min_fee, max_fee)

    utilization = expand_segments(segments)
    if not utilization:
        return []

    points = [ResultPoint(
        block=0,
        gas_used=gas_used_for(gas_limit, utilization[0]),
        gas_used_pct=utilization[0],
        base_fee_wei=base_fee,
        action=Action.HOLD,
    )]

    for i in range(1, len(utilization)):
        gas_used_pct = utilization[i]
        delta = calculate_delta(utilization[i - 1], params)

        adjusted = base_fee
        if delta.delta_pct != 0:
            adjusted = apply_delta_pct(base_fee, delta.delta_pct)
        base_fee = clamp_wei(adjusted, min_fee, max_fee)

        points.append(ResultPoint(
            block=i,
            gas_used=gas_used_for(gas_limit, gas_used_pct),
            gas_used_pct=gas_used_pct,
            base_fee_wei=base_fee,
            action=delta.action,
            clamped=base_fee != adjusted,
        ))

    return points


def results_to_frame(points: List[ResultPoint]) -> pd.DataFrame:
    """
    Tabulate result points.

    Adds `base_fee_gwei` for display and `delta_bp`, the realised change
    between consecutive fees in basis points (0 for block 0).
    """
    if not points:
        return pd.DataFrame(columns=RESULT_COLUMNS + ['base_fee_gwei', 'delta_bp'])

    df = pd.DataFrame({
        'block': [p.block for p in points],
        'gas_used': [p.gas_used for p in points],
        'gas_used_pct': [p.gas_used_pct for p in points],
        'base_fee_wei': [p.base_fee_wei for p in points],
        'action': [Action(p.action).value for p in points],
        'clamped': [bool(p.clamped) for p in points],
    })

    fees = [p.base_fee_wei for p in points]
    df['base_fee_gwei'] = [wei_to_gwei(f) for f in fees]

    # Ratios in float are fine here: delta_bp is reporting only
    fee_array = np.array(fees, dtype=float)
    previous = np.concatenate(([fee_array[0]], fee_array[:-1]))
    with np.errstate(divide='ignore', invalid='ignore'):
        delta_bp = np.where(previous != 0, (fee_array / previous - 1) * 10_000, 0.0)
    df['delta_bp'] = np.round(delta_bp, 2)

    return df


class SimulationEngine:
    """
    Base fee simulation engine.

    Wraps simulate_base_fee with input validation, logging and tabular output.
    """

    def __init__(self, params: BaseFeeParameters, max_blocks: int = MAX_EXPANDED_BLOCKS):
        """
        Initialize the simulation engine.

        Args:
            params: Simulation parameters
            max_blocks: Cap on the number of expanded blocks per run

        Raises:
            InvalidParameterError: If params are structurally invalid
        """
        self.params = validate_parameters(params)
        self.max_blocks = max_blocks

    @validate_simulation_inputs
    def simulate(self, segments: Iterable[Segment]) -> List[ResultPoint]:
        """
        Run one simulation.

        Raises:
            SegmentLimitError: If segments expand beyond max_blocks
        """
        logger.debug(f"Simulating {len(segments)} segments with {self}")
        points = simulate_base_fee(self.params, segments)
        if points:
            logger.debug(
                f"Simulated {len(points)} blocks, fee {points[0].base_fee_wei} -> {points[-1].base_fee_wei} wei"
            )
        return points

    def simulate_series(self, segments: Iterable[Segment]) -> pd.DataFrame:
        """Run one simulation and return it as a DataFrame (see results_to_frame)."""
        return results_to_frame(self.simulate(segments))

    def calculate_metrics(self, simulation_df: pd.DataFrame) -> Dict[str, float]:
        """Summary metrics for a frame from simulate_series()."""
        return calculate_fee_metrics(simulation_df)

    def get_parameter_summary(self) -> Dict[str, Any]:
        p = self.params
        return {
            'gas_limit': p.gas_limit,
            'increasing_threshold_pct': p.increasing_threshold_pct,
            'decreasing_threshold_pct': p.decreasing_threshold_pct,
            'base_fee_change_rate_pct': p.base_fee_change_rate_pct,
            'min_base_fee_wei': p.min_base_fee_wei,
            'max_base_fee_wei': p.max_base_fee_wei,
            'strategy': str(getattr(p.strategy, 'value', p.strategy)),
            'k': p.k,
        }

    def __str__(self) -> str:
        """String representation of simulation engine."""
        p = self.params
        strategy = getattr(p.strategy, 'value', p.strategy)
        return (f"SimulationEngine(strategy={strategy}, rate={p.base_fee_change_rate_pct}%, "
                f"band=[{p.decreasing_threshold_pct},{p.increasing_threshold_pct}], k={p.k})")

    def __repr__(self) -> str:
        """Detailed representation of simulation engine."""
        return self.__str__()
