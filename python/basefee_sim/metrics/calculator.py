"""
Metrics Calculation

Summary statistics over a simulated base fee series, computed from the
DataFrame produced by SimulationEngine.simulate_series().
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np
import pandas as pd


REQUIRED_COLUMNS = ('block', 'gas_used', 'gas_used_pct', 'base_fee_wei', 'action', 'clamped')


def calculate_fee_metrics(simulation_df: pd.DataFrame, unit_divisor: float = 1e9) -> Dict[str, float]:
    """
    Calculate key metrics from a simulation frame.

    Args:
        simulation_df: Frame with at least the result point columns
        unit_divisor: Divisor from wei to the display unit (default gwei)

    Returns:
        Dictionary of calculated metrics

    Raises:
        ValueError: If the frame is empty or missing columns
    """
    if len(simulation_df) == 0:
        raise ValueError("Simulation DataFrame is empty")

    missing = [c for c in REQUIRED_COLUMNS if c not in simulation_df.columns]
    if missing:
        raise ValueError(f"Simulation DataFrame missing columns: {missing}")

    fees_wei = [int(f) for f in simulation_df['base_fee_wei']]
    fees = np.array(fees_wei, dtype=float) / unit_divisor
    actions = simulation_df['action'].astype(str)

    metrics: Dict[str, float] = {}
    metrics['blocks'] = len(simulation_df)

    # Fee metrics
    metrics['initial_fee_wei'] = fees_wei[0]
    metrics['final_fee_wei'] = fees_wei[-1]
    metrics['min_fee_wei'] = min(fees_wei)
    metrics['max_fee_wei'] = max(fees_wei)
    metrics['avg_fee_gwei'] = float(np.mean(fees))
    metrics['median_fee_gwei'] = float(np.median(fees))
    metrics['fee_std_gwei'] = float(np.std(fees))
    metrics['fee_p95_gwei'] = float(np.percentile(fees, 95))
    metrics['total_change_pct'] = (
        (fees_wei[-1] - fees_wei[0]) / fees_wei[0] * 100 if fees_wei[0] != 0 else 0.0
    )

    # Action counts
    metrics['increase_blocks'] = int((actions == 'inc').sum())
    metrics['decrease_blocks'] = int((actions == 'dec').sum())
    metrics['hold_blocks'] = int((actions == 'hold').sum())

    # Adjustments the fee bounds cut short or cancelled
    metrics['clamped_adjustments'] = int(simulation_df['clamped'].astype(bool).sum())

    # Utilization
    metrics['avg_utilization_pct'] = float(simulation_df['gas_used_pct'].mean())
    metrics['total_gas_used'] = int(sum(int(g) for g in simulation_df['gas_used']))

    return metrics


@dataclass
class MetricsCalculator:
    """Metrics over simulation frames, reported in a chosen display unit."""
    unit_divisor: float = 1e9  # gwei

    def calculate(self, simulation_df: pd.DataFrame) -> Dict[str, float]:
        return calculate_fee_metrics(simulation_df, self.unit_divisor)

    def summarize(self, simulation_df: pd.DataFrame) -> str:
        """One-line human readable summary."""
        m = self.calculate(simulation_df)
        return (f"{m['blocks']} blocks: fee {m['initial_fee_wei']:,} -> {m['final_fee_wei']:,} wei "
                f"({m['total_change_pct']:+.2f}%), inc={m['increase_blocks']} "
                f"dec={m['decrease_blocks']} hold={m['hold_blocks']} "
                f"clamped={m['clamped_adjustments']}")
