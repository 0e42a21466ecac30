"""
Base Fee Simulator

Deterministic per-block base fee simulation for congestion-responsive fee
markets (EIP-1559 style):

- Segment expansion: run-length utilization to a per-block sequence
- Delta calculation: dead band, linear and weighted-quadratic strategies
- Fixed-point fee updates quantized to basis points

Fees are exact integers throughout; identical inputs give identical series.
"""

__version__ = "1.0.0"

from .core.parameters import Action, BaseFeeParameters, ResultPoint, Segment, Strategy
from .core.segments import expand_segments
from .core.delta_calculator import calculate_delta
from .core.simulation_engine import SimulationEngine, simulate_base_fee
from .metrics.calculator import MetricsCalculator

__all__ = [
    "Action",
    "BaseFeeParameters",
    "ResultPoint",
    "Segment",
    "Strategy",
    "expand_segments",
    "calculate_delta",
    "simulate_base_fee",
    "SimulationEngine",
    "MetricsCalculator",
]
