"""
Core simulation components for the base fee engine.
"""

from .parameters import Action, BaseFeeParameters, FeeDelta, ResultPoint, Segment, Strategy
from .segments import expand_segments
from .delta_calculator import calculate_delta
from .simulation_engine import SimulationEngine, results_to_frame, simulate_base_fee

__all__ = [
    "Action",
    "BaseFeeParameters",
    "FeeDelta",
    "ResultPoint",
    "Segment",
    "Strategy",
    "expand_segments",
    "calculate_delta",
    "simulate_base_fee",
    "results_to_frame",
    "SimulationEngine",
]
