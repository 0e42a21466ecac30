"""
Metrics Module

Summary statistics for simulated base fee series.

Usage:
    from basefee_sim.metrics import MetricsCalculator
"""

from .calculator import MetricsCalculator, calculate_fee_metrics

__all__ = ['MetricsCalculator', 'calculate_fee_metrics']
