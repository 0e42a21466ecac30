"""
Value types shared by the base fee engine.

All types are frozen: parameters are fixed for a simulation run and result
points are never mutated once emitted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .units import GasAmount, Wei, gwei_to_wei


class Strategy(str, Enum):
    """Fee adjustment rule applied outside the dead band."""
    LINEAR = "linear"                          # constant-rate step
    WEIGHTED_QUADRATIC = "weighted-quadratic"  # rate scaled by squared distance


class Action(str, Enum):
    """Direction of the fee adjustment attempted at a block."""
    INC = "inc"
    DEC = "dec"
    HOLD = "hold"


@dataclass(frozen=True)
class BaseFeeParameters:
    """Parameter set for one simulation run."""

    gas_limit: int = 30_000_000                # Gas capacity per block (0 treated as 1)

    increasing_threshold_pct: float = 33.0     # Above this utilization the fee rises
    decreasing_threshold_pct: float = 10.0     # Below this utilization the fee falls
    base_fee_change_rate_pct: float = 2.0      # Percentage step per block

    min_base_fee_wei: int = gwei_to_wei(1)     # Also the starting fee
    max_base_fee_wei: int = gwei_to_wei(1000)

    strategy: Union[Strategy, str] = Strategy.LINEAR
    k: float = 0.0                             # Curvature weight (weighted-quadratic only)

    @property
    def effective_gas_limit(self) -> GasAmount:
        """Gas limit with the zero-capacity case mapped to 1."""
        return GasAmount(1 if self.gas_limit == 0 else self.gas_limit)

    @property
    def is_linear(self) -> bool:
        return self.strategy == Strategy.LINEAR


@dataclass(frozen=True)
class Segment:
    """Run of `blocks` consecutive blocks at `utilization_pct` each."""
    blocks: float
    utilization_pct: float


@dataclass(frozen=True)
class FeeDelta:
    """Signed percentage change and the action it represents."""
    delta_pct: float
    action: Action


@dataclass(frozen=True)
class ResultPoint:
    """Simulated state of one block."""
    block: int
    gas_used: GasAmount
    gas_used_pct: float
    base_fee_wei: Wei
    action: Action
    clamped: bool = False  # Fee bounds altered the adjusted fee
