"""
Configuration surface for base fee simulations

Pydantic models for request validation, plus defaults and named presets.
These models reject what the engine would otherwise silently clamp, and
convert to the frozen core types.
"""

import json
import logging
import warnings
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .core.parameters import BaseFeeParameters, Segment, Strategy
from .core.validation import MAX_EXPANDED_BLOCKS

logger = logging.getLogger(__name__)


DEFAULT_PARAMETERS = BaseFeeParameters()

PRESETS: Dict[str, Dict[str, Any]] = {
    # Constant 2% step outside a 10-33% dead band
    "linear": {
        "strategy": Strategy.LINEAR,
        "base_fee_change_rate_pct": 2.0,
        "k": 0.0,
    },
    "gentle-quadratic": {
        "strategy": Strategy.WEIGHTED_QUADRATIC,
        "base_fee_change_rate_pct": 2.0,
        "k": 2.0,
    },
    # Up to 11x the base step at full or empty blocks
    "aggressive-quadratic": {
        "strategy": Strategy.WEIGHTED_QUADRATIC,
        "base_fee_change_rate_pct": 2.0,
        "k": 10.0,
    },
}


class BaseFeeParametersRequest(BaseModel):
    """Request model for simulation parameters."""
    gas_limit: int = Field(DEFAULT_PARAMETERS.gas_limit, ge=0, description="Gas capacity per block")

    increasing_threshold_pct: float = Field(
        DEFAULT_PARAMETERS.increasing_threshold_pct, ge=0.0, le=100.0,
        description="Utilization above which the fee rises"
    )
    decreasing_threshold_pct: float = Field(
        DEFAULT_PARAMETERS.decreasing_threshold_pct, ge=0.0, le=100.0,
        description="Utilization below which the fee falls"
    )
    base_fee_change_rate_pct: float = Field(
        DEFAULT_PARAMETERS.base_fee_change_rate_pct, ge=0.0, allow_inf_nan=False,
        description="Percentage step per block"
    )

    min_base_fee_wei: int = Field(DEFAULT_PARAMETERS.min_base_fee_wei, ge=0, description="Minimum and starting fee (wei)")
    max_base_fee_wei: int = Field(DEFAULT_PARAMETERS.max_base_fee_wei, ge=0, description="Maximum fee (wei)")

    strategy: Strategy = Field(DEFAULT_PARAMETERS.strategy, description="Adjustment strategy")
    k: float = Field(DEFAULT_PARAMETERS.k, ge=0.0, allow_inf_nan=False, description="Curvature weight")

    @model_validator(mode='after')
    def warn_on_collapsed_range(self):
        """Min above max is clamped by the engine, not rejected."""
        if self.min_base_fee_wei > self.max_base_fee_wei:
            warnings.warn(
                f"min_base_fee_wei {self.min_base_fee_wei:,} exceeds max_base_fee_wei "
                f"{self.max_base_fee_wei:,}; the fee is pinned at the minimum",
                UserWarning,
                stacklevel=2
            )
        return self

    def to_parameters(self) -> BaseFeeParameters:
        return BaseFeeParameters(**self.model_dump())


class SegmentRequest(BaseModel):
    """Request model for one utilization segment."""
    blocks: int = Field(..., ge=0, description="Number of blocks")
    utilization_pct: float = Field(..., ge=0.0, le=100.0, description="Gas used percentage")

    def to_segment(self) -> Segment:
        return Segment(blocks=self.blocks, utilization_pct=self.utilization_pct)


class SimulationRequest(BaseModel):
    """Request model for a full simulation."""
    parameters: BaseFeeParametersRequest = Field(default_factory=BaseFeeParametersRequest)
    segments: List[SegmentRequest] = Field(default_factory=list)

    @field_validator('segments', mode='before')
    @classmethod
    def parse_segment_strings(cls, v):
        """Accept "<blocks>x<pct>" shorthand alongside mappings."""
        if isinstance(v, list):
            return [parse_segment(s) if isinstance(s, str) else s for s in v]
        return v

    @field_validator('segments')
    @classmethod
    def validate_total_blocks(cls, v):
        total = sum(s.blocks for s in v)
        if total > MAX_EXPANDED_BLOCKS:
            raise ValueError(f"segments expand to {total:,} blocks, above the limit of {MAX_EXPANDED_BLOCKS:,}")
        return v

    def to_parameters(self) -> BaseFeeParameters:
        return self.parameters.to_parameters()

    def to_segments(self) -> List[Segment]:
        return [s.to_segment() for s in self.segments]


# === LOADERS ===

def parse_segment(text: str) -> Dict[str, Any]:
    """
    Parse "<blocks>x<pct>" (e.g. "3x50", "10x12.5") into segment fields.

    Raises:
        ValueError: If text is not in that form
    """
    blocks, sep, pct = text.strip().lower().partition('x')
    if not sep:
        raise ValueError(f"Segment {text!r} must look like <blocks>x<pct>, e.g. 3x50")
    try:
        return {"blocks": int(blocks), "utilization_pct": float(pct)}
    except ValueError:
        raise ValueError(f"Segment {text!r} must look like <blocks>x<pct>, e.g. 3x50")


def preset_parameters(name: str, **overrides: Any) -> BaseFeeParametersRequest:
    """
    Build parameters from a named preset with optional overrides.

    Raises:
        KeyError: If the preset does not exist
    """
    if name not in PRESETS:
        raise KeyError(f"Unknown preset {name!r}, expected one of: {', '.join(PRESETS)}")
    values = {**PRESETS[name], **{k: v for k, v in overrides.items() if v is not None}}
    return BaseFeeParametersRequest(**values)


def load_config(data: Mapping[str, Any], preset: Optional[str] = None) -> SimulationRequest:
    """
    Validate a configuration mapping.

    A "preset" key (or the preset argument) seeds the parameters; explicit
    parameter values override it.
    """
    data = dict(data)
    preset = preset or data.pop("preset", None)
    if preset is not None:
        data["parameters"] = preset_parameters(preset, **dict(data.get("parameters") or {}))
    return SimulationRequest.model_validate(data)


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON configuration file without validating it.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    logger.debug(f"Loading configuration from {path}")
    with open(path, 'r') as f:
        return json.load(f)


def load_config_file(path: Union[str, Path]) -> SimulationRequest:
    """Load and validate a JSON configuration file."""
    return load_config(read_config_file(path))
