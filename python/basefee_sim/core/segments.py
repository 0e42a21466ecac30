"""
Segment expansion: run-length utilization segments to a per-block sequence.
"""

import math
from typing import Iterable, List

from .parameters import Segment
from .units import clamp_pct


def segment_length(segment: Segment) -> int:
    """Blocks contributed by a segment: max(0, floor(blocks)), 0 if non-finite."""
    blocks = segment.blocks
    if isinstance(blocks, float) and not math.isfinite(blocks):
        return 0
    return max(0, math.floor(blocks))


def total_blocks(segments: Iterable[Segment]) -> int:
    """Length of the expanded sequence, without building it."""
    return sum(segment_length(s) for s in segments)


def expand_segments(segments: Iterable[Segment]) -> List[float]:
    """
    Expand segments into one utilization percentage per block.

    Args:
        segments: Ordered segments; order defines block order

    Returns:
        List of percentages in [0, 100], one per block. Degenerate input
        yields an empty list.
    """
    sequence: List[float] = []
    for segment in segments:
        pct = clamp_pct(segment.utilization_pct)
        sequence.extend([pct] * segment_length(segment))
    return sequence
