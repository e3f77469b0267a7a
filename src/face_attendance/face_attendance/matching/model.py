from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import (
    DEFAULT_MATCH_DISTANCE_THRESHOLD,
    DEFAULT_MATCH_SEPARATION_MARGIN,
    DESCRIPTOR_DIMENSIONS,
)


@dataclass(frozen=True)
class EnrolledDescriptor:
    """The single active face descriptor of one identity (employee or user)."""

    identity_id: int
    vector: tuple[float, ...]
    enrolled_at: datetime


@dataclass(frozen=True)
class MatchPolicy:
    """Decision rule for the matcher.

    ``threshold`` and ``separation_margin`` are Euclidean distances in
    descriptor space. A margin of 0 turns the ambiguity check off, leaving a
    plain nearest-neighbour-under-threshold policy.
    """

    threshold: float = DEFAULT_MATCH_DISTANCE_THRESHOLD
    separation_margin: float = DEFAULT_MATCH_SEPARATION_MARGIN
    dimensions: int = DESCRIPTOR_DIMENSIONS

    def __post_init__(self):
        if self.threshold <= 0:
            raise ValueError("threshold must be positive")
        if self.separation_margin < 0:
            raise ValueError("separation_margin must not be negative")
        if self.dimensions <= 0:
            raise ValueError("dimensions must be positive")


@dataclass(frozen=True)
class MatchResult:
    identity_id: Optional[int]
    distance: float
    confidence: float
    runner_up_distance: Optional[float] = None
    candidates_checked: int = 0

    @property
    def matched(self) -> bool:
        return self.identity_id is not None
