from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_LIVENESS_BUFFER_SIZE,
    DEFAULT_LIVENESS_MAX_MISSED_TICKS,
    DEFAULT_LIVENESS_MIN_SAMPLES,
    DEFAULT_LIVENESS_MIN_TICKS,
    DEFAULT_LIVENESS_TIMEOUT_SECONDS,
    DEFAULT_LIVENESS_VERDICT_TTL_SECONDS,
    DEFAULT_MOVEMENT_THRESHOLD_PX,
    DEFAULT_REFERENCE_FRAME_WIDTH,
)
from ..core.enums import LivenessVerdict


@dataclass(frozen=True)
class PositionSample:
    """Face centroid at a monotonic instant (seconds)."""

    timestamp: float
    x: float
    y: float


@dataclass(frozen=True)
class LivenessConfig:
    timeout_seconds: float = DEFAULT_LIVENESS_TIMEOUT_SECONDS
    buffer_size: int = DEFAULT_LIVENESS_BUFFER_SIZE
    min_samples: int = DEFAULT_LIVENESS_MIN_SAMPLES
    min_ticks: int = DEFAULT_LIVENESS_MIN_TICKS
    max_missed_ticks: int = DEFAULT_LIVENESS_MAX_MISSED_TICKS
    verdict_ttl_seconds: float = DEFAULT_LIVENESS_VERDICT_TTL_SECONDS
    # Pixels in a frame that is reference_frame_width pixels wide.
    movement_threshold_px: float = DEFAULT_MOVEMENT_THRESHOLD_PX
    reference_frame_width: int = DEFAULT_REFERENCE_FRAME_WIDTH

    def __post_init__(self):
        if self.buffer_size < 2:
            raise ValueError("buffer_size must be at least 2")
        if not 2 <= self.min_samples <= self.buffer_size:
            raise ValueError("min_samples must be between 2 and buffer_size")
        if self.timeout_seconds <= 0 or self.movement_threshold_px <= 0:
            raise ValueError("timeout and movement threshold must be positive")
        if self.reference_frame_width <= 0:
            raise ValueError("reference_frame_width must be positive")

    def movement_threshold_for(self, frame_width: Optional[float]) -> float:
        """Threshold in the caller's coordinate space, scaled by frame width."""
        if not frame_width:
            return self.movement_threshold_px
        return self.movement_threshold_px * float(frame_width) / float(self.reference_frame_width)


@dataclass(frozen=True)
class LivenessStatus:
    """Read-only view of a session for the UI."""

    session_id: str
    verdict: LivenessVerdict
    progress: int
    movement_score: float
    samples: int
    ticks: int
    consumed: bool
    message: str
