"""Motion-based liveness check.

A session samples face centroids at a nominal 100 ms cadence and passes once
the face has moved far enough between the oldest and newest buffered sample.
"""

from __future__ import annotations

import logging
import math
import threading
import time
import uuid
from collections import deque
from typing import Callable, Optional

from ..core.enums import LivenessVerdict
from ..core.exceptions import (
    LivenessFailed,
    LivenessNotPassed,
    LivenessTimedOut,
    SessionAlreadyConsumed,
    ValidationError,
)
from .model import LivenessConfig, LivenessStatus, PositionSample

logger = logging.getLogger(__name__)

_MESSAGES = {
    LivenessVerdict.PENDING: "Move your head slowly from left to right",
    LivenessVerdict.PASSED: "Movement detected, liveness verified",
    LivenessVerdict.FAILED: "Liveness check failed",
    LivenessVerdict.TIMED_OUT: "Liveness check timed out",
}


class LivenessSession:
    """State machine: idle -> sampling -> passed | failed | timed_out.

    The caller owns the session. Terminal verdicts never change, and a passed
    session can be consumed exactly once. Use it as a context manager so the
    buffer is released even when the interaction is abandoned.
    """

    def __init__(
        self,
        config: LivenessConfig,
        *,
        session_id: Optional[str] = None,
        frame_width: Optional[float] = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self._config = config
        self._monotonic = monotonic
        self._threshold = config.movement_threshold_for(frame_width)
        self._buffer: deque[PositionSample] = deque(maxlen=config.buffer_size)
        self._started = False
        self._verdict = LivenessVerdict.PENDING
        self._deadline: Optional[float] = None
        self._finished_at: Optional[float] = None
        self._ticks = 0
        self._missed = 0
        self._score = 0.0
        self._progress = 0
        self._consumed = False
        self._consume_lock = threading.Lock()
        self.failure_reason: Optional[str] = None

    # -- lifecycle -----------------------------------------------------

    def start(self) -> "LivenessSession":
        if self._started:
            raise ValidationError("Liveness session already started")
        self._started = True
        self._deadline = self._monotonic() + self._config.timeout_seconds
        logger.debug("Liveness session %s started", self.session_id)
        return self

    def __enter__(self) -> "LivenessSession":
        if not self._started:
            self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.is_sampling:
            self.cancel("session closed")
        self.release()

    def release(self) -> None:
        self._buffer.clear()

    # -- properties ----------------------------------------------------

    @property
    def verdict(self) -> LivenessVerdict:
        return self._verdict

    @property
    def is_sampling(self) -> bool:
        return self._started and self._verdict == LivenessVerdict.PENDING

    @property
    def is_terminal(self) -> bool:
        return self._verdict != LivenessVerdict.PENDING

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def movement_threshold(self) -> float:
        return self._threshold

    @property
    def movement_score(self) -> float:
        return self._score

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def finished_at(self) -> Optional[float]:
        return self._finished_at

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def samples(self) -> tuple[PositionSample, ...]:
        return tuple(self._buffer)

    def status(self) -> LivenessStatus:
        return LivenessStatus(
            session_id=self.session_id,
            verdict=self._verdict,
            progress=self._progress,
            movement_score=round(self._score, 2),
            samples=len(self._buffer),
            ticks=self._ticks,
            consumed=self._consumed,
            message=self.failure_reason if self._verdict == LivenessVerdict.FAILED and self.failure_reason else _MESSAGES[self._verdict],
        )

    # -- transitions ---------------------------------------------------

    def _finish(self, verdict: LivenessVerdict) -> None:
        self._verdict = verdict
        self._finished_at = self._monotonic()
        logger.info("Liveness session %s -> %s after %d ticks", self.session_id, verdict.value, self._ticks)

    def _expire_if_due(self) -> bool:
        if self.is_sampling and self._monotonic() >= self._deadline:
            self._finish(LivenessVerdict.TIMED_OUT)
            self.release()
            return True
        return False

    def poll(self) -> LivenessVerdict:
        """Apply the deadline without a new sample (timer tick with no frame work)."""
        self._expire_if_due()
        return self._verdict

    def add_sample(self, x: float, y: float) -> LivenessVerdict:
        """Record one face centroid; samples after a terminal verdict are ignored."""
        if not self._started:
            raise ValidationError("Liveness session not started")
        if self.is_terminal or self._expire_if_due():
            return self._verdict

        self._buffer.append(PositionSample(timestamp=self._monotonic(), x=float(x), y=float(y)))
        self._ticks += 1
        self._missed = 0

        if len(self._buffer) >= self._config.min_samples and self._ticks >= self._config.min_ticks:
            first, last = self._buffer[0], self._buffer[-1]
            self._score = math.hypot(last.x - first.x, last.y - first.y)
            self._progress = max(self._progress, int(min(self._score / self._threshold, 1.0) * 100))
            if self._score > self._threshold:
                self._finish(LivenessVerdict.PASSED)
        return self._verdict

    def record_no_face(self) -> LivenessVerdict:
        """A sampling tick in which no face was detected."""
        if not self._started:
            raise ValidationError("Liveness session not started")
        if self.is_terminal or self._expire_if_due():
            return self._verdict

        self._ticks += 1
        self._missed += 1
        if self._missed >= self._config.max_missed_ticks:
            self.failure_reason = "No face detected"
            self._finish(LivenessVerdict.FAILED)
            self.release()
        return self._verdict

    def cancel(self, reason: str = "cancelled") -> LivenessVerdict:
        if self.is_sampling or not self._started:
            self._started = True
            self.failure_reason = reason
            self._finish(LivenessVerdict.FAILED)
        self.release()
        return self._verdict

    def consume(self) -> None:
        """Spend a passed verdict on one attendance event.

        Raises LivenessNotPassed, LivenessTimedOut, LivenessFailed or
        SessionAlreadyConsumed.
        """
        with self._consume_lock:
            self._expire_if_due()
            if self._consumed:
                raise SessionAlreadyConsumed()
            if self._verdict == LivenessVerdict.TIMED_OUT:
                raise LivenessTimedOut()
            if self._verdict == LivenessVerdict.FAILED:
                raise LivenessFailed(self.failure_reason and f"Liveness check failed: {self.failure_reason}")
            if self._verdict != LivenessVerdict.PASSED:
                raise LivenessNotPassed()
            if self._monotonic() - self._finished_at > self._config.verdict_ttl_seconds:
                raise LivenessTimedOut("Liveness verification expired, please repeat it")

            self._consumed = True
            self.release()


class LivenessVerifier:
    """Creates liveness sessions that share one configuration and clock."""

    def __init__(self, config: LivenessConfig | None = None, *, monotonic: Callable[[], float] = time.monotonic):
        self._config = config or LivenessConfig()
        self._monotonic = monotonic

    @property
    def config(self) -> LivenessConfig:
        return self._config

    def now(self) -> float:
        return self._monotonic()

    def new_session(self, *, frame_width: Optional[float] = None) -> LivenessSession:
        if frame_width is not None and frame_width <= 0:
            raise ValidationError("frameWidth must be positive")
        return LivenessSession(self._config, frame_width=frame_width, monotonic=self._monotonic)

    def start_session(self, *, frame_width: Optional[float] = None) -> LivenessSession:
        return self.new_session(frame_width=frame_width).start()
