from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import OperationalError, RecognitionError
from ..liveness.registry import LivenessSessionRegistry
from ..matching.model import MatchResult
from ..matching.service import FaceProfileService
from ..schedules.service import ScheduleService
from .model import AttendanceEvent, RecognitionAttempt
from .repository import AttendanceEventRepository, RecognitionAttemptRepository
from .resolver import AttendanceEventResolver
from .schemas import VerifyRequest

logger = logging.getLogger(__name__)


class AttendanceService:
    """Verify flow: identify, check liveness, resolve, and log the attempt."""

    def __init__(
        self,
        profiles: FaceProfileService,
        liveness: LivenessSessionRegistry,
        schedules: ScheduleService,
        resolver: AttendanceEventResolver,
        events: AttendanceEventRepository,
        attempts: RecognitionAttemptRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._profiles = profiles
        self._liveness = liveness
        self._schedules = schedules
        self._resolver = resolver
        self._events = events
        self._attempts = attempts
        self._clock = clock or now_local

    def verify(self, request: VerifyRequest, *, now: Optional[datetime] = None) -> AttendanceEvent:
        now = now or self._clock()
        match: Optional[MatchResult] = None
        try:
            match = self._profiles.identify(request.descriptor)
            session = self._liveness.get(request.liveness_session_id)
            schedule = self._schedules.resolve(int(match.identity_id), now.date())
            event = self._resolver.resolve(match, request.mode, now, schedule, session)
        except (RecognitionError, OperationalError) as e:
            logger.info("Verify %s failed: %s (%s)", request.mode.value, e.code, e)
            self._record_attempt(request, now, match, success=False, error=e)
            raise
        finally:
            self._liveness.discard_finished(request.liveness_session_id)

        self._record_attempt(request, now, match, success=True)
        return event

    def _record_attempt(
        self,
        request: VerifyRequest,
        now: datetime,
        match: Optional[MatchResult],
        *,
        success: bool,
        error: Exception | None = None,
    ) -> None:
        self._attempts.append(
            RecognitionAttempt(
                attempted_at=now,
                success=success,
                employee_id=int(match.identity_id) if match and match.matched else None,
                event_type=request.mode,
                confidence=round(match.confidence, 4) if match else None,
                error_code=getattr(error, "code", None),
                message=str(error) if error else None,
            )
        )

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceEvent]:
        return self._events.list_recent(int(employee_id), int(limit))

    def recent_attempts(self, *, limit: int = DEFAULT_HISTORY_LIMIT, employee_id: Optional[int] = None) -> Sequence[RecognitionAttempt]:
        return self._attempts.list_recent(limit=int(limit), employee_id=employee_id)
