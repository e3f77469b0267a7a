from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import EventFlag, EventStatus, EventType


@dataclass(frozen=True)
class AttendanceEvent:
    """One immutable entry of the attendance log.

    Anomalies are recorded with a ``flag`` rather than dropped; only
    unflagged events count towards work hours.
    """

    employee_id: int
    event_type: EventType
    timestamp: datetime
    work_date: date
    match_confidence: float
    status: EventStatus
    late_minutes: int = 0
    early_minutes: int = 0
    flag: EventFlag = EventFlag.NONE
    liveness_session_id: Optional[str] = None
    note: Optional[str] = None
    event_id: Optional[int] = None

    @property
    def counts(self) -> bool:
        return self.flag == EventFlag.NONE

    def flagged(self, flag: EventFlag, note: Optional[str] = None) -> "AttendanceEvent":
        return replace(self, flag=flag, note=note or self.note)

    def with_id(self, event_id: int) -> "AttendanceEvent":
        return replace(self, event_id=event_id)


@dataclass(frozen=True)
class RecognitionAttempt:
    """Audit row for one verify call, successful or not."""

    attempted_at: datetime
    success: bool
    employee_id: Optional[int] = None
    event_type: Optional[EventType] = None
    confidence: Optional[float] = None
    error_code: Optional[str] = None
    message: Optional[str] = None
    attempt_id: Optional[int] = None
