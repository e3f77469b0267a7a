from __future__ import annotations

from datetime import date, datetime

from ...core.enums import EventStatus
from ...schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision, whole_minutes


class LateStrategy(AttendanceStrategy):
    """Check-in past the late threshold; lateness counts from shift start."""

    def decide_checkin(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        late = whole_minutes((now - schedule.start_at(work_date)).total_seconds())
        return StatusDecision(status=EventStatus.LATE, late_minutes=late)

    def decide_checkout(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=EventStatus.NORMAL)
