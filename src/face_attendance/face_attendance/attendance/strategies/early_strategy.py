from __future__ import annotations

from datetime import date, datetime

from ...core.enums import EventStatus
from ...schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision, whole_minutes


class EarlyLeaveStrategy(AttendanceStrategy):
    """Check-out before the scheduled end."""

    def decide_checkin(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=EventStatus.NORMAL)

    def decide_checkout(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        early = whole_minutes((schedule.end_at(work_date) - now).total_seconds())
        return StatusDecision(status=EventStatus.EARLY_LEAVE, early_minutes=early)
