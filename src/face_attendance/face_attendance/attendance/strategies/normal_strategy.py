from __future__ import annotations

from datetime import date, datetime

from ...core.enums import EventStatus
from ...schedules.model import WorkSchedule
from .base import AttendanceStrategy, StatusDecision


class NormalStrategy(AttendanceStrategy):
    """On-time check-in, normal check-out."""

    def decide_checkin(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=EventStatus.NORMAL)

    def decide_checkout(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        return StatusDecision(status=EventStatus.NORMAL)
