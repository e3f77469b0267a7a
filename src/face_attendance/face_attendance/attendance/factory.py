from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import EventType
from ..schedules.model import WorkSchedule
from .strategies.base import AttendanceStrategy, StatusDecision
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> AttendanceStrategy:
        if not schedule.is_work_day(work_date):
            return NormalStrategy()

        if now <= schedule.late_deadline(work_date):
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> AttendanceStrategy:
        if not schedule.is_work_day(work_date):
            return NormalStrategy()

        if now < schedule.end_at(work_date):
            return EarlyLeaveStrategy()
        return NormalStrategy()

    def decide(self, event_type: EventType, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        if event_type == EventType.CHECK_IN:
            strategy = self.for_checkin(now=now, work_date=work_date, schedule=schedule)
            return strategy.decide_checkin(now=now, work_date=work_date, schedule=schedule)
        strategy = self.for_checkout(now=now, work_date=work_date, schedule=schedule)
        return strategy.decide_checkout(now=now, work_date=work_date, schedule=schedule)
