from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ...attendance.model import AttendanceEvent
from ...schedules.model import WorkSchedule
from ..model import DailyWorkHours, MonthlyAttendanceSummary


class WorkHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for work-hours)."""

    @abstractmethod
    def compute_daily(
        self,
        employee_id: int,
        work_date: date,
        events: Iterable[AttendanceEvent],
        schedule: WorkSchedule,
        *,
        on_leave: bool = False,
        now: Optional[datetime] = None,
    ) -> DailyWorkHours:
        raise NotImplementedError

    @abstractmethod
    def compute_monthly(
        self,
        employee_id: int,
        month: int,
        year: int,
        daily_records: Sequence[DailyWorkHours],
    ) -> MonthlyAttendanceSummary:
        raise NotImplementedError
