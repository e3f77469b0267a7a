from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.constants import HOURS_DECIMALS
from ..core.enums import DayStatus


@dataclass(frozen=True)
class DailyWorkHours:
    """Work-hours of one employee on one work-day, rebuilt from the event log.

    Hours are fractional and kept at full precision until persisted.
    ``provisional`` marks an open day on today's date, measured against the clock.
    ``missing_checkout`` marks an earlier day left open; only its closed span counts.
    """

    employee_id: int
    work_date: date
    first_checkin: Optional[datetime]
    last_checkout: Optional[datetime]
    regular_hours: float
    overtime_hours: float
    late_minutes: int
    early_minutes: int
    status: DayStatus
    is_work_day: bool = True
    provisional: bool = False
    missing_checkout: bool = False

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours

    @property
    def worked(self) -> bool:
        return self.first_checkin is not None

    def rounded(self) -> "DailyWorkHours":
        return replace(
            self,
            regular_hours=round(self.regular_hours, HOURS_DECIMALS),
            overtime_hours=round(self.overtime_hours, HOURS_DECIMALS),
        )


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    employee_id: int
    year: int
    month: int
    regular_hours: float
    overtime_hours: float
    worked_days: int
    late_days: int
    early_days: int
    absent_days: int
    leave_days: int
    late_minutes: int
    early_minutes: int
    average_late_minutes: float
    penalty_amount: int

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours

    def rounded(self) -> "MonthlyAttendanceSummary":
        return replace(
            self,
            regular_hours=round(self.regular_hours, HOURS_DECIMALS),
            overtime_hours=round(self.overtime_hours, HOURS_DECIMALS),
            average_late_minutes=round(self.average_late_minutes, HOURS_DECIMALS),
        )
