from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyWorkHours, MonthlyAttendanceSummary


class WorkHoursRepository(Protocol):
    """Derived, rebuildable tables; rows are always overwritten whole."""

    def upsert_daily(self, record: DailyWorkHours) -> None:
        raise NotImplementedError

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        raise NotImplementedError

    def list_daily(self, employee_id: int, start: date, end: date) -> Sequence[DailyWorkHours]:
        raise NotImplementedError

    def upsert_summary(self, summary: MonthlyAttendanceSummary) -> None:
        raise NotImplementedError

    def get_summary(self, employee_id: int, year: int, month: int) -> Optional[MonthlyAttendanceSummary]:
        raise NotImplementedError
