from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Optional, Protocol, Sequence, Set

from ..attendance.model import AttendanceEvent
from ..attendance.repository import AttendanceEventRepository
from ..common.datetime_utils import iter_dates, month_bounds, now_local
from ..core.exceptions import ValidationError
from ..schedules.service import ScheduleService
from .calculator.base import WorkHoursCalculator
from .calculator.standard_calculator import StandardWorkHoursCalculator
from .model import DailyWorkHours, MonthlyAttendanceSummary
from .repository import WorkHoursRepository

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 366


class LeaveCalendar(Protocol):
    def approved_leave_dates(self, employee_id: int, start: date, end: date) -> Set[date]:
        raise NotImplementedError


class WorkHoursService:
    """Sole owner of daily and monthly work-hours records.

    Every record is rebuilt from the full event log of its day, so recomputing
    is idempotent and can run redundantly or out of order. Open days are
    computed at query time and never persisted.
    """

    def __init__(
        self,
        events: AttendanceEventRepository,
        schedules: ScheduleService,
        leaves: LeaveCalendar,
        work_hours: WorkHoursRepository,
        *,
        calculator: Optional[WorkHoursCalculator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._events = events
        self._schedules = schedules
        self._leaves = leaves
        self._work_hours = work_hours
        self._calculator = calculator or StandardWorkHoursCalculator()
        self._clock = clock or now_local

    def _compute(
        self,
        employee_id: int,
        work_date: date,
        events: Sequence[AttendanceEvent],
        leave_dates: Set[date],
        now: datetime,
    ) -> DailyWorkHours:
        schedule = self._schedules.resolve(employee_id, work_date)
        return self._calculator.compute_daily(
            employee_id,
            work_date,
            events,
            schedule,
            on_leave=work_date in leave_dates,
            now=now,
        )

    def compute_daily(self, employee_id: int, work_date: date, *, now: Optional[datetime] = None) -> DailyWorkHours:
        """Full-precision record for one day; nothing is written."""
        now = now or self._clock()
        events = self._events.list_for_day(employee_id, work_date)
        leave_dates = self._leaves.approved_leave_dates(employee_id, work_date, work_date)
        return self._compute(employee_id, work_date, events, leave_dates, now)

    def recompute_day(self, employee_id: int, work_date: date, *, now: Optional[datetime] = None) -> DailyWorkHours:
        record = self.compute_daily(employee_id, work_date, now=now)
        if record.provisional:
            logger.debug("Employee %s on %s still open; not persisted", employee_id, work_date)
        else:
            self._work_hours.upsert_daily(record)
            logger.info(
                "Work hours for employee %s on %s: %.2f regular, %.2f overtime (%s)",
                employee_id,
                work_date,
                record.regular_hours,
                record.overtime_hours,
                record.status.value,
            )
        return record

    def compute_range(
        self, employee_id: int, start: date, end: date, *, now: Optional[datetime] = None
    ) -> list[DailyWorkHours]:
        """Daily records for [start, end], capped at today; future days are skipped."""
        if end < start:
            raise ValidationError("endDate must be on or after startDate")
        if (end - start).days + 1 > MAX_RANGE_DAYS:
            raise ValidationError(f"Date range must not exceed {MAX_RANGE_DAYS} days")

        now = now or self._clock()
        end = min(end, now.date())
        if end < start:
            return []

        by_day: dict[date, list[AttendanceEvent]] = defaultdict(list)
        for event in self._events.list_range(employee_id, start, end):
            by_day[event.work_date].append(event)
        leave_dates = self._leaves.approved_leave_dates(employee_id, start, end)

        return [self._compute(employee_id, d, by_day.get(d, []), leave_dates, now) for d in iter_dates(start, end)]

    def compute_monthly(
        self, employee_id: int, month: int, year: int, *, now: Optional[datetime] = None
    ) -> MonthlyAttendanceSummary:
        if not 1 <= int(month) <= 12:
            raise ValidationError("month must be between 1 and 12")
        first, last = month_bounds(int(year), int(month))
        daily = self.compute_range(employee_id, first, last, now=now)
        return self._calculator.compute_monthly(employee_id, int(month), int(year), daily)

    def recompute_month(
        self, employee_id: int, month: int, year: int, *, now: Optional[datetime] = None
    ) -> MonthlyAttendanceSummary:
        """Rebuild and persist every closed day of the month plus its summary."""
        now = now or self._clock()
        first, last = month_bounds(int(year), int(month))
        closed = [r for r in self.compute_range(employee_id, first, last, now=now) if not r.provisional]
        for record in closed:
            self._work_hours.upsert_daily(record)
            if record.missing_checkout:
                logger.warning("Employee %s never checked out on %s", employee_id, record.work_date)

        summary = self._calculator.compute_monthly(employee_id, int(month), int(year), closed)
        self._work_hours.upsert_summary(summary)
        logger.info(
            "Monthly summary for employee %s %04d-%02d: %.2f h, %d late, %d absent",
            employee_id,
            int(year),
            int(month),
            summary.total_hours,
            summary.late_days,
            summary.absent_days,
        )
        return summary

    def on_event_recorded(self, employee_id: int, work_date: date) -> None:
        """Hook for the attendance resolver after each accepted event."""
        self.recompute_day(employee_id, work_date)
