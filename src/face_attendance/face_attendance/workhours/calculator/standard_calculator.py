from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ...attendance.model import AttendanceEvent
from ...attendance.strategies.base import whole_minutes
from ...core.enums import DayStatus, EventType
from ...schedules.model import WorkSchedule
from ..model import DailyWorkHours, MonthlyAttendanceSummary
from ..penalty import LatePenaltyPolicy
from .base import WorkHoursCalculator


class StandardWorkHoursCalculator(WorkHoursCalculator):
    """Standard rule: first check-in to last check-out, capped at the scheduled hours.

    Time beyond the scheduled hours is overtime; on a non-work day all of it is.
    """

    def __init__(self, *, penalty_policy: Optional[LatePenaltyPolicy] = None):
        self._penalty = penalty_policy or LatePenaltyPolicy()

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
        counted = sorted((e for e in events if e.counts and e.work_date == work_date), key=lambda e: e.timestamp)
        checkins = [e.timestamp for e in counted if e.event_type == EventType.CHECK_IN]
        checkouts = [e.timestamp for e in counted if e.event_type == EventType.CHECK_OUT]
        work_day = schedule.is_work_day(work_date)

        if not checkins:
            if not work_day:
                status = DayStatus.NORMAL
            else:
                status = DayStatus.LEAVE if on_leave else DayStatus.ABSENT
            return DailyWorkHours(
                employee_id=employee_id,
                work_date=work_date,
                first_checkin=None,
                last_checkout=None,
                regular_hours=0.0,
                overtime_hours=0.0,
                late_minutes=0,
                early_minutes=0,
                status=status,
                is_work_day=work_day,
            )

        first_checkin = checkins[0]
        last_checkout = checkouts[-1] if checkouts else None
        still_open = counted[-1].event_type == EventType.CHECK_IN
        # Only today's open day is measured against the clock; an earlier one never closes.
        provisional = still_open and now is not None and work_date >= now.date()
        missing_checkout = still_open and not provisional

        if provisional:
            end = max(now, first_checkin)
            last_checkout = None
        elif missing_checkout:
            end = last_checkout or first_checkin
        else:
            end = last_checkout

        elapsed = max(0.0, (end - first_checkin).total_seconds() / 3600.0)
        if work_day:
            regular = min(elapsed, schedule.scheduled_daily_hours)
        else:
            regular = 0.0
        overtime = max(0.0, elapsed - regular)

        late = 0
        early = 0
        if work_day:
            if first_checkin > schedule.late_deadline(work_date):
                late = whole_minutes((first_checkin - schedule.start_at(work_date)).total_seconds())
            if not still_open and last_checkout < schedule.end_at(work_date):
                early = whole_minutes((schedule.end_at(work_date) - last_checkout).total_seconds())

        return DailyWorkHours(
            employee_id=employee_id,
            work_date=work_date,
            first_checkin=first_checkin,
            last_checkout=last_checkout,
            regular_hours=regular,
            overtime_hours=overtime,
            late_minutes=late,
            early_minutes=early,
            status=DayStatus.LATE if late > 0 else DayStatus.NORMAL,
            is_work_day=work_day,
            provisional=provisional,
            missing_checkout=missing_checkout,
        )

    def compute_monthly(
        self,
        employee_id: int,
        month: int,
        year: int,
        daily_records: Sequence[DailyWorkHours],
    ) -> MonthlyAttendanceSummary:
        days = [
            d
            for d in daily_records
            if d.employee_id == employee_id and d.work_date.year == year and d.work_date.month == month
        ]

        late_days = [d for d in days if d.late_minutes > 0]
        late_minutes = sum(d.late_minutes for d in late_days)

        return MonthlyAttendanceSummary(
            employee_id=employee_id,
            year=year,
            month=month,
            regular_hours=sum(d.regular_hours for d in days),
            overtime_hours=sum(d.overtime_hours for d in days),
            worked_days=sum(1 for d in days if d.worked),
            late_days=len(late_days),
            early_days=sum(1 for d in days if d.early_minutes > 0),
            absent_days=sum(1 for d in days if d.status == DayStatus.ABSENT),
            leave_days=sum(1 for d in days if d.status == DayStatus.LEAVE),
            late_minutes=late_minutes,
            early_minutes=sum(d.early_minutes for d in days),
            average_late_minutes=late_minutes / len(late_days) if late_days else 0.0,
            penalty_amount=sum(self._penalty.amount_for(d.late_minutes) for d in late_days),
        )
