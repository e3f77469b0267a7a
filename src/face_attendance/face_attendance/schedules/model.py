from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import FrozenSet, Optional

WEEKDAYS = frozenset(range(5))


@dataclass(frozen=True)
class Shift:
    """A named working window with its lateness tolerance."""

    shift_id: int
    shift_name: str
    start_time: time
    end_time: time
    late_threshold_minutes: int = 20
    scheduled_daily_hours: float = 8.0


@dataclass(frozen=True)
class RosterEntry:
    """Per-date override. ``shift_id`` of None marks the day off."""

    schedule_id: int
    employee_id: int
    work_date: date
    shift_id: Optional[int]
    note: Optional[str] = None


@dataclass(frozen=True)
class WorkSchedule:
    """Schedule in effect for one employee on one work-day."""

    start_time: time
    end_time: time
    late_threshold_minutes: int
    scheduled_daily_hours: float
    work_days: FrozenSet[int] = field(default=WEEKDAYS)
    # Set when the day was resolved from a roster entry.
    rostered: Optional[bool] = None
    source: str = "default"

    def __post_init__(self):
        if self.late_threshold_minutes < 0:
            raise ValueError("late_threshold_minutes must not be negative")
        if self.scheduled_daily_hours <= 0:
            raise ValueError("scheduled_daily_hours must be positive")
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")

    def is_work_day(self, work_date: date) -> bool:
        if self.rostered is not None:
            return self.rostered
        return work_date.weekday() in self.work_days

    def start_at(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.start_time)

    def end_at(self, work_date: date) -> datetime:
        return datetime.combine(work_date, self.end_time)

    def late_deadline(self, work_date: date) -> datetime:
        return self.start_at(work_date) + timedelta(minutes=self.late_threshold_minutes)

    def for_roster(self, *, work_day: bool, source: str) -> "WorkSchedule":
        return WorkSchedule(
            start_time=self.start_time,
            end_time=self.end_time,
            late_threshold_minutes=self.late_threshold_minutes,
            scheduled_daily_hours=self.scheduled_daily_hours,
            work_days=self.work_days,
            rostered=work_day,
            source=source,
        )

    @classmethod
    def from_shift(cls, shift: Shift, *, work_days: FrozenSet[int] = WEEKDAYS, source: str = "shift") -> "WorkSchedule":
        return cls(
            start_time=shift.start_time,
            end_time=shift.end_time,
            late_threshold_minutes=int(shift.late_threshold_minutes),
            scheduled_daily_hours=float(shift.scheduled_daily_hours),
            work_days=work_days,
            source=source,
        )
