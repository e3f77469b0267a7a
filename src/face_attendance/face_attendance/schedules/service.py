from __future__ import annotations

import logging
from datetime import date
from typing import Any, FrozenSet, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.logging_setup import operational_logger
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ScheduleNotConfigured, ValidationError
from .model import WEEKDAYS, RosterEntry, Shift, WorkSchedule
from .repository import ScheduleRepository, ShiftRepository

logger = logging.getLogger(__name__)


def parse_work_days(value: Any) -> FrozenSet[int]:
    """"0,1,2,3,4" -> frozenset({0..4}); Monday is 0."""
    if value is None or value == "":
        return WEEKDAYS
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",") if p.strip()]
    else:
        parts = list(value)
    days = frozenset(int(p) for p in parts)
    if any(d < 0 or d > 6 for d in days):
        raise ValueError(f"Invalid WORK_DAYS value: {value!r}")
    return days


def default_schedule_from_settings(settings: Any) -> Optional[WorkSchedule]:
    """Organization-wide schedule, or None when start/end are not set."""
    start = getattr(settings, "WORK_START_TIME", None)
    end = getattr(settings, "WORK_END_TIME", None)
    if not start or not end:
        return None
    return WorkSchedule(
        start_time=parse_hhmm(start),
        end_time=parse_hhmm(end),
        late_threshold_minutes=int(getattr(settings, "LATE_THRESHOLD_MINUTES", 20)),
        scheduled_daily_hours=float(getattr(settings, "SCHEDULED_DAILY_HOURS", 8)),
        work_days=parse_work_days(getattr(settings, "WORK_DAYS", None)),
        source="organization",
    )


class ScheduleService:
    """Resolves the schedule in effect for an employee on a work-day.

    Lookup order is the per-date roster, the employee's default shift, then
    the organization default.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        schedules: ScheduleRepository,
        *,
        default_schedule: Optional[WorkSchedule] = None,
    ):
        self._shifts = shifts
        self._schedules = schedules
        self._default = default_schedule

    @property
    def work_days(self) -> FrozenSet[int]:
        return self._default.work_days if self._default else WEEKDAYS

    def _base_schedule(self, employee_id: int) -> Optional[WorkSchedule]:
        shift = self._shifts.get_default_for_employee(employee_id)
        if shift:
            return WorkSchedule.from_shift(shift, work_days=self.work_days, source="employee_shift")
        return self._default

    def resolve(self, employee_id: int, work_date: date) -> WorkSchedule:
        entry = self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=work_date)
        if entry is not None and entry.shift_id is not None:
            shift = self._shifts.get_by_id(entry.shift_id)
            if shift:
                return WorkSchedule.from_shift(shift, work_days=self.work_days).for_roster(work_day=True, source="roster")
            logger.warning("Roster entry %s points to missing shift %s", entry.schedule_id, entry.shift_id)

        base = self._base_schedule(employee_id)
        if base is None:
            operational_logger().error("No schedule configured for employee %s on %s", employee_id, work_date)
            raise ScheduleNotConfigured(employee_id, work_date)

        if entry is not None and entry.shift_id is None:
            return base.for_roster(work_day=False, source="roster_day_off")
        return base

    def assign(
        self,
        *,
        current_role: Role,
        employee_id: int,
        work_date: date,
        shift_id: Optional[int],
        note: Optional[str] = None,
    ) -> int:
        """Roster a shift (or a day off when shift_id is None) for one date."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change schedules")

        if int(employee_id) <= 0:
            raise ValidationError("Invalid employee")
        if shift_id is not None:
            if int(shift_id) <= 0 or not self._shifts.get_by_id(int(shift_id)):
                raise ValidationError("Invalid shift")
            shift_id = int(shift_id)

        note = note.strip() if note else None
        return self._schedules.upsert(employee_id=int(employee_id), work_date=work_date, shift_id=shift_id, note=note)

    def delete(self, *, current_role: Role, schedule_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change schedules")

        if not self._schedules.delete(schedule_id=int(schedule_id)):
            raise ValidationError("Schedule entry not found")

    def list_roster(self, *, current_role: Role, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[RosterEntry]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can view the roster")
        if end < start:
            raise ValidationError("end must be on or after start")
        return self._schedules.list_range(start=start, end=end, employee_id=employee_id)

    def list_shifts(self) -> Sequence[Shift]:
        return self._shifts.list_all()

    def set_default_shift(self, *, current_role: Role, employee_id: int, shift_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change schedules")
        if int(shift_id) <= 0 or not self._shifts.get_by_id(int(shift_id)):
            raise ValidationError("Invalid shift")

        self._shifts.set_default_for_employee(int(employee_id), int(shift_id))
        logger.info("Default shift of employee %s set to %s", employee_id, shift_id)
