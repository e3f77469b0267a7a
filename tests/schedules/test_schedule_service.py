from datetime import date, time

import pytest

from src.face_attendance.face_attendance.core.enums import Role
from src.face_attendance.face_attendance.core.exceptions import AuthorizationError, ScheduleNotConfigured, ValidationError
from src.face_attendance.face_attendance.schedules.model import Shift, WorkSchedule
from src.face_attendance.face_attendance.schedules.service import (
    ScheduleService,
    default_schedule_from_settings,
    parse_work_days,
)

MONDAY = date(2026, 2, 2)
SATURDAY = date(2026, 2, 7)

MORNING = Shift(shift_id=1, shift_name="Morning", start_time=time(7, 0), end_time=time(15, 0), late_threshold_minutes=5)


@pytest.fixture
def service(repos, nine_to_six):
    repos.shifts.shifts[MORNING.shift_id] = MORNING
    return ScheduleService(repos.shifts, repos.schedules, default_schedule=nine_to_six)


def test_falls_back_to_organization_default(service, nine_to_six):
    assert service.resolve(7, MONDAY) == nine_to_six


def test_employee_default_shift_wins_over_organization(service, repos):
    repos.shifts.set_default_for_employee(7, MORNING.shift_id)

    schedule = service.resolve(7, MONDAY)

    assert schedule.start_time == time(7, 0)
    assert schedule.late_threshold_minutes == 5
    assert schedule.source == "employee_shift"


def test_roster_entry_makes_weekend_a_work_day(service, repos):
    repos.schedules.upsert(employee_id=7, work_date=SATURDAY, shift_id=MORNING.shift_id)

    schedule = service.resolve(7, SATURDAY)

    assert schedule.is_work_day(SATURDAY)
    assert schedule.start_time == time(7, 0)
    assert schedule.source == "roster"


def test_roster_entry_without_shift_is_a_day_off(service, repos):
    repos.schedules.upsert(employee_id=7, work_date=MONDAY, shift_id=None, note="swap")

    schedule = service.resolve(7, MONDAY)

    assert not schedule.is_work_day(MONDAY)
    assert schedule.source == "roster_day_off"


def test_missing_schedule_raises(repos):
    service = ScheduleService(repos.shifts, repos.schedules)

    with pytest.raises(ScheduleNotConfigured) as exc_info:
        service.resolve(7, MONDAY)
    assert exc_info.value.employee_id == 7


def test_assign_requires_admin(service):
    with pytest.raises(AuthorizationError):
        service.assign(current_role=Role.STAFF, employee_id=7, work_date=MONDAY, shift_id=1)


def test_assign_rejects_unknown_shift(service):
    with pytest.raises(ValidationError):
        service.assign(current_role=Role.ADMIN, employee_id=7, work_date=MONDAY, shift_id=99)


def test_assign_and_delete(service, repos):
    schedule_id = service.assign(current_role=Role.ADMIN, employee_id=7, work_date=SATURDAY, shift_id=1, note=" cover ")

    assert repos.schedules.entries[(7, SATURDAY)].note == "cover"

    service.delete(current_role=Role.ADMIN, schedule_id=schedule_id)
    assert repos.schedules.entries == {}
    with pytest.raises(ValidationError):
        service.delete(current_role=Role.ADMIN, schedule_id=schedule_id)


def test_parse_work_days():
    assert parse_work_days("0,1,2") == frozenset({0, 1, 2})
    assert parse_work_days(None) == frozenset(range(5))
    with pytest.raises(ValueError):
        parse_work_days("1,7")


def test_default_schedule_from_settings(settings):
    schedule = default_schedule_from_settings(settings)

    assert schedule.start_time == time(9, 0)
    assert schedule.end_time == time(18, 0)
    assert schedule.late_threshold_minutes == 10
    assert schedule.source == "organization"


def test_schedule_rejects_overnight_window():
    with pytest.raises(ValueError):
        WorkSchedule(start_time=time(22, 0), end_time=time(6, 0), late_threshold_minutes=10, scheduled_daily_hours=8)
