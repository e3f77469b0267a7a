from datetime import date, datetime

import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceEvent
from src.face_attendance.face_attendance.core.enums import DayStatus, EventStatus, EventType, RequestStatus
from src.face_attendance.face_attendance.core.exceptions import ScheduleNotConfigured, ValidationError
from src.face_attendance.face_attendance.requests.service import LeaveService
from src.face_attendance.face_attendance.schedules.service import ScheduleService
from src.face_attendance.face_attendance.workhours.service import WorkHoursService


@pytest.fixture
def record(repos):
    def add(kind, at: datetime, employee_id=7):
        return repos.events.append(
            AttendanceEvent(
                employee_id=employee_id,
                event_type=kind,
                timestamp=at,
                work_date=at.date(),
                match_confidence=0.9,
                status=EventStatus.NORMAL,
            )
        )

    return add


@pytest.fixture
def approve_leave(repos):
    def approve(start: date, end: date, employee_id=7):
        rid = repos.leaves.create_leave(employee_id=employee_id, start_date=start, end_date=end, reason="family")
        repos.leaves.decide_leave(request_id=rid, status=RequestStatus.APPROVED, decided_by=1)

    return approve


def test_range_is_capped_at_today(container):
    records = container.work_hours_service.compute_range(7, date(2026, 1, 26), date(2026, 2, 8))

    assert [r.work_date for r in records][-1] == date(2026, 2, 2)
    assert len(records) == 8
    weekend = [r for r in records if not r.is_work_day]
    assert [r.work_date for r in weekend] == [date(2026, 1, 31), date(2026, 2, 1)]
    assert all(r.status == DayStatus.NORMAL for r in weekend)


def test_range_validation(container):
    with pytest.raises(ValidationError):
        container.work_hours_service.compute_range(7, date(2026, 2, 2), date(2026, 2, 1))
    with pytest.raises(ValidationError):
        container.work_hours_service.compute_range(7, date(2024, 1, 1), date(2025, 6, 1))


def test_approved_leave_marks_day(container, approve_leave):
    approve_leave(date(2026, 1, 27), date(2026, 1, 28))

    records = container.work_hours_service.compute_range(7, date(2026, 1, 26), date(2026, 1, 28))

    assert [r.status for r in records] == [DayStatus.ABSENT, DayStatus.LEAVE, DayStatus.LEAVE]


def test_open_day_is_reported_but_not_persisted(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 2, 2, 9, 0))

    day = container.work_hours_service.recompute_day(7, date(2026, 2, 2))

    assert day.provisional
    assert day.regular_hours == pytest.approx(5 / 60)
    assert repos.work_hours.daily == {}


def test_closed_day_is_persisted_rounded(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 1, 30, 9, 5))
    record(EventType.CHECK_OUT, datetime(2026, 1, 30, 18, 30))

    day = container.work_hours_service.recompute_day(7, date(2026, 1, 30))

    assert day.overtime_hours == pytest.approx(1.41667, abs=1e-5)
    assert repos.work_hours.get_daily(7, date(2026, 1, 30)).overtime_hours == 1.42


def test_monthly_summary(container, record, approve_leave):
    record(EventType.CHECK_IN, datetime(2026, 1, 5, 9, 20))
    record(EventType.CHECK_OUT, datetime(2026, 1, 5, 18, 0))
    record(EventType.CHECK_IN, datetime(2026, 1, 6, 9, 0))
    record(EventType.CHECK_OUT, datetime(2026, 1, 6, 19, 0))
    approve_leave(date(2026, 1, 7), date(2026, 1, 7))

    summary = container.work_hours_service.compute_monthly(7, 1, 2026)

    assert summary.worked_days == 2
    assert summary.leave_days == 1
    assert summary.absent_days == 22 - 3
    assert summary.late_days == 1
    assert summary.late_minutes == 20
    assert summary.penalty_amount == 25000
    assert summary.regular_hours == pytest.approx(16.0)
    assert summary.overtime_hours == pytest.approx(2 + 40 / 60)


def test_recompute_month_persists_days_and_summary(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 1, 5, 9, 0))
    record(EventType.CHECK_OUT, datetime(2026, 1, 5, 18, 0))

    summary = container.work_hours_service.recompute_month(7, 1, 2026)

    assert repos.work_hours.get_summary(7, 2026, 1) == summary.rounded()
    assert len(repos.work_hours.list_daily(7, date(2026, 1, 1), date(2026, 1, 31))) == 31


def test_forgotten_checkout_adds_no_hours_to_stored_summary(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 1, 28, 9, 0))

    summary = container.work_hours_service.recompute_month(7, 1, 2026)

    stored = repos.work_hours.get_summary(7, 2026, 1)
    assert stored.regular_hours == 0.0
    assert stored.overtime_hours == 0.0
    assert summary.worked_days == 1
    day = repos.work_hours.get_daily(7, date(2026, 1, 28))
    assert day.missing_checkout
    assert day.total_hours == 0.0


def test_todays_open_day_stays_out_of_stored_summary(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 2, 2, 8, 0))

    container.work_hours_service.recompute_month(7, 2, 2026)

    assert repos.work_hours.get_daily(7, date(2026, 2, 2)) is None
    assert repos.work_hours.get_summary(7, 2026, 2).regular_hours == 0.0
    assert container.work_hours_service.compute_monthly(7, 2, 2026).regular_hours > 0


def test_invalid_month(container):
    with pytest.raises(ValidationError):
        container.work_hours_service.compute_monthly(7, 13, 2026)


def test_missing_schedule_propagates(repos, clock):
    service = WorkHoursService(
        repos.events,
        ScheduleService(repos.shifts, repos.schedules),
        LeaveService(repos.leaves),
        repos.work_hours,
        clock=clock,
    )

    with pytest.raises(ScheduleNotConfigured):
        service.compute_daily(7, date(2026, 2, 2))


def test_event_hook_recomputes_the_day(container, repos, record):
    record(EventType.CHECK_IN, datetime(2026, 1, 29, 8, 55))
    record(EventType.CHECK_OUT, datetime(2026, 1, 29, 17, 55))

    container.work_hours_service.on_event_recorded(7, date(2026, 1, 29))

    stored = repos.work_hours.get_daily(7, date(2026, 1, 29))
    assert stored.regular_hours == 8.0
    assert stored.early_minutes == 5
