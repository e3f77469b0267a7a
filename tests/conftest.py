from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time
from types import SimpleNamespace
from typing import Optional

import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceEvent, RecognitionAttempt
from src.face_attendance.face_attendance.container import assemble_container
from src.face_attendance.face_attendance.core.enums import EventType, RequestStatus
from src.face_attendance.face_attendance.core.exceptions import DuplicateOpenEvent
from src.face_attendance.face_attendance.liveness.verifier import LivenessSession
from src.face_attendance.face_attendance.matching.model import EnrolledDescriptor
from src.face_attendance.face_attendance.requests.model import LeaveRequest
from src.face_attendance.face_attendance.schedules.model import RosterEntry, Shift, WorkSchedule

# Monday
FIXED_NOW = datetime(2026, 2, 2, 9, 5, 0)


class FakeClock:
    """Wall clock for services; set ``now`` to move time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeMonotonic:
    def __init__(self):
        self.t = 1000.0

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class InMemoryDescriptors:
    def __init__(self):
        self.rows: dict[int, EnrolledDescriptor] = {}
        self.list_calls = 0

    def list_all(self):
        self.list_calls += 1
        return list(self.rows.values())

    def get(self, identity_id: int) -> Optional[EnrolledDescriptor]:
        return self.rows.get(identity_id)

    def upsert(self, descriptor: EnrolledDescriptor) -> None:
        self.rows[descriptor.identity_id] = descriptor

    def delete(self, identity_id: int) -> bool:
        return self.rows.pop(identity_id, None) is not None


class InMemoryEvents:
    """Mirrors the open-slot constraint of the MySQL repository."""

    def __init__(self):
        self.events: list[AttendanceEvent] = []
        self.open_slots: dict[tuple[int, date], int] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        with self._lock:
            key = (event.employee_id, event.work_date)
            if event.counts and event.event_type == EventType.CHECK_IN and key in self.open_slots:
                raise DuplicateOpenEvent()
            stored = replace(event, event_id=self._next_id)
            self._next_id += 1
            self.events.append(stored)
            if event.counts and event.event_type == EventType.CHECK_IN:
                self.open_slots[key] = stored.event_id
            elif event.counts and event.event_type == EventType.CHECK_OUT:
                self.open_slots.pop(key, None)
            return stored

    def get_open_checkin(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        event_id = self.open_slots.get((employee_id, work_date))
        return next((e for e in self.events if e.event_id == event_id), None)

    def list_for_day(self, employee_id: int, work_date: date):
        return self.list_range(employee_id, work_date, work_date)

    def list_range(self, employee_id: int, start: date, end: date):
        rows = [e for e in self.events if e.employee_id == employee_id and start <= e.work_date <= end]
        return sorted(rows, key=lambda e: (e.timestamp, e.event_id))

    def list_recent(self, employee_id: int, limit: int):
        rows = [e for e in self.events if e.employee_id == employee_id]
        return sorted(rows, key=lambda e: (e.timestamp, e.event_id), reverse=True)[:limit]

    def employees_with_events(self, work_date: date):
        return sorted({e.employee_id for e in self.events if e.work_date == work_date})


class InMemoryAttempts:
    def __init__(self):
        self.attempts: list[RecognitionAttempt] = []

    def append(self, attempt: RecognitionAttempt) -> int:
        self.attempts.append(attempt)
        return len(self.attempts)

    def list_recent(self, *, limit: int, employee_id: Optional[int] = None):
        rows = [a for a in self.attempts if employee_id is None or a.employee_id == employee_id]
        return list(reversed(rows))[:limit]


class InMemoryShifts:
    def __init__(self, shifts: Optional[dict[int, Shift]] = None, defaults: Optional[dict[int, int]] = None):
        self.shifts = shifts or {}
        self.defaults = defaults or {}

    def list_all(self):
        return list(self.shifts.values())

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.shifts.get(shift_id)

    def get_default_for_employee(self, employee_id: int) -> Optional[Shift]:
        shift_id = self.defaults.get(employee_id)
        return self.shifts.get(shift_id) if shift_id else None

    def set_default_for_employee(self, employee_id: int, shift_id: int) -> None:
        self.defaults[employee_id] = shift_id


class InMemorySchedules:
    def __init__(self):
        self.entries: dict[tuple[int, date], RosterEntry] = {}
        self._next_id = 1

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[RosterEntry]:
        return self.entries.get((employee_id, work_date))

    def upsert(self, *, employee_id: int, work_date: date, shift_id: Optional[int], note: Optional[str] = None) -> int:
        existing = self.entries.get((employee_id, work_date))
        schedule_id = existing.schedule_id if existing else self._next_id
        if not existing:
            self._next_id += 1
        self.entries[(employee_id, work_date)] = RosterEntry(
            schedule_id=schedule_id, employee_id=employee_id, work_date=work_date, shift_id=shift_id, note=note
        )
        return schedule_id

    def delete(self, *, schedule_id: int) -> bool:
        for key, entry in list(self.entries.items()):
            if entry.schedule_id == schedule_id:
                del self.entries[key]
                return True
        return False

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None):
        return [
            e
            for e in self.entries.values()
            if start <= e.work_date <= end and (employee_id is None or e.employee_id == employee_id)
        ]


class InMemoryLeaves:
    def __init__(self):
        self.rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def create_leave(self, *, employee_id: int, start_date: date, end_date: date, reason: str) -> int:
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = LeaveRequest(
            request_id=rid,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 1, 20, 10, 0, 0),
        )
        return rid

    def get_leave(self, *, request_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(int(request_id))

    def list_leave_requests(self, *, status=None, employee_id=None, limit=200):
        rows = [
            r
            for r in self.rows.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        return rows[:limit]

    def list_approved_overlapping(self, *, employee_id: int, start: date, end: date):
        return [
            r
            for r in self.rows.values()
            if r.employee_id == employee_id
            and r.status == RequestStatus.APPROVED
            and r.start_date <= end
            and r.end_date >= start
        ]

    def decide_leave(self, *, request_id, status, decided_by, admin_note=None) -> bool:
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[int(request_id)] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2026, 1, 21, 9, 0, 0),
            admin_note=admin_note,
        )
        return True


class InMemoryWorkHours:
    def __init__(self):
        self.daily: dict = {}
        self.summaries: dict = {}

    def upsert_daily(self, record) -> None:
        self.daily[(record.employee_id, record.work_date)] = record.rounded()

    def get_daily(self, employee_id, work_date):
        return self.daily.get((employee_id, work_date))

    def list_daily(self, employee_id, start, end):
        return sorted(
            (r for (e, d), r in self.daily.items() if e == employee_id and start <= d <= end),
            key=lambda r: r.work_date,
        )

    def upsert_summary(self, summary) -> None:
        self.summaries[(summary.employee_id, summary.year, summary.month)] = summary.rounded()

    def get_summary(self, employee_id, year, month):
        return self.summaries.get((employee_id, year, month))


def unit_vector(index: int, dimensions: int = 128, scale: float = 1.0) -> list[float]:
    v = [0.0] * dimensions
    v[index] = scale
    return v


def drive_to_pass(session: LivenessSession, monotonic: Optional[FakeMonotonic] = None, step: float = 5.0) -> None:
    """Feed a steadily moving face until the session passes."""
    x = 100.0
    for _ in range(20):
        if session.is_terminal:
            break
        session.add_sample(x, 200.0)
        x += step
        if monotonic is not None:
            monotonic.advance(0.1)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def nine_to_six() -> WorkSchedule:
    return WorkSchedule(
        start_time=time(9, 0),
        end_time=time(18, 0),
        late_threshold_minutes=10,
        scheduled_daily_hours=8.0,
    )


@pytest.fixture
def settings():
    return SimpleNamespace(
        WORKDAY_TZ="Asia/Ho_Chi_Minh",
        MATCH_DISTANCE_THRESHOLD=0.5,
        MATCH_SEPARATION_MARGIN=0.05,
        DESCRIPTOR_DIMENSIONS=128,
        WORK_START_TIME="09:00",
        WORK_END_TIME="18:00",
        LATE_THRESHOLD_MINUTES=10,
        SCHEDULED_DAILY_HOURS=8,
        WORK_DAYS="0,1,2,3,4",
        LATE_PENALTY_TIERS="15:25000,30:50000,60:100000",
    )


@pytest.fixture
def repos():
    return SimpleNamespace(
        descriptors=InMemoryDescriptors(),
        events=InMemoryEvents(),
        attempts=InMemoryAttempts(),
        shifts=InMemoryShifts(),
        schedules=InMemorySchedules(),
        leaves=InMemoryLeaves(),
        work_hours=InMemoryWorkHours(),
    )


@pytest.fixture
def container(repos, settings, clock, monotonic):
    return assemble_container(
        descriptors_repo=repos.descriptors,
        attendance_repo=repos.events,
        attempts_repo=repos.attempts,
        shifts_repo=repos.shifts,
        schedules_repo=repos.schedules,
        requests_repo=repos.leaves,
        work_hours_repo=repos.work_hours,
        settings=settings,
        clock=clock,
        monotonic=monotonic,
    )


@pytest.fixture
def vector():
    return unit_vector


@pytest.fixture
def pass_liveness():
    return drive_to_pass
