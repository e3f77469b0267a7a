from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, RecognitionAttempt


class AttendanceEventRepository(Protocol):
    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        """Persist one event and return it with its id.

        An unflagged check-in claims the employee's open slot for the
        work-day and raises DuplicateOpenEvent if the slot is taken; an
        unflagged check-out releases it.
        """

        raise NotImplementedError

    def get_open_checkin(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def list_for_day(self, employee_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        """All events of the day ordered by timestamp, flagged ones included."""

        raise NotImplementedError

    def list_range(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def list_recent(self, employee_id: int, limit: int) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def employees_with_events(self, work_date: date) -> Sequence[int]:
        raise NotImplementedError


class RecognitionAttemptRepository(Protocol):
    def append(self, attempt: RecognitionAttempt) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int, employee_id: Optional[int] = None) -> Sequence[RecognitionAttempt]:
        raise NotImplementedError
