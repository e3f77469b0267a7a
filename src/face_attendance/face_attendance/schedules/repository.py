from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import RosterEntry, Shift


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def get_default_for_employee(self, employee_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def set_default_for_employee(self, employee_id: int, shift_id: int) -> None:
        raise NotImplementedError


class ScheduleRepository(Protocol):
    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[RosterEntry]:
        raise NotImplementedError

    def upsert(self, *, employee_id: int, work_date: date, shift_id: Optional[int], note: Optional[str] = None) -> int:
        """Create or update a roster entry.

        Returns schedule_id.
        """

        raise NotImplementedError

    def delete(self, *, schedule_id: int) -> bool:
        raise NotImplementedError

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[RosterEntry]:
        raise NotImplementedError
