from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import RosterEntry, Shift
from .repository import ScheduleRepository, ShiftRepository

_SHIFT_COLUMNS = "s.shift_id, s.shift_name, s.start_time, s.end_time, s.late_threshold_minutes, s.scheduled_daily_hours"


def _row_to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        late_threshold_minutes=int(r.get("late_threshold_minutes") or 0),
        scheduled_daily_hours=float(r.get("scheduled_daily_hours") or 8),
    )


def _row_to_entry(r: dict) -> RosterEntry:
    return RosterEntry(
        schedule_id=int(r["schedule_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        shift_id=int(r["shift_id"]) if r.get("shift_id") is not None else None,
        note=r.get("note"),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shifts s ORDER BY s.shift_id")
            return [_row_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SHIFT_COLUMNS} FROM shifts s WHERE s.shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def get_default_for_employee(self, employee_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM employee_shifts es
                JOIN shifts s ON s.shift_id = es.shift_id
                WHERE es.employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_shift(r) if r else None

    def set_default_for_employee(self, employee_id: int, shift_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_shifts(employee_id, shift_id)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE shift_id=VALUES(shift_id)
                """,
                (int(employee_id), int(shift_id)),
            )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[RosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, employee_id, work_date, shift_id, note
                FROM schedules
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def upsert(self, *, employee_id: int, work_date: date, shift_id: Optional[int], note: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(employee_id, work_date, shift_id, note)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE shift_id=VALUES(shift_id), note=VALUES(note)
                """,
                (int(employee_id), work_date, shift_id, note),
            )

            # lastrowid is 0 when the row was updated in place.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT schedule_id FROM schedules WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return int(r["schedule_id"]) if r else 0

    def delete(self, *, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0

    def list_range(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[RosterEntry]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT schedule_id, employee_id, work_date, shift_id, note
                FROM schedules
                WHERE {where}
                ORDER BY work_date ASC, employee_id ASC
                """,
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]
