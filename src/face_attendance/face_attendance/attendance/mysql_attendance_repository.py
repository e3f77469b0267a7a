from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import EventFlag, EventStatus, EventType
from ..core.exceptions import DuplicateOpenEvent
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent, RecognitionAttempt
from .repository import AttendanceEventRepository, RecognitionAttemptRepository

_EVENT_COLUMNS = """
    e.event_id, e.employee_id, e.event_type, e.event_time, e.work_date, e.match_confidence,
    e.status, e.late_minutes, e.early_minutes, e.flag, e.liveness_session_id, e.note
"""


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        employee_id=int(r["employee_id"]),
        event_type=EventType(r["event_type"]),
        timestamp=r["event_time"],
        work_date=r["work_date"],
        match_confidence=float(r.get("match_confidence") or 0.0),
        status=EventStatus(r["status"]),
        late_minutes=int(r.get("late_minutes") or 0),
        early_minutes=int(r.get("early_minutes") or 0),
        flag=EventFlag(r.get("flag") or EventFlag.NONE.value),
        liveness_session_id=r.get("liveness_session_id"),
        note=r.get("note"),
    )


class MySQLAttendanceRepository(AttendanceEventRepository):
    """Append-only event log plus the ``open_checkins`` slot table.

    The slot table's primary key (employee_id, work_date) is what enforces a
    single open check-in per employee per day across processes.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        employee_id, event_type, event_time, work_date, match_confidence,
                        status, late_minutes, early_minutes, flag, liveness_session_id, note
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        event.employee_id,
                        event.event_type.value,
                        event.timestamp,
                        event.work_date,
                        round(float(event.match_confidence), 4),
                        event.status.value,
                        int(event.late_minutes),
                        int(event.early_minutes),
                        event.flag.value,
                        event.liveness_session_id,
                        event.note,
                    ),
                )
                event_id = int(cur.lastrowid)

                if event.counts and event.event_type == EventType.CHECK_IN:
                    cur.execute(
                        "INSERT INTO open_checkins(employee_id, work_date, event_id) VALUES(%s,%s,%s)",
                        (event.employee_id, event.work_date, event_id),
                    )
                elif event.counts and event.event_type == EventType.CHECK_OUT:
                    cur.execute(
                        "DELETE FROM open_checkins WHERE employee_id=%s AND work_date=%s",
                        (event.employee_id, event.work_date),
                    )
        except mysql.connector.IntegrityError as e:
            raise DuplicateOpenEvent() from e

        return event.with_id(event_id)

    def get_open_checkin(self, employee_id: int, work_date: date) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM open_checkins oc
                JOIN attendance_events e ON e.event_id = oc.event_id
                WHERE oc.employee_id=%s AND oc.work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_for_day(self, employee_id: int, work_date: date) -> Sequence[AttendanceEvent]:
        return self.list_range(employee_id, work_date, work_date)

    def list_range(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events e
                WHERE e.employee_id=%s AND e.work_date BETWEEN %s AND %s
                ORDER BY e.event_time ASC, e.event_id ASC
                """,
                (int(employee_id), start, end),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_recent(self, employee_id: int, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM attendance_events e
                WHERE e.employee_id=%s
                ORDER BY e.event_time DESC, e.event_id DESC
                LIMIT %s
                """,
                (int(employee_id), int(limit)),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def employees_with_events(self, work_date: date) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT employee_id FROM attendance_events WHERE work_date=%s ORDER BY employee_id",
                (work_date,),
            )
            return [int(r["employee_id"]) for r in fetchall(cur)]


class MySQLRecognitionAttemptRepository(RecognitionAttemptRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, attempt: RecognitionAttempt) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO recognition_logs(
                    employee_id, event_type, success, confidence_score, error_code, error_message, attempted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    attempt.employee_id,
                    attempt.event_type.value if attempt.event_type else None,
                    1 if attempt.success else 0,
                    attempt.confidence,
                    attempt.error_code,
                    attempt.message,
                    attempt.attempted_at,
                ),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, limit: int, employee_id: Optional[int] = None) -> Sequence[RecognitionAttempt]:
        where = "WHERE employee_id=%s" if employee_id is not None else ""
        params: list[object] = [int(employee_id)] if employee_id is not None else []
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT log_id, employee_id, event_type, success, confidence_score, error_code, error_message, attempted_at
                FROM recognition_logs
                {where}
                ORDER BY attempted_at DESC, log_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                RecognitionAttempt(
                    attempt_id=int(r["log_id"]),
                    attempted_at=r["attempted_at"],
                    success=bool(r["success"]),
                    employee_id=int(r["employee_id"]) if r.get("employee_id") is not None else None,
                    event_type=EventType(r["event_type"]) if r.get("event_type") else None,
                    confidence=float(r["confidence_score"]) if r.get("confidence_score") is not None else None,
                    error_code=r.get("error_code"),
                    message=r.get("error_message"),
                )
                for r in fetchall(cur)
            ]
