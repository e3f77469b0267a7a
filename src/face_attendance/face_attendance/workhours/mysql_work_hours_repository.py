from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import HOURS_DECIMALS
from ..core.enums import DayStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyWorkHours, MonthlyAttendanceSummary
from .repository import WorkHoursRepository

_DAILY_COLUMNS = """
    employee_id, work_date, first_checkin, last_checkout, regular_hours, overtime_hours,
    late_minutes, early_minutes, status, is_work_day, missing_checkout
"""


def _row_to_daily(r: dict) -> DailyWorkHours:
    return DailyWorkHours(
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        first_checkin=r.get("first_checkin"),
        last_checkout=r.get("last_checkout"),
        regular_hours=float(r.get("regular_hours") or 0),
        overtime_hours=float(r.get("overtime_hours") or 0),
        late_minutes=int(r.get("late_minutes") or 0),
        early_minutes=int(r.get("early_minutes") or 0),
        status=DayStatus(r["status"]),
        is_work_day=bool(r.get("is_work_day", 1)),
        missing_checkout=bool(r.get("missing_checkout", 0)),
    )


class MySQLWorkHoursRepository(WorkHoursRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_daily(self, record: DailyWorkHours) -> None:
        r = record.rounded()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO work_hours({_DAILY_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    first_checkin=VALUES(first_checkin),
                    last_checkout=VALUES(last_checkout),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    late_minutes=VALUES(late_minutes),
                    early_minutes=VALUES(early_minutes),
                    status=VALUES(status),
                    is_work_day=VALUES(is_work_day),
                    missing_checkout=VALUES(missing_checkout)
                """,
                (
                    r.employee_id,
                    r.work_date,
                    r.first_checkin,
                    r.last_checkout,
                    r.regular_hours,
                    r.overtime_hours,
                    r.late_minutes,
                    r.early_minutes,
                    r.status.value,
                    1 if r.is_work_day else 0,
                    1 if r.missing_checkout else 0,
                ),
            )

    def get_daily(self, employee_id: int, work_date: date) -> Optional[DailyWorkHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DAILY_COLUMNS} FROM work_hours WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_daily(r) if r else None

    def list_daily(self, employee_id: int, start: date, end: date) -> Sequence[DailyWorkHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_DAILY_COLUMNS}
                FROM work_hours
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_row_to_daily(r) for r in fetchall(cur)]

    def upsert_summary(self, summary: MonthlyAttendanceSummary) -> None:
        s = summary.rounded()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_summary(
                    employee_id, year, month, total_hours, regular_hours, overtime_hours,
                    worked_days, late_days, early_days, absent_days, leave_days,
                    late_minutes, early_minutes, average_late_minutes, penalty_amount
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total_hours=VALUES(total_hours),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    worked_days=VALUES(worked_days),
                    late_days=VALUES(late_days),
                    early_days=VALUES(early_days),
                    absent_days=VALUES(absent_days),
                    leave_days=VALUES(leave_days),
                    late_minutes=VALUES(late_minutes),
                    early_minutes=VALUES(early_minutes),
                    average_late_minutes=VALUES(average_late_minutes),
                    penalty_amount=VALUES(penalty_amount)
                """,
                (
                    s.employee_id,
                    s.year,
                    s.month,
                    round(summary.total_hours, HOURS_DECIMALS),
                    s.regular_hours,
                    s.overtime_hours,
                    s.worked_days,
                    s.late_days,
                    s.early_days,
                    s.absent_days,
                    s.leave_days,
                    s.late_minutes,
                    s.early_minutes,
                    s.average_late_minutes,
                    s.penalty_amount,
                ),
            )

    def get_summary(self, employee_id: int, year: int, month: int) -> Optional[MonthlyAttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, year, month, regular_hours, overtime_hours,
                       worked_days, late_days, early_days, absent_days, leave_days,
                       late_minutes, early_minutes, average_late_minutes, penalty_amount
                FROM attendance_summary
                WHERE employee_id=%s AND year=%s AND month=%s
                """,
                (int(employee_id), int(year), int(month)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return MonthlyAttendanceSummary(
                employee_id=int(r["employee_id"]),
                year=int(r["year"]),
                month=int(r["month"]),
                regular_hours=float(r["regular_hours"]),
                overtime_hours=float(r["overtime_hours"]),
                worked_days=int(r["worked_days"]),
                late_days=int(r["late_days"]),
                early_days=int(r["early_days"]),
                absent_days=int(r["absent_days"]),
                leave_days=int(r["leave_days"]),
                late_minutes=int(r["late_minutes"]),
                early_minutes=int(r["early_minutes"]),
                average_late_minutes=float(r["average_late_minutes"]),
                penalty_amount=int(r["penalty_amount"]),
            )
