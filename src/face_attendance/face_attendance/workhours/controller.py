from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import date_arg, int_arg
from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from ..container import Container
from .model import DailyWorkHours, MonthlyAttendanceSummary


def daily_to_dict(d: DailyWorkHours) -> dict:
    r = d.rounded()
    return {
        "employeeId": r.employee_id,
        "workDate": r.work_date.isoformat(),
        "firstCheckin": r.first_checkin.isoformat() if r.first_checkin else None,
        "lastCheckout": r.last_checkout.isoformat() if r.last_checkout else None,
        "regularHours": r.regular_hours,
        "overtimeHours": r.overtime_hours,
        "lateMinutes": r.late_minutes,
        "earlyMinutes": r.early_minutes,
        "status": r.status.value,
        "isWorkDay": r.is_work_day,
        "provisional": r.provisional,
        "missingCheckout": r.missing_checkout,
    }


def summary_to_dict(s: MonthlyAttendanceSummary) -> dict:
    r = s.rounded()
    return {
        "employeeId": r.employee_id,
        "month": r.month,
        "year": r.year,
        "regularHours": r.regular_hours,
        "overtimeHours": r.overtime_hours,
        "totalHours": round(s.total_hours, 2),
        "workedDays": r.worked_days,
        "lateDays": r.late_days,
        "earlyDays": r.early_days,
        "absentDays": r.absent_days,
        "leaveDays": r.leave_days,
        "lateMinutes": r.late_minutes,
        "earlyMinutes": r.early_minutes,
        "averageLateMinutes": r.average_late_minutes,
        "penaltyAmount": r.penalty_amount,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/work-hours/employee/<int:employee_id>", methods=["GET"], endpoint="work_hours_employee")
    def work_hours_employee(employee_id: int):
        single = date_arg("date")
        if single:
            start = end = single
        else:
            start = date_arg("startDate", required=True)
            end = date_arg("endDate", required=True)

        records = container.work_hours_service.compute_range(employee_id, start, end)
        return jsonify({"success": True, "data": [daily_to_dict(r) for r in records]})

    @app.route("/api/work-hours/employee/<int:employee_id>/summary", methods=["GET"], endpoint="work_hours_summary")
    def work_hours_summary(employee_id: int):
        today = now_local(container.workday_tz)
        month = int_arg("month", today.month)
        year = int_arg("year", today.year)
        if year < 1970:
            raise ValidationError("year is out of range")

        summary = container.work_hours_service.compute_monthly(employee_id, month, year)
        return jsonify({"success": True, "data": summary_to_dict(summary)})
