from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import current_actor, date_arg, int_arg, json_body
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_json_object, require_positive_int
from ..core.exceptions import ValidationError
from ..container import Container
from .model import RosterEntry, Shift


def _shift_to_dict(s: Shift) -> dict:
    return {
        "id": s.shift_id,
        "name": s.shift_name,
        "startTime": s.start_time.strftime("%H:%M"),
        "endTime": s.end_time.strftime("%H:%M"),
        "lateThresholdMinutes": s.late_threshold_minutes,
        "scheduledDailyHours": s.scheduled_daily_hours,
    }


def _entry_to_dict(e: RosterEntry) -> dict:
    return {
        "id": e.schedule_id,
        "employeeId": e.employee_id,
        "workDate": e.work_date.isoformat(),
        "shiftId": e.shift_id,
        "dayOff": e.shift_id is None,
        "note": e.note,
    }


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    def shifts_list():
        return jsonify({"success": True, "data": [_shift_to_dict(s) for s in service.list_shifts()]})

    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    def schedules_list():
        _, role = current_actor()
        start = date_arg("start", required=True)
        end = date_arg("end", required=True)
        rows = service.list_roster(current_role=role, start=start, end=end, employee_id=int_arg("employeeId"))
        return jsonify({"success": True, "data": [_entry_to_dict(e) for e in rows]})

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_assign")
    def schedules_assign():
        _, role = current_actor()
        data = require_json_object(json_body())
        try:
            work_date = parse_iso_date(str(data.get("workDate") or ""))
        except ValueError:
            raise ValidationError("workDate must be YYYY-MM-DD")

        shift_id = data.get("shiftId")
        schedule_id = service.assign(
            current_role=role,
            employee_id=require_positive_int(data.get("employeeId"), "employeeId"),
            work_date=work_date,
            shift_id=None if shift_id is None else require_positive_int(shift_id, "shiftId"),
            note=data.get("note"),
        )
        return jsonify({"success": True, "id": schedule_id}), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    def schedules_delete(schedule_id: int):
        _, role = current_actor()
        service.delete(current_role=role, schedule_id=schedule_id)
        return jsonify({"success": True, "message": "Schedule entry deleted"})

    @app.route("/api/employees/<int:employee_id>/shift", methods=["PUT"], endpoint="employee_default_shift")
    def employee_default_shift(employee_id: int):
        _, role = current_actor()
        data = require_json_object(json_body())
        service.set_default_shift(
            current_role=role,
            employee_id=employee_id,
            shift_id=require_positive_int(data.get("shiftId"), "shiftId"),
        )
        return jsonify({"success": True, "message": "Default shift updated"})
