from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.api import current_actor, json_body
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_json_object
from ..core.exceptions import ValidationError
from ..container import Container
from .model import LeaveRequest


def _leave_to_dict(r: LeaveRequest) -> dict:
    return {
        "id": r.request_id,
        "employeeId": r.employee_id,
        "startDate": r.start_date.isoformat(),
        "endDate": r.end_date.isoformat(),
        "reason": r.reason,
        "status": r.status.value,
        "createdAt": r.created_at.isoformat() if r.created_at else None,
        "adminNote": r.admin_note,
    }


def register(app: Flask, container: Container) -> None:
    def _admin_note() -> str:
        data = request.get_json(silent=True) or {}
        return str(require_json_object(data).get("adminNote") or "")

    def _parse_date(data: dict, field: str):
        try:
            return parse_iso_date(str(data.get(field) or ""))
        except ValueError:
            raise ValidationError(f"{field} must be YYYY-MM-DD")

    @app.route("/api/leave-requests", methods=["POST"], endpoint="leave_create")
    def leave_create():
        user_id, role = current_actor()
        data = require_json_object(json_body())
        request_id = container.leave_service.create_leave(
            current_role=role,
            employee_id=user_id,
            start_date=_parse_date(data, "startDate"),
            end_date=_parse_date(data, "endDate"),
            reason=str(data.get("reason") or ""),
        )
        return jsonify({"success": True, "id": request_id}), 201

    @app.route("/api/leave-requests", methods=["GET"], endpoint="leave_list")
    def leave_list():
        user_id, _ = current_actor()
        rows = container.leave_service.list_for_employee(user_id)
        return jsonify({"success": True, "data": [_leave_to_dict(r) for r in rows]})

    @app.route("/api/leave-requests/pending", methods=["GET"], endpoint="leave_pending")
    def leave_pending():
        _, role = current_actor()
        rows = container.leave_service.list_pending(current_role=role)
        return jsonify({"success": True, "data": [_leave_to_dict(r) for r in rows]})

    @app.route("/api/leave-requests/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    def leave_approve(request_id: int):
        admin_id, role = current_actor()
        note = _admin_note()
        req = container.leave_service.approve_leave(current_role=role, admin_id=admin_id, request_id=request_id, admin_note=note)
        return jsonify({"success": True, "data": _leave_to_dict(req), "message": "Leave request approved"})

    @app.route("/api/leave-requests/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    def leave_reject(request_id: int):
        admin_id, role = current_actor()
        note = _admin_note()
        req = container.leave_service.reject_leave(current_role=role, admin_id=admin_id, request_id=request_id, admin_note=note)
        return jsonify({"success": True, "data": _leave_to_dict(req), "message": "Leave request rejected"})
