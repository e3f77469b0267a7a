from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import int_arg, json_body
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container
from .schemas import EnrollRequest, VerifyRequest, VerifyResponse, attempt_to_dict, event_to_dict


def register(app: Flask, container: Container) -> None:
    dimensions = container.matcher.policy.dimensions

    @app.route("/api/attendance/verify", methods=["POST"], endpoint="attendance_verify")
    def attendance_verify():
        req = VerifyRequest.from_payload(json_body(), dimensions=dimensions)
        event = container.attendance_service.verify(req)
        return jsonify(VerifyResponse.from_event(event).to_dict())

    @app.route("/api/attendance/employee/<int:employee_id>/events", methods=["GET"], endpoint="attendance_events")
    def attendance_events(employee_id: int):
        limit = int_arg("limit", DEFAULT_HISTORY_LIMIT)
        if limit <= 0:
            raise ValidationError("limit must be positive")
        events = container.attendance_service.history(employee_id, limit=limit)
        return jsonify({"success": True, "events": [event_to_dict(e) for e in events]})

    @app.route("/api/face-profile/<int:identity_id>", methods=["POST"], endpoint="face_profile_enroll")
    def face_profile_enroll(identity_id: int):
        req = EnrollRequest.from_payload(json_body(), dimensions=dimensions)
        replaced = container.face_profile_service.has_profile(identity_id)
        enrolled = container.face_profile_service.enroll(identity_id, req.descriptor)
        return jsonify(
            {
                "success": True,
                "identityId": enrolled.identity_id,
                "enrolledAt": enrolled.enrolled_at.isoformat(),
                "replaced": replaced,
                "message": "Face profile updated" if replaced else "Face profile enrolled",
            }
        ), (200 if replaced else 201)

    @app.route("/api/face-profile/<int:identity_id>", methods=["DELETE"], endpoint="face_profile_reset")
    def face_profile_reset(identity_id: int):
        if not container.face_profile_service.reset(identity_id):
            return jsonify({"success": False, "code": "not_found", "message": "No face profile to reset"}), 404
        return jsonify({"success": True, "message": "Face profile reset"})

    @app.route("/api/face-profile/<int:identity_id>", methods=["GET"], endpoint="face_profile_status")
    def face_profile_status(identity_id: int):
        return jsonify({"success": True, "enrolled": container.face_profile_service.has_profile(identity_id)})

    @app.route("/api/attendance/recognition-logs", methods=["GET"], endpoint="attendance_recognition_logs")
    def attendance_recognition_logs():
        limit = int_arg("limit", DEFAULT_HISTORY_LIMIT)
        if limit <= 0:
            raise ValidationError("limit must be positive")
        rows = container.attendance_service.recent_attempts(limit=limit, employee_id=int_arg("employeeId"))
        return jsonify({"success": True, "data": [attempt_to_dict(a) for a in rows]})
