from __future__ import annotations

from flask import Flask, jsonify

from ..common.api import json_body
from ..common.validators import require_json_object, require_number
from ..container import Container
from .model import LivenessStatus


def _status_dict(status: LivenessStatus) -> dict:
    return {
        "success": True,
        "sessionId": status.session_id,
        "verdict": status.verdict.value,
        "progress": status.progress,
        "movementScore": status.movement_score,
        "samples": status.samples,
        "message": status.message,
    }


def register(app: Flask, container: Container) -> None:
    registry = container.liveness_registry

    @app.route("/api/liveness/sessions", methods=["POST"], endpoint="liveness_open")
    def liveness_open():
        data = require_json_object(json_body())
        frame_width = data.get("frameWidth")
        if frame_width is not None:
            frame_width = require_number(frame_width, "frameWidth")
        session = registry.open(frame_width=frame_width)
        return jsonify(_status_dict(session.status())), 201

    @app.route("/api/liveness/sessions/<session_id>", methods=["GET"], endpoint="liveness_status")
    def liveness_status(session_id: str):
        return jsonify(_status_dict(registry.status(session_id)))

    @app.route("/api/liveness/sessions/<session_id>/samples", methods=["POST"], endpoint="liveness_sample")
    def liveness_sample(session_id: str):
        data = require_json_object(json_body())
        if data.get("faceDetected") is False:
            return jsonify(_status_dict(registry.no_face(session_id)))
        x = require_number(data.get("x"), "x")
        y = require_number(data.get("y"), "y")
        return jsonify(_status_dict(registry.sample(session_id, x, y)))

    @app.route("/api/liveness/sessions/<session_id>", methods=["DELETE"], endpoint="liveness_cancel")
    def liveness_cancel(session_id: str):
        registry.cancel(session_id)
        return jsonify({"success": True, "message": "Liveness session cancelled"})
