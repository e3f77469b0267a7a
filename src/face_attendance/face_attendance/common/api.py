"""JSON error mapping and request helpers shared by the HTTP controllers."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicateOpenEvent,
    OperationalError,
    OrphanCheckout,
    RecognitionError,
    SessionAlreadyConsumed,
    UnknownLivenessSession,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .logging_setup import operational_logger

logger = logging.getLogger(__name__)

OPERATIONAL_MESSAGE = "Attendance is temporarily unavailable, please contact an administrator"

# Recognition failures answer 200 so the client shows the message and a retry
# button; these mean a missing resource or a conflict instead.
_RECOGNITION_STATUS = {
    UnknownLivenessSession: 404,
    SessionAlreadyConsumed: 409,
    DuplicateOpenEvent: 409,
    OrphanCheckout: 409,
}


def _recognition_response(e: RecognitionError):
    status = _RECOGNITION_STATUS.get(type(e), 200)
    return jsonify({"success": False, "code": e.code, "message": str(e), "retry": True}), status


def _operational_response(e: OperationalError):
    operational_logger().error("%s: %s", e.code, e)
    return jsonify({"success": False, "code": e.code, "message": OPERATIONAL_MESSAGE, "retry": False}), 503


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"success": False, "code": "validation_error", "message": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return jsonify({"success": False, "code": "forbidden", "message": str(e)}), 403

    @app.errorhandler(RecognitionError)
    def _recognition(e: RecognitionError):
        return _recognition_response(e)

    @app.errorhandler(OperationalError)
    def _operational(e: OperationalError):
        return _operational_response(e)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        logger.warning("Unhandled domain error: %s", e)
        return jsonify({"success": False, "code": "domain_error", "message": str(e)}), 400


def json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be JSON")
    return payload


def date_arg(name: str, *, required: bool = False) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    value = request.args.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def current_actor() -> tuple[int, Role]:
    """Caller identity as forwarded by the authenticating front end."""
    try:
        user_id = int(request.headers.get("X-User-Id", "0"))
        role = Role(request.headers.get("X-User-Role", Role.STAFF.value).lower())
    except ValueError:
        raise AuthorizationError("Invalid caller identity")
    if user_id <= 0:
        raise AuthorizationError("Caller identity is required")
    return user_id, role
