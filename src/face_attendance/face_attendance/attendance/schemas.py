"""Pydantic request/response payloads for the attendance and face-profile APIs.

Malformed payloads are rejected here with ValidationError so services only
ever see well-formed values. Wire names are camelCase.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, FiniteFloat, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PayloadError
from pydantic.alias_generators import to_camel

from ..common.validators import require_json_object
from ..core.enums import EventStatus, EventType
from ..core.exceptions import NoFaceDetected, ValidationError
from .model import AttendanceEvent, RecognitionAttempt


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_payload(cls, payload: Any, *, dimensions: int):
        data = require_json_object(payload)
        try:
            return cls.model_validate(data, context={"dimensions": dimensions})
        except PayloadError as exc:
            err = exc.errors()[0]
            field = ".".join(str(p) for p in err["loc"]) or "payload"
            raise ValidationError(f"{field}: {err['msg']}") from None


class _DescriptorPayload(_Payload):
    descriptor: tuple[FiniteFloat, ...]

    @model_validator(mode="before")
    @classmethod
    def _face_present(cls, data: Any) -> Any:
        # The client sends no descriptor when detection found no face in the frame.
        if isinstance(data, dict):
            value = data.get("descriptor")
            if value is None or (isinstance(value, (list, tuple)) and not value):
                raise NoFaceDetected()
        return data

    @field_validator("descriptor")
    @classmethod
    def _dimensions(cls, value: tuple[float, ...], info: ValidationInfo) -> tuple[float, ...]:
        dimensions = (info.context or {}).get("dimensions")
        if dimensions is not None and len(value) != dimensions:
            raise ValueError(f"must have {dimensions} components, got {len(value)}")
        return value


class EnrollRequest(_DescriptorPayload):
    pass


class VerifyRequest(_DescriptorPayload):
    mode: EventType
    liveness_session_id: str

    @field_validator("liveness_session_id")
    @classmethod
    def _session_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("is required")
        return value


class EmployeeRef(_Payload):
    id: int
    name: Optional[str] = None


class VerifyResponse(_Payload):
    success: bool = True
    employee: EmployeeRef
    attendance_timestamp: datetime
    mode: EventType
    status: EventStatus
    late_minutes: int
    early_minutes: int
    confidence: float
    message: str

    @classmethod
    def from_event(cls, e: AttendanceEvent, employee_name: Optional[str] = None) -> "VerifyResponse":
        action = "Check-in" if e.event_type == EventType.CHECK_IN else "Check-out"
        return cls(
            employee=EmployeeRef(id=e.employee_id, name=employee_name),
            attendance_timestamp=e.timestamp,
            mode=e.event_type,
            status=e.status,
            late_minutes=e.late_minutes,
            early_minutes=e.early_minutes,
            confidence=round(e.match_confidence, 4),
            message=f"{action} recorded at {e.timestamp.strftime('%H:%M:%S')}",
        )

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def event_to_dict(e: AttendanceEvent) -> dict:
    return {
        "id": e.event_id,
        "employeeId": e.employee_id,
        "type": e.event_type.value,
        "timestamp": e.timestamp.isoformat(),
        "workDate": e.work_date.isoformat(),
        "status": e.status.value,
        "lateMinutes": e.late_minutes,
        "earlyMinutes": e.early_minutes,
        "flag": e.flag.value,
        "confidence": round(e.match_confidence, 4),
    }


def attempt_to_dict(a: RecognitionAttempt) -> dict:
    return {
        "id": a.attempt_id,
        "attemptedAt": a.attempted_at.isoformat(),
        "success": a.success,
        "employeeId": a.employee_id,
        "mode": a.event_type.value if a.event_type else None,
        "confidence": a.confidence,
        "errorCode": a.error_code,
        "message": a.message,
    }
