from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used to authorize leave decisions."""

    ADMIN = "admin"
    STAFF = "staff"


class EventType(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class EventStatus(str, Enum):
    """Classification of a single check-in/check-out against the schedule."""

    NORMAL = "normal"
    LATE = "late"
    EARLY_LEAVE = "early_leave"


class EventFlag(str, Enum):
    """Anomaly marker on a stored attendance event.

    Only ``NONE`` events count towards work hours; the others stay in the log
    for manual reconciliation.
    """

    NONE = "none"
    DUPLICATE_OPEN = "duplicate_open"
    ORPHAN_CHECKOUT = "orphan_checkout"


class DayStatus(str, Enum):
    NORMAL = "normal"
    LATE = "late"
    ABSENT = "absent"
    LEAVE = "leave"


class LivenessVerdict(str, Enum):
    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class RequestStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
