from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence, Set

from ..common.datetime_utils import iter_dates
from ..common.validators import require_non_empty
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, requests: LeaveRequestRepository):
        self._requests = requests

    def create_leave(
        self,
        *,
        current_role: Role,
        employee_id: int,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        if current_role not in {Role.STAFF, Role.ADMIN}:
            raise AuthorizationError("You are not allowed to request leave")

        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        reason = require_non_empty(reason, "Reason")
        request_id = self._requests.create_leave(
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Leave request %s created for employee %s (%s..%s)", request_id, employee_id, start_date, end_date)
        return request_id

    def _decide(self, *, current_role: Role, admin_id: int, request_id: int, status: RequestStatus, admin_note: str) -> LeaveRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can decide leave requests")

        req = self._requests.get_leave(request_id=int(request_id))
        if not req:
            raise ValidationError("Leave request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Leave request was already decided")

        ok = self._requests.decide_leave(
            request_id=int(request_id),
            status=status,
            decided_by=int(admin_id),
            admin_note=(admin_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Leave request was already decided")

        logger.info("Leave request %s %s by %s", request_id, status.value.lower(), admin_id)
        return self._requests.get_leave(request_id=int(request_id)) or req

    def approve_leave(self, *, current_role: Role, admin_id: int, request_id: int, admin_note: str = "") -> LeaveRequest:
        return self._decide(
            current_role=current_role,
            admin_id=admin_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
            admin_note=admin_note,
        )

    def reject_leave(self, *, current_role: Role, admin_id: int, request_id: int, admin_note: str = "") -> LeaveRequest:
        return self._decide(
            current_role=current_role,
            admin_id=admin_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            admin_note=admin_note,
        )

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        return self._requests.list_leave_requests(employee_id=int(employee_id))

    def list_pending(self, *, current_role: Role) -> Sequence[LeaveRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can review leave requests")
        return self._requests.list_leave_requests(status=RequestStatus.PENDING, limit=500)

    def approved_leave_dates(self, employee_id: int, start: date, end: date) -> Set[date]:
        """Dates in [start, end] covered by approved leave."""
        covered: Set[date] = set()
        for req in self._requests.list_approved_overlapping(employee_id=int(employee_id), start=start, end=end):
            covered.update(d for d in iter_dates(max(start, req.start_date), min(end, req.end_date)))
        return covered

    def is_on_leave(self, employee_id: int, work_date: date) -> bool:
        return work_date in self.approved_leave_dates(employee_id, work_date, work_date)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        return self._requests.get_leave(request_id=int(request_id))
