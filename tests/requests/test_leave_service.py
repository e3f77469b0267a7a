from datetime import date

import pytest

from src.face_attendance.face_attendance.core.enums import RequestStatus, Role
from src.face_attendance.face_attendance.core.exceptions import AuthorizationError, ValidationError
from src.face_attendance.face_attendance.requests.service import LeaveService


@pytest.fixture
def service(repos):
    return LeaveService(repos.leaves)


def _create(service, start=date(2026, 2, 9), end=date(2026, 2, 11), employee_id=7):
    return service.create_leave(
        current_role=Role.STAFF, employee_id=employee_id, start_date=start, end_date=end, reason="  family trip "
    )


def test_create_leave_strips_reason(service, repos):
    request_id = _create(service)

    req = repos.leaves.get_leave(request_id=request_id)
    assert req.status == RequestStatus.PENDING
    assert req.reason == "family trip"


def test_create_leave_validation(service):
    with pytest.raises(ValidationError):
        _create(service, start=date(2026, 2, 11), end=date(2026, 2, 9))
    with pytest.raises(ValidationError):
        service.create_leave(
            current_role=Role.STAFF, employee_id=7, start_date=date(2026, 2, 9), end_date=date(2026, 2, 9), reason=" "
        )


def test_only_admin_can_decide(service):
    request_id = _create(service)

    with pytest.raises(AuthorizationError):
        service.approve_leave(current_role=Role.STAFF, admin_id=7, request_id=request_id)
    with pytest.raises(AuthorizationError):
        service.list_pending(current_role=Role.STAFF)


def test_approve_returns_decided_request(service):
    request_id = _create(service)

    req = service.approve_leave(current_role=Role.ADMIN, admin_id=1, request_id=request_id, admin_note=" ok ")

    assert req.status == RequestStatus.APPROVED
    assert req.decided_by == 1
    assert req.admin_note == "ok"
    assert service.list_pending(current_role=Role.ADMIN) == []


def test_request_is_decided_once(service):
    request_id = _create(service)
    service.reject_leave(current_role=Role.ADMIN, admin_id=1, request_id=request_id)

    with pytest.raises(ValidationError):
        service.approve_leave(current_role=Role.ADMIN, admin_id=1, request_id=request_id)
    with pytest.raises(ValidationError):
        service.approve_leave(current_role=Role.ADMIN, admin_id=1, request_id=999)


def test_approved_leave_dates_are_clipped_to_range(service):
    approved = _create(service, start=date(2026, 2, 9), end=date(2026, 2, 13))
    rejected = _create(service, start=date(2026, 2, 16), end=date(2026, 2, 16))
    service.approve_leave(current_role=Role.ADMIN, admin_id=1, request_id=approved)
    service.reject_leave(current_role=Role.ADMIN, admin_id=1, request_id=rejected)

    dates = service.approved_leave_dates(7, date(2026, 2, 12), date(2026, 2, 20))

    assert dates == {date(2026, 2, 12), date(2026, 2, 13)}
    assert service.is_on_leave(7, date(2026, 2, 9))
    assert not service.is_on_leave(7, date(2026, 2, 16))
    assert not service.is_on_leave(8, date(2026, 2, 9))
