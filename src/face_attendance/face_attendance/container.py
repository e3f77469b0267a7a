from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLRecognitionAttemptRepository
from .attendance.repository import AttendanceEventRepository, RecognitionAttemptRepository
from .attendance.resolver import AttendanceEventResolver
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .liveness.model import LivenessConfig
from .liveness.registry import LivenessSessionRegistry
from .liveness.verifier import LivenessVerifier
from .matching.matcher import DescriptorMatcher
from .matching.model import MatchPolicy
from .matching.mysql_descriptor_repository import MySQLDescriptorRepository
from .matching.repository import DescriptorRepository
from .matching.service import FaceProfileService
from .matching.store import DescriptorStore
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import LeaveRequestRepository
from .requests.service import LeaveService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository, MySQLShiftRepository
from .schedules.repository import ScheduleRepository, ShiftRepository
from .schedules.service import ScheduleService, default_schedule_from_settings
from .workhours.calculator.standard_calculator import StandardWorkHoursCalculator
from .workhours.mysql_work_hours_repository import MySQLWorkHoursRepository
from .workhours.penalty import DEFAULT_LATE_PENALTY_TIERS, LatePenaltyPolicy
from .workhours.repository import WorkHoursRepository
from .workhours.service import WorkHoursService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    workday_tz: str
    clock: Callable[[], datetime]

    descriptors_repo: DescriptorRepository
    attendance_repo: AttendanceEventRepository
    attempts_repo: RecognitionAttemptRepository
    shifts_repo: ShiftRepository
    schedules_repo: ScheduleRepository
    requests_repo: LeaveRequestRepository
    work_hours_repo: WorkHoursRepository

    matcher: DescriptorMatcher
    descriptor_store: DescriptorStore
    face_profile_service: FaceProfileService
    liveness_registry: LivenessSessionRegistry
    schedule_service: ScheduleService
    leave_service: LeaveService
    work_hours_service: WorkHoursService
    resolver: AttendanceEventResolver
    attendance_service: AttendanceService


def _setting(settings: Any, name: str, default: Any) -> Any:
    value = getattr(settings, name, None) if settings is not None else None
    return default if value is None else value


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        conn=conn,
        descriptors_repo=MySQLDescriptorRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        attempts_repo=MySQLRecognitionAttemptRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        work_hours_repo=MySQLWorkHoursRepository(conn),
        settings=settings,
    )


def assemble_container(
    *,
    descriptors_repo: DescriptorRepository,
    attendance_repo: AttendanceEventRepository,
    attempts_repo: RecognitionAttemptRepository,
    shifts_repo: ShiftRepository,
    schedules_repo: ScheduleRepository,
    requests_repo: LeaveRequestRepository,
    work_hours_repo: WorkHoursRepository,
    settings: Any = None,
    conn: Optional[DatabaseConnection] = None,
    clock: Optional[Callable[[], datetime]] = None,
    monotonic: Callable[[], float] = time.monotonic,
) -> Container:
    """Wire services over the given repositories (MySQL in production, fakes in tests)."""
    workday_tz = str(_setting(settings, "WORKDAY_TZ", constants.DEFAULT_WORKDAY_TZ))
    clock = clock or partial(now_local, workday_tz)

    policy = MatchPolicy(
        threshold=float(_setting(settings, "MATCH_DISTANCE_THRESHOLD", constants.DEFAULT_MATCH_DISTANCE_THRESHOLD)),
        separation_margin=float(_setting(settings, "MATCH_SEPARATION_MARGIN", constants.DEFAULT_MATCH_SEPARATION_MARGIN)),
        dimensions=int(_setting(settings, "DESCRIPTOR_DIMENSIONS", constants.DESCRIPTOR_DIMENSIONS)),
    )
    matcher = DescriptorMatcher(policy)
    descriptor_store = DescriptorStore(
        descriptors_repo,
        refresh_seconds=float(_setting(settings, "DESCRIPTOR_REFRESH_SECONDS", 60.0)),
        monotonic=monotonic,
    )
    face_profile_service = FaceProfileService(descriptor_store, matcher, clock=clock)

    liveness_config = LivenessConfig(
        timeout_seconds=float(_setting(settings, "LIVENESS_TIMEOUT_SECONDS", constants.DEFAULT_LIVENESS_TIMEOUT_SECONDS)),
        buffer_size=int(_setting(settings, "LIVENESS_BUFFER_SIZE", constants.DEFAULT_LIVENESS_BUFFER_SIZE)),
        min_samples=int(_setting(settings, "LIVENESS_MIN_SAMPLES", constants.DEFAULT_LIVENESS_MIN_SAMPLES)),
        min_ticks=int(_setting(settings, "LIVENESS_MIN_TICKS", constants.DEFAULT_LIVENESS_MIN_TICKS)),
        max_missed_ticks=int(_setting(settings, "LIVENESS_MAX_MISSED_TICKS", constants.DEFAULT_LIVENESS_MAX_MISSED_TICKS)),
        verdict_ttl_seconds=float(
            _setting(settings, "LIVENESS_VERDICT_TTL_SECONDS", constants.DEFAULT_LIVENESS_VERDICT_TTL_SECONDS)
        ),
        movement_threshold_px=float(
            _setting(settings, "LIVENESS_MOVEMENT_THRESHOLD_PX", constants.DEFAULT_MOVEMENT_THRESHOLD_PX)
        ),
        reference_frame_width=int(
            _setting(settings, "LIVENESS_REFERENCE_FRAME_WIDTH", constants.DEFAULT_REFERENCE_FRAME_WIDTH)
        ),
    )
    liveness_registry = LivenessSessionRegistry(LivenessVerifier(liveness_config, monotonic=monotonic))

    schedule_service = ScheduleService(
        shifts_repo,
        schedules_repo,
        default_schedule=default_schedule_from_settings(settings),
    )
    leave_service = LeaveService(requests_repo)

    penalty = LatePenaltyPolicy.parse(_setting(settings, "LATE_PENALTY_TIERS", DEFAULT_LATE_PENALTY_TIERS))
    work_hours_service = WorkHoursService(
        attendance_repo,
        schedule_service,
        leave_service,
        work_hours_repo,
        calculator=StandardWorkHoursCalculator(penalty_policy=penalty),
        clock=clock,
    )

    resolver = AttendanceEventResolver(
        attendance_repo,
        match_policy=policy,
        strategy_factory=AttendanceStrategyFactory(),
        on_recorded=work_hours_service.on_event_recorded,
    )
    attendance_service = AttendanceService(
        face_profile_service,
        liveness_registry,
        schedule_service,
        resolver,
        attendance_repo,
        attempts_repo,
        clock=clock,
    )

    return Container(
        conn=conn,
        workday_tz=workday_tz,
        clock=clock,
        descriptors_repo=descriptors_repo,
        attendance_repo=attendance_repo,
        attempts_repo=attempts_repo,
        shifts_repo=shifts_repo,
        schedules_repo=schedules_repo,
        requests_repo=requests_repo,
        work_hours_repo=work_hours_repo,
        matcher=matcher,
        descriptor_store=descriptor_store,
        face_profile_service=face_profile_service,
        liveness_registry=liveness_registry,
        schedule_service=schedule_service,
        leave_service=leave_service,
        work_hours_service=work_hours_service,
        resolver=resolver,
        attendance_service=attendance_service,
    )
