"""Turns a verified identity into one classified attendance event."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..common.locks import StripedLocks
from ..common.logging_setup import operational_logger
from ..core.enums import EventFlag, EventType
from ..core.exceptions import DuplicateOpenEvent, IdentityNotVerified, OrphanCheckout, ScheduleNotConfigured
from ..liveness.verifier import LivenessSession
from ..matching.model import MatchPolicy, MatchResult
from ..schedules.model import WorkSchedule
from .factory import AttendanceStrategyFactory
from .model import AttendanceEvent
from .repository import AttendanceEventRepository

logger = logging.getLogger(__name__)

RecomputeHook = Callable[[int, date], None]


class AttendanceEventResolver:
    """Sole writer of attendance events.

    Writes for one employee are serialized by a per-employee lock; the
    repository's open-slot constraint covers writers in other processes.
    """

    def __init__(
        self,
        events: AttendanceEventRepository,
        *,
        match_policy: MatchPolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        on_recorded: Optional[RecomputeHook] = None,
    ):
        self._events = events
        self._policy = match_policy or MatchPolicy()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._on_recorded = on_recorded
        self._locks = StripedLocks()

    def resolve(
        self,
        identity: MatchResult,
        event_type: EventType,
        now: datetime,
        schedule: Optional[WorkSchedule],
        liveness: Optional[LivenessSession],
    ) -> AttendanceEvent:
        """Record a check-in or check-out for a matched identity.

        Raises IdentityNotVerified, the liveness errors from
        ``LivenessSession.consume``, ScheduleNotConfigured, DuplicateOpenEvent
        and OrphanCheckout. The last two still leave a flagged event in the log.
        """
        if identity is None or not identity.matched or identity.distance >= self._policy.threshold:
            raise IdentityNotVerified()
        employee_id = int(identity.identity_id)
        work_date = now.date()

        if schedule is None:
            operational_logger().error("No schedule configured for employee %s on %s", employee_id, work_date)
            raise ScheduleNotConfigured(employee_id, work_date)
        if liveness is None:
            raise IdentityNotVerified("Liveness session is required")

        liveness.consume()

        decision = self._factory.decide(event_type, now=now, work_date=work_date, schedule=schedule)
        event = AttendanceEvent(
            employee_id=employee_id,
            event_type=event_type,
            timestamp=now,
            work_date=work_date,
            match_confidence=identity.confidence,
            status=decision.status,
            late_minutes=decision.late_minutes,
            early_minutes=decision.early_minutes,
            liveness_session_id=liveness.session_id,
        )

        with self._locks.for_key(employee_id):
            stored = self._append(event)

        self._notify(stored)
        return stored

    def _append(self, event: AttendanceEvent) -> AttendanceEvent:
        open_checkin = self._events.get_open_checkin(event.employee_id, event.work_date)

        if event.event_type == EventType.CHECK_IN:
            if open_checkin is not None:
                self._record_duplicate(event, open_checkin.event_id)
            try:
                stored = self._events.append(event)
            except DuplicateOpenEvent:
                # Another process won the open slot.
                self._record_duplicate(event, None)
            logger.info(
                "Employee %s checked in at %s (%s)", event.employee_id, event.timestamp, event.status.value
            )
            return stored

        if open_checkin is None:
            self._events.append(event.flagged(EventFlag.ORPHAN_CHECKOUT, "check-out without open check-in"))
            logger.warning("Orphan check-out for employee %s on %s", event.employee_id, event.work_date)
            raise OrphanCheckout()

        stored = self._events.append(event)
        logger.info("Employee %s checked out at %s (%s)", event.employee_id, event.timestamp, event.status.value)
        return stored

    def _record_duplicate(self, event: AttendanceEvent, open_event_id: Optional[int]) -> None:
        note = f"open check-in {open_event_id} already exists" if open_event_id else "open check-in already exists"
        self._events.append(event.flagged(EventFlag.DUPLICATE_OPEN, note))
        logger.warning("Duplicate open check-in for employee %s on %s", event.employee_id, event.work_date)
        raise DuplicateOpenEvent()

    def _notify(self, event: AttendanceEvent) -> None:
        if self._on_recorded is None:
            return
        try:
            self._on_recorded(event.employee_id, event.work_date)
        except Exception:
            # The event is stored; the day can be rebuilt by the recompute job.
            operational_logger().exception(
                "Work-hours recompute failed for employee %s on %s", event.employee_id, event.work_date
            )
