from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime

from ...core.enums import EventStatus
from ...schedules.model import WorkSchedule


@dataclass(frozen=True)
class StatusDecision:
    status: EventStatus
    late_minutes: int = 0
    early_minutes: int = 0


def whole_minutes(seconds: float) -> int:
    return int(max(0.0, seconds) // 60)


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we classify an attendance event."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, now: datetime, work_date: date, schedule: WorkSchedule) -> StatusDecision:
        raise NotImplementedError
