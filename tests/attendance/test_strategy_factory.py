from datetime import date, datetime, time

from src.face_attendance.face_attendance.attendance.factory import AttendanceStrategyFactory
from src.face_attendance.face_attendance.attendance.strategies.early_strategy import EarlyLeaveStrategy
from src.face_attendance.face_attendance.attendance.strategies.late_strategy import LateStrategy
from src.face_attendance.face_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.face_attendance.face_attendance.core.enums import EventStatus, EventType
from src.face_attendance.face_attendance.schedules.model import WorkSchedule

MONDAY = date(2026, 2, 2)
SATURDAY = date(2026, 2, 7)


def test_factory_checkin_on_time_within_threshold(nine_to_six):
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=datetime(2026, 2, 2, 9, 10, 0), work_date=MONDAY, schedule=nine_to_six)

    assert isinstance(strategy, NormalStrategy)


def test_factory_checkin_late_after_threshold(nine_to_six):
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkin(now=datetime(2026, 2, 2, 9, 10, 1), work_date=MONDAY, schedule=nine_to_six)

    assert isinstance(strategy, LateStrategy)


def test_factory_checkout_before_end_is_early(nine_to_six):
    factory = AttendanceStrategyFactory()
    strategy = factory.for_checkout(now=datetime(2026, 2, 2, 17, 59, 0), work_date=MONDAY, schedule=nine_to_six)

    assert isinstance(strategy, EarlyLeaveStrategy)


def test_scenario_classifications(nine_to_six):
    factory = AttendanceStrategyFactory()

    on_time = factory.decide(EventType.CHECK_IN, now=datetime(2026, 2, 2, 9, 5), work_date=MONDAY, schedule=nine_to_six)
    late = factory.decide(EventType.CHECK_IN, now=datetime(2026, 2, 2, 9, 15), work_date=MONDAY, schedule=nine_to_six)
    early = factory.decide(EventType.CHECK_OUT, now=datetime(2026, 2, 2, 17, 30), work_date=MONDAY, schedule=nine_to_six)
    normal_out = factory.decide(EventType.CHECK_OUT, now=datetime(2026, 2, 2, 18, 0), work_date=MONDAY, schedule=nine_to_six)

    assert on_time.status == EventStatus.NORMAL and on_time.late_minutes == 0
    assert late.status == EventStatus.LATE and late.late_minutes == 15
    assert early.status == EventStatus.EARLY_LEAVE and early.early_minutes == 30
    assert normal_out.status == EventStatus.NORMAL and normal_out.early_minutes == 0


def test_non_work_day_is_never_late_or_early(nine_to_six):
    factory = AttendanceStrategyFactory()

    late_in = factory.decide(EventType.CHECK_IN, now=datetime(2026, 2, 7, 11, 0), work_date=SATURDAY, schedule=nine_to_six)
    early_out = factory.decide(EventType.CHECK_OUT, now=datetime(2026, 2, 7, 13, 0), work_date=SATURDAY, schedule=nine_to_six)

    assert late_in.status == EventStatus.NORMAL
    assert early_out.status == EventStatus.NORMAL


def test_rostered_weekend_uses_schedule(nine_to_six):
    rostered = nine_to_six.for_roster(work_day=True, source="roster")
    factory = AttendanceStrategyFactory()

    decision = factory.decide(EventType.CHECK_IN, now=datetime(2026, 2, 7, 9, 30), work_date=SATURDAY, schedule=rostered)

    assert decision.status == EventStatus.LATE
    assert decision.late_minutes == 30


def test_zero_threshold_means_late_right_after_start():
    schedule = WorkSchedule(start_time=time(8, 0), end_time=time(17, 0), late_threshold_minutes=0, scheduled_daily_hours=8)
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_checkin(now=datetime(2026, 2, 2, 8, 0), work_date=MONDAY, schedule=schedule), NormalStrategy)
    assert isinstance(factory.for_checkin(now=datetime(2026, 2, 2, 8, 1), work_date=MONDAY, schedule=schedule), LateStrategy)
