"""Rebuild DailyWorkHours for a day and refresh the month summaries.

Run daily after midnight (cron) or by hand after corrections:

    python scripts/recompute_work_hours.py --date 2024-05-02 [--employee 7]
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import load_settings

from src.face_attendance.face_attendance.common.datetime_utils import parse_iso_date
from src.face_attendance.face_attendance.common.logging_setup import configure_logging
from src.face_attendance.face_attendance.container import Container, build_container
from src.face_attendance.face_attendance.core.exceptions import OperationalError


def _employees_for(container: Container, work_date) -> list[int]:
    enrolled = {d.identity_id for d in container.descriptors_repo.list_all()}
    with_events = set(container.attendance_repo.employees_with_events(work_date))
    return sorted(enrolled | with_events)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--date", help="work date YYYY-MM-DD (default: yesterday)")
    parser.add_argument("--employee", type=int, help="only this employee")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings)
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)

    work_date = parse_iso_date(args.date) if args.date else container.clock().date() - timedelta(days=1)
    employees = [args.employee] if args.employee else _employees_for(container, work_date)

    failures = 0
    for employee_id in employees:
        try:
            record = container.work_hours_service.recompute_day(employee_id, work_date)
            container.work_hours_service.recompute_month(employee_id, work_date.month, work_date.year)
        except OperationalError as e:
            failures += 1
            print(f"SKIP employee {employee_id}: {e}")
            continue
        print(
            f"OK employee {employee_id} {work_date}: {record.status.value} "
            f"regular={record.regular_hours:.2f} overtime={record.overtime_hours:.2f}"
            + (" (provisional)" if record.provisional else "")
            + (" (missing check-out)" if record.missing_checkout else "")
        )

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
