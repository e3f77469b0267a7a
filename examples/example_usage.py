"""Example: drive the service layer without Flask.

Controllers are thin; the matching, liveness and work-hours rules live in services.
"""


from config import load_settings

from src.face_attendance.face_attendance.container import build_container


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    today = container.clock()
    summary = container.work_hours_service.compute_monthly(1, today.month, today.year)
    print(f"Employee 1, {today:%Y-%m}: {summary.total_hours:.2f} h, {summary.late_days} late days")

    for record in container.work_hours_service.compute_range(1, today.date().replace(day=1), today.date()):
        print(record.work_date, record.status.value, f"{record.regular_hours:.2f}", f"{record.overtime_hours:.2f}")


if __name__ == "__main__":
    main()
