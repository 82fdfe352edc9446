"""Example: use the service layer directly (no Flask).

Builds the attendance report for the last 30 days and prints the at-risk list.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.institute_analytics.institute_analytics.container import build_container
from src.institute_analytics.institute_analytics.reports.presenter import present


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    today = date.today()
    report = container.report_service.build_attendance_report(start=today - timedelta(days=30), end=today)
    for row in present(report.risk_students):
        print(row)


if __name__ == "__main__":
    main()
