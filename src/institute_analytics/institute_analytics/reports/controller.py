from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_local
from ..core.constants import TOP_CLASSES_LIMIT
from ..core.exceptions import PersistenceError, ValidationError
from ..container import Container
from .presenter import present


def register(app: Flask, container: Container) -> None:
    def _range_args() -> dict:
        return {"start": request.args.get("start") or None, "end": request.args.get("end") or None}

    def _report_response(build, **kwargs):
        try:
            report = build(**kwargs)
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify(present(report)), 200

    def _write_report_csv(*, rows: list[dict], fieldnames: list[str], filename: str):
        """Write report rows to CSV response."""

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/financial", methods=["GET"], endpoint="api_reports_financial")
    def api_reports_financial():
        return _report_response(container.report_service.build_financial_report, **_range_args())

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_reports_attendance")
    def api_reports_attendance():
        return _report_response(container.report_service.build_attendance_report, **_range_args())

    @app.route("/api/reports/academic", methods=["GET"], endpoint="api_reports_academic")
    def api_reports_academic():
        return _report_response(container.report_service.build_academic_report, **_range_args())

    @app.route("/api/reports/attendance/snapshot", methods=["GET"], endpoint="api_reports_attendance_snapshot")
    def api_reports_attendance_snapshot():
        return _report_response(
            container.report_service.build_attendance_snapshot,
            today=request.args.get("today") or today_local(),
        )

    @app.route("/api/reports/payments/overdue", methods=["GET"], endpoint="api_reports_overdue_payments")
    def api_reports_overdue_payments():
        return _report_response(
            container.report_service.build_overdue_payments,
            today=request.args.get("today") or today_local(),
        )

    @app.route("/api/reports/classes/top", methods=["GET"], endpoint="api_reports_top_classes")
    def api_reports_top_classes():
        return _report_response(
            container.report_service.build_top_classes,
            today=request.args.get("today") or today_local(),
            limit=request.args.get("limit") or TOP_CLASSES_LIMIT,
        )

    @app.route(
        "/api/reports/classes/<int:class_id>/attendance", methods=["GET"], endpoint="api_reports_class_attendance"
    )
    def api_reports_class_attendance(class_id: int):
        return _report_response(container.report_service.build_class_attendance_history, class_id=class_id, **_range_args())

    @app.route(
        "/api/students/<int:student_id>/attendance/summary", methods=["GET"], endpoint="api_student_attendance_summary"
    )
    def api_student_attendance_summary(student_id: int):
        return _report_response(container.report_service.build_student_attendance_summary, student_id=student_id)

    @app.route("/api/reports/defaulters.csv", methods=["GET"], endpoint="api_reports_defaulters_csv")
    def api_reports_defaulters_csv():
        try:
            report = container.report_service.build_financial_report(**_range_args())
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500

        return _write_report_csv(
            rows=[{**row, "total_pending": f"{row['total_pending']:.2f}"} for row in present(report.defaulters)],
            fieldnames=["student_code", "student_name", "total_pending", "overdue_count"],
            filename="defaulters.csv",
        )

    @app.route("/api/reports/risk-students.csv", methods=["GET"], endpoint="api_reports_risk_students_csv")
    def api_reports_risk_students_csv():
        try:
            report = container.report_service.build_attendance_report(**_range_args())
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500

        return _write_report_csv(
            rows=present(report.risk_students),
            fieldnames=["student_code", "student_name", "attendance_rate", "total_absences", "classes_enrolled"],
            filename="risk_students.csv",
        )
