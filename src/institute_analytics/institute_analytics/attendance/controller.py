from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import PersistenceError, ValidationError
from ..container import Container
from ..reports.presenter import present

logger = logging.getLogger(__name__)


def _actor_id(data: dict):
    value = data.get("actor_id")
    return int(value) if value not in (None, "") else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/mark", methods=["POST"], endpoint="api_attendance_mark")
    def api_attendance_mark():
        """Bulk/manual marking -> {success, count} or {success: false, error}."""

        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_service.mark_attendance(
                class_id=data.get("class_id"),
                on_date=data.get("date"),
                records=data.get("records") or [],
                actor=_actor_id(data),
            )
            return jsonify({"success": True, "count": result.written_count}), 200
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        """Barcode/kiosk check-in. Rejections are 200 with success=false."""

        data = request.get_json(silent=True) or {}
        try:
            result = container.attendance_service.mark_by_identity(
                class_id=data.get("class_id"),
                on_date=data.get("date"),
                token=data.get("token") or data.get("barcode") or "",
                actor=_actor_id(data),
            )
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "status": "invalid", "message": str(e)}), 400
        except PersistenceError:
            return jsonify({"success": False, "status": "error", "message": "Error processing scan"}), 500

        body = {"success": result.success, "status": result.status.value, "message": result.message}
        if result.student_name:
            body["studentName"] = result.student_name
        return jsonify(body), 200

    @app.route("/api/attendance/classes/<int:class_id>/sheet", methods=["GET"], endpoint="api_attendance_sheet")
    def api_attendance_sheet(class_id: int):
        try:
            sheet = container.attendance_service.get_class_sheet(class_id=class_id, on_date=request.args.get("date"))
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "students": present(sheet)}), 200

    @app.route("/api/students/<int:student_id>/attendance", methods=["GET"], endpoint="api_student_attendance")
    def api_student_attendance(student_id: int):
        try:
            limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
            rows = container.attendance_service.get_student_history(student_id, limit=limit)
        except (ValidationError, ValueError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "records": present(list(rows))}), 200

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    def api_attendance_delete(attendance_id: int):
        try:
            deleted = container.attendance_service.delete_attendance(attendance_id)
        except ValidationError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        if not deleted:
            return jsonify({"success": False, "error": "Attendance record not found"}), 404
        return jsonify({"success": True}), 200
