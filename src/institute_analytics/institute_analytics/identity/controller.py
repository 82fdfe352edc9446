from __future__ import annotations

import io

import qrcode
from flask import Flask, jsonify, send_file

from ..core.exceptions import NotFoundError, PersistenceError
from ..container import Container


def _qr_png(token: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(token)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf)
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students/<int:student_id>/barcode", methods=["POST"], endpoint="api_student_barcode")
    def api_student_barcode(student_id: int):
        try:
            barcode = container.barcode_service.issue_barcode(student_id)
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "barcode": barcode}), 200

    @app.route("/api/students/barcodes", methods=["POST"], endpoint="api_students_barcodes")
    def api_students_barcodes():
        try:
            count = container.barcode_service.issue_missing_barcodes()
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "count": count}), 200

    @app.route("/api/students/<int:student_id>/barcode.png", methods=["GET"], endpoint="api_student_barcode_image")
    def api_student_barcode_image(student_id: int):
        """QR image of the student's scan token, for printed ID cards."""

        try:
            barcode = container.barcode_service.issue_barcode(student_id)
        except NotFoundError as e:
            return jsonify({"success": False, "error": str(e)}), 404
        except PersistenceError as e:
            return jsonify({"success": False, "error": str(e)}), 500
        return send_file(_qr_png(barcode), mimetype="image/png")
