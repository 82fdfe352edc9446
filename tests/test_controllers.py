from __future__ import annotations

from datetime import date, datetime

import pytest

from src.institute_analytics.institute_analytics.core.enums import AttendanceStatus, PaymentStatus
from src.institute_analytics.institute_analytics.main import create_app
from src.institute_analytics.institute_analytics.payments.model import FeePayment


@pytest.fixture
def client(monkeypatch, store):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=store.services())
    return app.test_client()


def test_mark_endpoint_returns_count(client, store):
    resp = client.post(
        "/api/attendance/mark",
        json={
            "class_id": 1,
            "date": "2024-05-02",
            "actor_id": "4",
            "records": [{"student_id": 1, "status": "present"}, {"student_id": 2, "status": "late"}],
        },
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "count": 2}
    assert {r.marked_by for r in store.attendance.all()} == {4}


def test_mark_endpoint_rejects_missing_date(client, store):
    resp = client.post("/api/attendance/mark", json={"class_id": 1, "records": [{"student_id": 1, "status": "present"}]})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert store.attendance.all() == []


def test_mark_endpoint_reports_store_failure(client, store):
    store.attendance.fail_writes = True

    resp = client.post(
        "/api/attendance/mark",
        json={"class_id": 1, "date": "2024-05-02", "records": [{"student_id": 1, "status": "present"}]},
    )

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "write failed"}


def test_scan_endpoint_outcomes(client, store):
    store.enrollments.enroll(1, 1)

    ok = client.post("/api/attendance/scan", json={"class_id": 1, "date": "2024-05-02", "barcode": "STU24000001"})
    missing = client.post("/api/attendance/scan", json={"class_id": 1, "date": "2024-05-02", "token": "nope"})
    outsider = client.post("/api/attendance/scan", json={"class_id": 1, "date": "2024-05-02", "token": "S002"})

    assert ok.get_json() == {
        "success": True,
        "status": "success",
        "message": "Alice Tran marked present",
        "studentName": "Alice Tran",
    }
    assert missing.get_json() == {"success": False, "status": "not_found", "message": "Student not found"}
    assert outsider.status_code == 200
    assert outsider.get_json()["status"] == "not_enrolled"
    assert [r.status for r in store.attendance.all()] == [AttendanceStatus.PRESENT]


def test_scan_endpoint_requires_token(client):
    resp = client.post("/api/attendance/scan", json={"class_id": 1, "date": "2024-05-02"})

    assert resp.status_code == 400


def test_sheet_history_and_delete(client, store):
    store.enrollments.enroll(1, 1)
    client.post(
        "/api/attendance/mark",
        json={"class_id": 1, "date": "2024-05-02", "records": [{"student_id": 1, "status": "absent", "notes": "ill"}]},
    )

    sheet = client.get("/api/attendance/classes/1/sheet?date=2024-05-02").get_json()
    assert sheet["students"] == [
        {
            "student_id": 1,
            "student_code": "S001",
            "full_name": "Alice Tran",
            "attendance_status": "absent",
            "attendance_notes": "ill",
        }
    ]

    history = client.get("/api/students/1/attendance?limit=5").get_json()
    [record] = history["records"]
    assert (record["date"], record["status"], record["class_name"]) == ("2024-05-02", "absent", "Math 101")

    assert client.delete(f"/api/attendance/{record['attendance_id']}").status_code == 200
    assert client.delete(f"/api/attendance/{record['attendance_id']}").status_code == 404


def test_report_endpoints_return_camel_case_reports(client):
    financial = client.get("/api/reports/financial").get_json()
    academic = client.get("/api/reports/academic?start=2024-01-01&end=2024-12-31").get_json()

    assert set(financial) == {"monthlyRevenue", "paymentStats", "defaulters", "revenueByClass"}
    assert set(academic) == {"gradeDistribution", "topPerformers", "classPerformance", "assessmentStats"}


def test_report_endpoint_rejects_inverted_range(client):
    resp = client.get("/api/reports/attendance?start=2024-05-02&end=2024-05-01")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_snapshot_endpoint(client, store):
    client.post(
        "/api/attendance/mark",
        json={"class_id": 1, "date": "2024-05-20", "records": [{"student_id": 1, "status": "present"}]},
    )

    data = client.get("/api/reports/attendance/snapshot?today=2024-05-20").get_json()

    assert (data["today"], data["presentToday"], data["windowDays"]) == ("2024-05-20", 1, 30)


def test_risk_students_csv(client):
    client.post(
        "/api/attendance/mark",
        json={"class_id": 1, "date": "2024-05-02", "records": [{"student_id": 2, "status": "absent"}]},
    )

    resp = client.get("/api/reports/risk-students.csv")

    assert resp.mimetype == "text/csv"
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == "student_code,student_name,attendance_rate,total_absences,classes_enrolled"
    assert lines[1] == "S002,Bao Nguyen,0.0,1,1"


def test_barcode_endpoints(client, store):
    issued = client.post("/api/students/2/barcode").get_json()
    assert issued["success"] is True
    assert store.students.get_by_id(2).barcode == issued["barcode"]

    assert client.post("/api/students/99/barcode").status_code == 404
    assert client.post("/api/students/barcodes").get_json() == {"success": True, "count": 1}

    image = client.get("/api/students/1/barcode.png")
    assert image.status_code == 200
    assert image.mimetype == "image/png"
    assert image.data[:8] == b"\x89PNG\r\n\x1a\n"


def test_defaulters_csv_writes_amounts_with_two_decimals(client, store):
    store.payments.rows = [
        FeePayment(
            payment_id=1,
            student_id=1,
            amount=100.25,
            amount_paid=0,
            status=PaymentStatus.OVERDUE,
            created_at=datetime(2024, 5, 1),
            student_name="Alice Tran",
            student_code="S001",
        ),
        FeePayment(
            payment_id=2,
            student_id=2,
            amount=300,
            amount_paid=0.0,
            status=PaymentStatus.OVERDUE,
            created_at=datetime(2024, 5, 2),
            student_name="Bao Nguyen",
            student_code="S002",
        ),
    ]

    resp = client.get("/api/reports/defaulters.csv")

    assert resp.mimetype == "text/csv"
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines == [
        "student_code,student_name,total_pending,overdue_count",
        "S002,Bao Nguyen,300.00,1",
        "S001,Alice Tran,100.25,1",
    ]


def test_financial_json_keeps_cents(client, store):
    store.payments.rows = [
        FeePayment(
            payment_id=1,
            student_id=1,
            amount=100.25,
            amount_paid=40.05,
            status=PaymentStatus.PAID,
            created_at=datetime(2024, 5, 1),
        )
    ]

    stats = client.get("/api/reports/financial").get_json()["paymentStats"]

    assert (stats["totalRevenue"], stats["paidAmount"]) == (100.25, 40.05)


def test_overdue_and_top_class_endpoints(client, store):
    store.enrollments.enroll(1, 1)
    store.payments.rows = [
        FeePayment(
            payment_id=3,
            student_id=1,
            amount=80.5,
            amount_paid=0,
            status=PaymentStatus.UNPAID,
            created_at=datetime(2024, 4, 1),
            due_date=date(2024, 5, 15),
            student_name="Alice Tran",
            student_code="S001",
        )
    ]

    overdue = client.get("/api/reports/payments/overdue?today=2024-05-20").get_json()
    top = client.get("/api/reports/classes/top?today=2024-05-20&limit=3").get_json()

    assert overdue["totalAmount"] == 80.5
    assert overdue["payments"][0]["days_overdue"] == 5
    assert overdue["payments"][0]["due_date"] == "2024-05-15"
    assert top == [{"class_id": 1, "class_name": "Math 101", "enrollment_count": 1, "attendance_rate": 0.0}]
    assert client.get("/api/reports/classes/top?limit=many").status_code == 400


def test_class_history_and_student_summary_endpoints(client):
    client.post(
        "/api/attendance/mark",
        json={"class_id": 1, "date": "2024-05-02", "records": [{"student_id": 1, "status": "late"}]},
    )

    history = client.get("/api/reports/classes/1/attendance?start=2024-05-01&end=2024-05-31").get_json()
    summary = client.get("/api/students/1/attendance/summary").get_json()

    assert history[0]["date"] == "2024-05-02"
    assert history[0]["attendance_percentage"] == 100.0
    assert summary[0]["class_name"] == "Math 101"
    assert summary[0]["late_count"] == 1
    assert client.get("/api/reports/classes/1/attendance?start=2024-06-01&end=2024-05-01").status_code == 400
