from __future__ import annotations

from datetime import date

import pytest

from src.institute_analytics.institute_analytics.attendance.model import AttendanceMark
from src.institute_analytics.institute_analytics.core.enums import AttendanceStatus, EnrollmentStatus, ScanOutcome
from src.institute_analytics.institute_analytics.core.exceptions import PersistenceError, ValidationError

DAY = date(2024, 5, 2)


def test_marking_twice_keeps_one_row_with_latest_status(store, services):
    svc = services.attendance_service

    svc.mark_attendance(class_id=1, on_date=DAY, records=[{"student_id": 1, "status": "present"}])
    svc.mark_attendance(class_id=1, on_date="2024-05-02", records=[{"student_id": 1, "status": "absent"}])

    rows = store.attendance.all()
    assert len(rows) == 1
    assert rows[0].status == AttendanceStatus.ABSENT


def test_bulk_mark_records_actor_and_notes(store, services):
    result = services.attendance_service.mark_attendance(
        class_id=1,
        on_date=DAY,
        records=[
            AttendanceMark(student_id=1, status=AttendanceStatus.LATE, notes="bus"),
            {"student_id": 2, "status": "EXCUSED"},
        ],
        actor=7,
    )

    assert result.written_count == 2
    by_student = {r.student_id: r for r in store.attendance.all()}
    assert by_student[1].notes == "bus"
    assert by_student[2].status == AttendanceStatus.EXCUSED
    assert {r.marked_by for r in by_student.values()} == {7}


def test_bulk_mark_does_not_check_enrollment(store, services):
    # student 3 has no enrollment at all
    services.attendance_service.mark_attendance(class_id=1, on_date=DAY, records=[{"student_id": 3, "status": "present"}])

    assert len(store.attendance.all()) == 1


def test_bulk_mark_with_no_records_writes_nothing(store, services):
    result = services.attendance_service.mark_attendance(class_id=1, on_date=DAY, records=[])

    assert result.written_count == 0
    assert store.attendance.write_calls == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"class_id": 1, "on_date": None, "records": [{"student_id": 1, "status": "present"}]},
        {"class_id": 1, "on_date": "02/05/2024", "records": [{"student_id": 1, "status": "present"}]},
        {"class_id": 0, "on_date": DAY, "records": [{"student_id": 1, "status": "present"}]},
        {"class_id": 1, "on_date": DAY, "records": [{"student_id": 1, "status": "sick"}]},
        {"class_id": 1, "on_date": DAY, "records": [{"status": "present"}]},
    ],
)
def test_bulk_mark_rejects_invalid_input_before_writing(store, services, kwargs):
    with pytest.raises(ValidationError):
        services.attendance_service.mark_attendance(**kwargs)

    assert store.attendance.write_calls == 0


def test_bulk_mark_propagates_store_failure(store, services):
    store.attendance.fail_writes = True

    with pytest.raises(PersistenceError):
        services.attendance_service.mark_attendance(
            class_id=1, on_date=DAY, records=[{"student_id": 1, "status": "present"}]
        )


def test_scan_by_barcode_marks_present(store, services):
    store.enrollments.enroll(1, 1)

    result = services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="STU24000001", actor=9)

    assert result.success
    assert result.status == ScanOutcome.SUCCESS
    assert result.student_name == "Alice Tran"
    [row] = store.attendance.all()
    assert (row.student_id, row.status, row.marked_by) == (1, AttendanceStatus.PRESENT, 9)


def test_scan_falls_back_to_student_code(store, services):
    store.enrollments.enroll(2, 1)

    result = services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token=" S002 ")

    assert result.success
    assert store.attendance.all()[0].student_id == 2


def test_scan_overwrites_earlier_absent(store, services):
    store.enrollments.enroll(1, 1)
    services.attendance_service.mark_attendance(class_id=1, on_date=DAY, records=[{"student_id": 1, "status": "absent"}])

    services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="S001")

    [row] = store.attendance.all()
    assert row.status == AttendanceStatus.PRESENT


def test_scan_unknown_token_is_not_found(store, services):
    result = services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="STU99123456")

    assert not result.success
    assert result.status == ScanOutcome.NOT_FOUND
    assert store.attendance.write_calls == 0


def test_scan_not_enrolled_names_student_and_writes_nothing(store, services):
    store.enrollments.enroll(2, 2)
    store.enrollments.enroll(2, 1, status=EnrollmentStatus.INACTIVE)

    result = services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="S002")

    assert result.status == ScanOutcome.NOT_ENROLLED
    assert result.student_name == "Bao Nguyen"
    assert "Bao Nguyen" in result.message
    assert store.attendance.all() == []


def test_scan_write_failure_is_reported_not_raised(store, services):
    store.enrollments.enroll(1, 1)
    store.attendance.fail_writes = True

    result = services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="S001")

    assert result.status == ScanOutcome.WRITE_FAILED
    assert not result.success


def test_scan_requires_token(services):
    with pytest.raises(ValidationError):
        services.attendance_service.mark_by_identity(class_id=1, on_date=DAY, token="   ")


def test_class_sheet_lists_active_students_with_status(store, services):
    store.enrollments.enroll(1, 1)
    store.enrollments.enroll(2, 1)
    store.enrollments.enroll(3, 1, status=EnrollmentStatus.INACTIVE)
    services.attendance_service.mark_attendance(
        class_id=1, on_date=DAY, records=[{"student_id": 2, "status": "late", "notes": "traffic"}]
    )

    sheet = services.attendance_service.get_class_sheet(class_id=1, on_date=DAY)

    assert [s.student_id for s in sheet] == [1, 2]
    assert sheet[0].attendance_status is None
    assert (sheet[1].attendance_status, sheet[1].attendance_notes) == (AttendanceStatus.LATE, "traffic")


def test_student_history_newest_first_and_limited(store, services):
    for day in (date(2024, 5, 1), date(2024, 5, 3), date(2024, 5, 2)):
        services.attendance_service.mark_attendance(class_id=1, on_date=day, records=[{"student_id": 1, "status": "present"}])

    history = services.attendance_service.get_student_history(1, limit=2)

    assert [h.date for h in history] == [date(2024, 5, 3), date(2024, 5, 2)]
    assert history[0].class_name == "Math 101"


def test_student_history_rejects_non_positive_limit(services):
    with pytest.raises(ValidationError):
        services.attendance_service.get_student_history(1, limit=0)


def test_delete_attendance(store, services):
    services.attendance_service.mark_attendance(class_id=1, on_date=DAY, records=[{"student_id": 1, "status": "present"}])
    [row] = store.attendance.all()

    assert services.attendance_service.delete_attendance(row.attendance_id) is True
    assert services.attendance_service.delete_attendance(row.attendance_id) is False
    assert store.attendance.all() == []
