from __future__ import annotations

from src.institute_analytics.institute_analytics.core.enums import EnrollmentStatus


def test_resolve_prefers_barcode_then_code(store, services):
    resolver = services.identity_resolver

    assert resolver.resolve("STU24000001").student_id == 1
    assert resolver.resolve("S003").student_id == 3
    assert resolver.resolve("nobody") is None
    assert resolver.resolve("") is None


def test_verify_enrollment_only_accepts_active(store, services):
    store.enrollments.enroll(1, 1)
    store.enrollments.enroll(2, 1, status=EnrollmentStatus.INACTIVE)

    resolver = services.identity_resolver

    assert resolver.verify_enrollment(student_id=1, class_id=1).class_name == "Math 101"
    assert resolver.verify_enrollment(student_id=2, class_id=1) is None
    assert resolver.verify_enrollment(student_id=1, class_id=2) is None
