from __future__ import annotations

from dataclasses import dataclass

from .assessments.mysql_grade_repository import MySQLGradeRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceMarkingService
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .identity.barcodes import BarcodeService
from .identity.resolver import IdentityResolver
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .reports.service import ReportService
from .students.mysql_student_repository import MySQLStudentRepository


@dataclass(frozen=True)
class Container:
    students_repo: MySQLStudentRepository
    enrollments_repo: MySQLEnrollmentRepository
    attendance_repo: MySQLAttendanceRepository
    payments_repo: MySQLPaymentRepository
    grades_repo: MySQLGradeRepository

    identity_resolver: IdentityResolver
    barcode_service: BarcodeService
    attendance_service: AttendanceMarkingService
    report_service: ReportService


def build_services(
    *,
    students_repo,
    enrollments_repo,
    attendance_repo,
    payments_repo,
    grades_repo,
) -> Container:
    """Wire services over any repositories implementing the Protocols."""

    identity_resolver = IdentityResolver(students_repo, enrollments_repo)
    barcode_service = BarcodeService(students_repo)
    attendance_service = AttendanceMarkingService(attendance_repo, identity_resolver, enrollments_repo)
    report_service = ReportService(attendance_repo, payments_repo, grades_repo, enrollments_repo)

    return Container(
        students_repo=students_repo,
        enrollments_repo=enrollments_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        grades_repo=grades_repo,
        identity_resolver=identity_resolver,
        barcode_service=barcode_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        students_repo=MySQLStudentRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        grades_repo=MySQLGradeRepository(conn),
    )
