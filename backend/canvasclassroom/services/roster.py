"""
Roster and enrollment management.

Students are archived rather than deleted. Enrollments move from pending to
approved or rejected, and only pending ones can be decided.
"""

import csv
import io
import logging
from datetime import datetime, UTC
from typing import List, Optional

from .. import schemas
from ..errors import InvalidTransitionError, NotFoundError
from ..gateway import PersistenceGateway
from ..models.enums import EnrollmentStatus

logger = logging.getLogger(__name__)

PLACEHOLDER_STUDENT_NAME = "New Student"

# Header keywords per field, in matching priority
HEADER_KEYWORDS = (
    ("name", ("name",)),
    ("email", ("email",)),
    ("student_id", ("id", "student")),
)
EXPORT_HEADER = ["Name", "Email", "Student ID"]


def map_csv_header(header: List[str]) -> dict:
    """Map field name to column index.

    Matching is a case-insensitive substring test. A column maps to at most
    one field and the first matching column for a field wins.
    """
    columns = {}
    for index, title in enumerate(header):
        title = title.strip().lower()
        for field, keywords in HEADER_KEYWORDS:
            if any(keyword in title for keyword in keywords):
                columns.setdefault(field, index)
                break
    return columns


def parse_roster_csv(csv_data: str) -> List[schemas.StudentCreate]:
    """Read student rows from CSV text. Blank lines and rows without a name are skipped."""
    rows = [
        row for row in csv.reader(io.StringIO(csv_data))
        if any(cell.strip() for cell in row)
    ]
    if not rows:
        return []

    columns = map_csv_header(rows[0])
    students = []
    for row in rows[1:]:
        values = {
            field: (row[index].strip() if index < len(row) else "") or None
            for field, index in columns.items()
        }
        if not values.get("name"):
            continue
        students.append(schemas.StudentCreate(**values))
    return students


def roster_to_csv(students: List[schemas.Student]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADER)
    for student in students:
        writer.writerow([student.name, student.email or "", student.student_id or ""])
    return buffer.getvalue()


class RosterService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    # -- roster -------------------------------------------------------

    def roster(self, class_id: str) -> schemas.RosterView:
        students = self.gateway.list_class_students(class_id)
        return schemas.RosterView(
            active=[s for s in students if s.is_active],
            archived=[s for s in students if not s.is_active],
        )

    def get_student(self, class_id: str, student_id: str) -> schemas.Student:
        """A student with an approved enrollment in the class."""
        enrollment = self.gateway.find_enrollment(student_id, class_id)
        student = self.gateway.get_student(student_id)
        if student is None or enrollment is None or enrollment.status != EnrollmentStatus.approved:
            raise NotFoundError("Student", student_id)
        return student

    def _enroll_new(self, class_id: str, data: schemas.StudentCreate) -> schemas.Student:
        now = datetime.now(UTC)
        student = self.gateway.create_student(data, enrolled_at=now)
        self.gateway.create_enrollment(student.id, class_id, EnrollmentStatus.approved, enrolled_at=now)
        return student

    def add_student(self, class_id: str, data: schemas.StudentCreate) -> schemas.Student:
        with self.gateway.atomic():
            student = self._enroll_new(class_id, data)
        logger.info(f"Added student {student.id} to class {class_id}")
        return student

    def import_csv(self, class_id: str, csv_data: str) -> List[schemas.Student]:
        """Create a student and an approved enrollment per CSV row, all or nothing."""
        rows = parse_roster_csv(csv_data)
        with self.gateway.atomic():
            students = [self._enroll_new(class_id, row) for row in rows]
        logger.info(f"Imported {len(students)} students into class {class_id}")
        return students

    def export_csv(self, class_id: str) -> str:
        return roster_to_csv(self.roster(class_id).active)

    def update_student(self, class_id: str, student_id: str, data: schemas.StudentUpdate) -> schemas.Student:
        self.get_student(class_id, student_id)
        return self.gateway.update_student(student_id, data.model_dump(exclude_unset=True))

    def archive_student(self, class_id: str, student_id: str) -> schemas.Student:
        self.get_student(class_id, student_id)
        return self.gateway.update_student(student_id, {"is_active": False})

    def restore_student(self, class_id: str, student_id: str) -> schemas.Student:
        self.get_student(class_id, student_id)
        return self.gateway.update_student(student_id, {"is_active": True})

    # -- enrollments --------------------------------------------------

    def list_enrollments(
        self, class_id: str, status: Optional[EnrollmentStatus] = None
    ) -> List[schemas.Enrollment]:
        return self.gateway.list_enrollments(class_id, status)

    def _pending(self, class_id: str, enrollment_id: str, requested: EnrollmentStatus) -> schemas.Enrollment:
        enrollment = self.gateway.get_enrollment(enrollment_id)
        if enrollment is None or enrollment.class_id != class_id:
            raise NotFoundError("Enrollment", enrollment_id)
        if enrollment.status != EnrollmentStatus.pending:
            raise InvalidTransitionError("Enrollment", enrollment.status.value, requested.value)
        return enrollment

    def approve_enrollment(self, class_id: str, enrollment_id: str) -> schemas.Enrollment:
        """Approve a request, creating a placeholder student if none exists."""
        enrollment = self._pending(class_id, enrollment_id, EnrollmentStatus.approved)
        now = datetime.now(UTC)
        with self.gateway.atomic():
            if self.gateway.get_student(enrollment.student_id) is None:
                logger.info(f"Creating placeholder student {enrollment.student_id}")
                self.gateway.create_student(
                    schemas.StudentCreate(name=PLACEHOLDER_STUDENT_NAME),
                    student_id=enrollment.student_id,
                    enrolled_at=now,
                )
            approved = self.gateway.update_enrollment(
                enrollment_id, {"status": EnrollmentStatus.approved, "enrolled_at": now}
            )
        return approved

    def reject_enrollment(self, class_id: str, enrollment_id: str) -> schemas.Enrollment:
        self._pending(class_id, enrollment_id, EnrollmentStatus.rejected)
        return self.gateway.update_enrollment(enrollment_id, {"status": EnrollmentStatus.rejected})

    def join_by_code(self, student_id: str, request: schemas.JoinClassRequest) -> schemas.Enrollment:
        """Request enrollment with a class code; repeated requests return the existing enrollment."""
        classroom = self.gateway.get_class_by_code(request.class_code)
        if classroom is None:
            raise NotFoundError("Class", request.class_code, f"No class with code {request.class_code}")
        existing = self.gateway.find_enrollment(student_id, classroom.id)
        if existing is not None:
            return existing
        return self.gateway.create_enrollment(student_id, classroom.id, EnrollmentStatus.pending)
