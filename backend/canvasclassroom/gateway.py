"""
Persistence gateway.

The only module that talks to the database. Each method takes and returns
the pydantic entity shapes from :mod:`canvasclassroom.schemas`; translating
them to and from table rows happens here and nowhere else.

Writes commit immediately unless they run inside :meth:`PersistenceGateway.atomic`,
which groups them into a single transaction.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models, schemas
from .errors import NotFoundError
from .models.enums import EnrollmentStatus, HelpRequestStatus

logger = logging.getLogger(__name__)


def _submission_from_row(row: models.Submission) -> schemas.Submission:
    feedback = None
    if row.grade is not None and row.graded_at is not None:
        feedback = schemas.Feedback(
            grade=row.grade,
            comment=row.feedback_comment or "",
            graded_at=row.graded_at,
        )
    return schemas.Submission(
        id=row.id,
        lesson_id=row.lesson_id,
        student_id=row.student_id,
        class_id=row.class_id,
        code=row.code or "",
        status=row.status,
        submitted_at=row.submitted_at,
        feedback=feedback,
        current_step=row.current_step,
        text_answer=row.text_answer,
        history=row.history or {},
        time_spent=row.time_spent,
        version=row.version,
    )


def _submission_columns(submission: schemas.Submission) -> Dict[str, Any]:
    feedback = submission.feedback
    return {
        "lesson_id": submission.lesson_id,
        "student_id": submission.student_id,
        "class_id": submission.class_id,
        "code": submission.code,
        "text_answer": submission.text_answer,
        "status": submission.status,
        "current_step": submission.current_step,
        # JSON object keys are strings
        "history": {
            str(step): item.model_dump(by_alias=True)
            for step, item in submission.history.items()
        },
        "submitted_at": submission.submitted_at,
        "grade": feedback.grade if feedback else None,
        "feedback_comment": feedback.comment if feedback else None,
        "graded_at": feedback.graded_at if feedback else None,
        "time_spent": submission.time_spent,
        "version": submission.version,
    }


def _criteria_rows(criteria: Iterable) -> List[dict]:
    return [
        schemas.RubricCriterion.model_validate(criterion).model_dump(by_alias=True)
        for criterion in criteria
    ]


def _apply(row, updates: Dict[str, Any]) -> None:
    for field, value in updates.items():
        setattr(row, field, value)


class PersistenceGateway:
    """CRUD facade over the relational store."""

    def __init__(self, db: Session):
        self.db = db
        self._atomic_depth = 0

    # -- transactions -------------------------------------------------

    @contextmanager
    def atomic(self):
        """Run several writes as one transaction; nothing is kept if any fails."""
        outermost = self._atomic_depth == 0
        self._atomic_depth += 1
        try:
            yield self
            if outermost:
                self.db.commit()
        except Exception:
            if outermost:
                self.db.rollback()
            raise
        finally:
            self._atomic_depth -= 1

    def _save(self, action: str) -> None:
        try:
            if self._atomic_depth:
                self.db.flush()
            else:
                self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Database error while {action}: {e}")
            if not self._atomic_depth:
                self.db.rollback()
            raise

    def _get_row(self, model, entity_id: str, entity: str):
        row = self.db.get(model, entity_id)
        if row is None:
            raise NotFoundError(entity, entity_id)
        return row

    # -- classes ------------------------------------------------------

    def list_classes(self, teacher_id: int) -> List[schemas.Classroom]:
        rows = (
            self.db.query(models.Classroom)
            .filter(models.Classroom.teacher_id == teacher_id)
            .order_by(models.Classroom.created_at, models.Classroom.name)
            .all()
        )
        return [schemas.Classroom.model_validate(row) for row in rows]

    def get_class(self, class_id: str) -> Optional[schemas.Classroom]:
        row = self.db.get(models.Classroom, class_id)
        return schemas.Classroom.model_validate(row) if row else None

    def get_class_by_code(self, class_code: str) -> Optional[schemas.Classroom]:
        row = self.db.query(models.Classroom).filter(models.Classroom.class_code == class_code).first()
        return schemas.Classroom.model_validate(row) if row else None

    def class_code_exists(self, class_code: str) -> bool:
        return self.db.query(models.Classroom.id).filter(
            models.Classroom.class_code == class_code
        ).first() is not None

    def create_class(self, teacher_id: int, data: schemas.ClassroomCreate, class_code: str) -> schemas.Classroom:
        row = models.Classroom(teacher_id=teacher_id, class_code=class_code, **data.model_dump())
        self.db.add(row)
        self._save("creating class")
        return schemas.Classroom.model_validate(row)

    def update_class(self, class_id: str, updates: Dict[str, Any]) -> schemas.Classroom:
        row = self._get_row(models.Classroom, class_id, "Class")
        _apply(row, updates)
        self._save("updating class")
        return schemas.Classroom.model_validate(row)

    def delete_class(self, class_id: str) -> None:
        row = self._get_row(models.Classroom, class_id, "Class")
        self.db.delete(row)
        self._save("deleting class")

    # -- students -----------------------------------------------------

    def get_student(self, student_id: str) -> Optional[schemas.Student]:
        row = self.db.get(models.Student, student_id)
        return schemas.Student.model_validate(row) if row else None

    def list_class_students(self, class_id: str) -> List[schemas.Student]:
        """Every student with an approved enrollment, archived ones included."""
        rows = (
            self.db.query(models.Student)
            .join(models.Enrollment, models.Enrollment.student_id == models.Student.id)
            .filter(
                models.Enrollment.class_id == class_id,
                models.Enrollment.status == EnrollmentStatus.approved,
            )
            .order_by(models.Student.name)
            .all()
        )
        return [schemas.Student.model_validate(row) for row in rows]

    def create_student(
        self,
        data: schemas.StudentCreate,
        student_id: Optional[str] = None,
        enrolled_at: Optional[datetime] = None,
    ) -> schemas.Student:
        row = models.Student(
            avatar=models.Student.initials_for(data.name),
            enrolled_at=enrolled_at,
            is_active=True,
            **data.model_dump(),
        )
        if student_id:
            row.id = student_id
        self.db.add(row)
        self._save("creating student")
        return schemas.Student.model_validate(row)

    def update_student(self, student_id: str, updates: Dict[str, Any]) -> schemas.Student:
        row = self._get_row(models.Student, student_id, "Student")
        _apply(row, updates)
        if "name" in updates:
            row.avatar = models.Student.initials_for(row.name)
        self._save("updating student")
        return schemas.Student.model_validate(row)

    # -- enrollments --------------------------------------------------

    def list_enrollments(
        self, class_id: str, status: Optional[EnrollmentStatus] = None
    ) -> List[schemas.Enrollment]:
        query = self.db.query(models.Enrollment).filter(models.Enrollment.class_id == class_id)
        if status is not None:
            query = query.filter(models.Enrollment.status == status)
        rows = query.order_by(models.Enrollment.requested_at.desc()).all()
        return [schemas.Enrollment.model_validate(row) for row in rows]

    def get_enrollment(self, enrollment_id: str) -> Optional[schemas.Enrollment]:
        row = self.db.get(models.Enrollment, enrollment_id)
        return schemas.Enrollment.model_validate(row) if row else None

    def find_enrollment(self, student_id: str, class_id: str) -> Optional[schemas.Enrollment]:
        row = self.db.query(models.Enrollment).filter(
            models.Enrollment.student_id == student_id,
            models.Enrollment.class_id == class_id,
        ).first()
        return schemas.Enrollment.model_validate(row) if row else None

    def create_enrollment(
        self,
        student_id: str,
        class_id: str,
        status: EnrollmentStatus,
        enrolled_at: Optional[datetime] = None,
    ) -> schemas.Enrollment:
        row = models.Enrollment(
            student_id=student_id,
            class_id=class_id,
            status=status,
            enrolled_at=enrolled_at,
        )
        self.db.add(row)
        self._save("creating enrollment")
        return schemas.Enrollment.model_validate(row)

    def update_enrollment(self, enrollment_id: str, updates: Dict[str, Any]) -> schemas.Enrollment:
        row = self._get_row(models.Enrollment, enrollment_id, "Enrollment")
        _apply(row, updates)
        self._save("updating enrollment")
        return schemas.Enrollment.model_validate(row)

    # -- units --------------------------------------------------------

    def list_units(self, class_id: str) -> List[schemas.Unit]:
        rows = (
            self.db.query(models.Unit)
            .filter(models.Unit.class_id == class_id)
            .order_by(models.Unit.order, models.Unit.created_at)
            .all()
        )
        return [schemas.Unit.model_validate(row) for row in rows]

    def get_unit(self, unit_id: str) -> Optional[schemas.Unit]:
        row = self.db.get(models.Unit, unit_id)
        return schemas.Unit.model_validate(row) if row else None

    def create_unit(self, class_id: str, data: schemas.UnitCreate, order: int) -> schemas.Unit:
        row = models.Unit(class_id=class_id, order=order, **data.model_dump())
        self.db.add(row)
        self._save("creating unit")
        return schemas.Unit.model_validate(row)

    def update_unit(self, unit_id: str, updates: Dict[str, Any]) -> schemas.Unit:
        row = self._get_row(models.Unit, unit_id, "Unit")
        _apply(row, updates)
        self._save("updating unit")
        return schemas.Unit.model_validate(row)

    def save_unit_order(self, units: List[schemas.Unit]) -> None:
        for unit in units:
            row = self._get_row(models.Unit, unit.id, "Unit")
            row.order = unit.order
        self._save("reordering units")

    def delete_unit(self, unit_id: str) -> None:
        row = self._get_row(models.Unit, unit_id, "Unit")
        self.db.query(models.LessonPlan).filter(models.LessonPlan.unit_id == unit_id).update(
            {models.LessonPlan.unit_id: None}, synchronize_session="fetch"
        )
        self.db.delete(row)
        self._save("deleting unit")

    # -- lessons ------------------------------------------------------

    def list_lessons(self, class_id: str) -> List[schemas.LessonPlan]:
        """The class's lesson sequence, in position order."""
        rows = (
            self.db.query(models.LessonPlan)
            .filter(models.LessonPlan.class_id == class_id, models.LessonPlan.is_template.is_(False))
            .order_by(models.LessonPlan.position, models.LessonPlan.created_at)
            .all()
        )
        return [schemas.LessonPlan.model_validate(row) for row in rows]

    def list_templates(self, teacher_id: int) -> List[schemas.LessonPlan]:
        rows = (
            self.db.query(models.LessonPlan)
            .filter(models.LessonPlan.teacher_id == teacher_id, models.LessonPlan.is_template.is_(True))
            .order_by(models.LessonPlan.title)
            .all()
        )
        return [schemas.LessonPlan.model_validate(row) for row in rows]

    def get_lesson(self, lesson_id: str) -> Optional[schemas.LessonPlan]:
        row = self.db.get(models.LessonPlan, lesson_id)
        return schemas.LessonPlan.model_validate(row) if row else None

    def lesson_owner(self, lesson_id: str) -> Optional[int]:
        row = self.db.get(models.LessonPlan, lesson_id)
        return row.teacher_id if row else None

    def create_lesson(
        self,
        content: schemas.LessonContent,
        class_id: Optional[str],
        unit_id: Optional[str] = None,
        teacher_id: Optional[int] = None,
    ) -> schemas.LessonPlan:
        """Insert a lesson at the end of its class sequence."""
        position = 0
        if class_id is not None:
            last = self.db.query(func.max(models.LessonPlan.position)).filter(
                models.LessonPlan.class_id == class_id
            ).scalar()
            position = 0 if last is None else last + 1
        fields = content.model_dump(include=set(schemas.LessonContent.model_fields))
        row = models.LessonPlan(
            class_id=class_id,
            unit_id=unit_id,
            teacher_id=teacher_id,
            position=position,
            **fields,
        )
        self.db.add(row)
        self._save("creating lesson")
        return schemas.LessonPlan.model_validate(row)

    def update_lesson(self, lesson_id: str, updates: Dict[str, Any]) -> schemas.LessonPlan:
        row = self._get_row(models.LessonPlan, lesson_id, "Lesson")
        _apply(row, updates)
        self._save("updating lesson")
        return schemas.LessonPlan.model_validate(row)

    def save_lesson_sequence(self, lessons: List[schemas.LessonPlan]) -> None:
        """Persist positions (list index) and unit assignments."""
        for position, lesson in enumerate(lessons):
            row = self._get_row(models.LessonPlan, lesson.id, "Lesson")
            row.position = position
            row.unit_id = lesson.unit_id
        self._save("reordering lessons")

    def delete_lesson(self, lesson_id: str) -> None:
        row = self._get_row(models.LessonPlan, lesson_id, "Lesson")
        self.db.delete(row)
        self._save("deleting lesson")

    # -- submissions --------------------------------------------------

    def list_submissions(
        self,
        class_id: str,
        lesson_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[schemas.Submission]:
        query = self.db.query(models.Submission).filter(models.Submission.class_id == class_id)
        if lesson_id:
            query = query.filter(models.Submission.lesson_id == lesson_id)
        if student_id:
            query = query.filter(models.Submission.student_id == student_id)
        rows = query.order_by(models.Submission.created_at).all()
        return [_submission_from_row(row) for row in rows]

    def get_submission(self, submission_id: str) -> Optional[schemas.Submission]:
        row = self.db.get(models.Submission, submission_id)
        return _submission_from_row(row) if row else None

    def find_submission(self, student_id: str, lesson_id: str) -> Optional[schemas.Submission]:
        row = self.db.query(models.Submission).filter(
            models.Submission.student_id == student_id,
            models.Submission.lesson_id == lesson_id,
        ).first()
        return _submission_from_row(row) if row else None

    def create_submission(self, submission: schemas.Submission) -> schemas.Submission:
        row = models.Submission(id=submission.id, **_submission_columns(submission))
        self.db.add(row)
        self._save("creating submission")
        return _submission_from_row(row)

    def update_submission(self, submission: schemas.Submission) -> schemas.Submission:
        row = self._get_row(models.Submission, submission.id, "Submission")
        _apply(row, _submission_columns(submission))
        self._save("updating submission")
        return _submission_from_row(row)

    def delete_submission(self, submission_id: str) -> None:
        row = self._get_row(models.Submission, submission_id, "Submission")
        self.db.delete(row)
        # flush now so a replacement for the same (student, lesson) can be inserted
        self.db.flush()
        self._save("deleting submission")

    # -- rubrics ------------------------------------------------------

    def list_rubrics(self, teacher_id: int, lesson_id: Optional[str] = None) -> List[schemas.Rubric]:
        query = self.db.query(models.Rubric).filter(models.Rubric.created_by == teacher_id)
        if lesson_id:
            query = query.filter(models.Rubric.lesson_id == lesson_id)
        return [schemas.Rubric.model_validate(row) for row in query.order_by(models.Rubric.name).all()]

    def get_rubric(self, rubric_id: str) -> Optional[schemas.Rubric]:
        row = self.db.get(models.Rubric, rubric_id)
        return schemas.Rubric.model_validate(row) if row else None

    def create_rubric(self, teacher_id: int, data: schemas.RubricCreate) -> schemas.Rubric:
        row = models.Rubric(
            name=data.name,
            description=data.description,
            criteria=_criteria_rows(data.criteria),
            lesson_id=data.lesson_id,
            created_by=teacher_id,
        )
        self.db.add(row)
        self._save("creating rubric")
        return schemas.Rubric.model_validate(row)

    def update_rubric(self, rubric_id: str, updates: Dict[str, Any]) -> schemas.Rubric:
        row = self._get_row(models.Rubric, rubric_id, "Rubric")
        if "criteria" in updates:
            updates = dict(updates, criteria=_criteria_rows(updates["criteria"]))
        _apply(row, updates)
        self._save("updating rubric")
        return schemas.Rubric.model_validate(row)

    def delete_rubric(self, rubric_id: str) -> None:
        row = self._get_row(models.Rubric, rubric_id, "Rubric")
        self.db.query(models.LessonPlan).filter(models.LessonPlan.rubric_id == rubric_id).update(
            {models.LessonPlan.rubric_id: None}, synchronize_session="fetch"
        )
        self.db.delete(row)
        self._save("deleting rubric")

    # -- announcements ------------------------------------------------

    def list_announcements(self, class_id: str) -> List[schemas.Announcement]:
        rows = (
            self.db.query(models.Announcement)
            .filter(models.Announcement.class_id == class_id)
            .order_by(models.Announcement.created_at.desc())
            .all()
        )
        return [schemas.Announcement.model_validate(row) for row in rows]

    def get_announcement(self, announcement_id: str) -> Optional[schemas.Announcement]:
        row = self.db.get(models.Announcement, announcement_id)
        return schemas.Announcement.model_validate(row) if row else None

    def create_announcement(
        self, class_id: str, teacher_id: int, data: schemas.AnnouncementCreate
    ) -> schemas.Announcement:
        row = models.Announcement(class_id=class_id, created_by=teacher_id, **data.model_dump())
        self.db.add(row)
        self._save("creating announcement")
        return schemas.Announcement.model_validate(row)

    def update_announcement(self, announcement_id: str, updates: Dict[str, Any]) -> schemas.Announcement:
        row = self._get_row(models.Announcement, announcement_id, "Announcement")
        _apply(row, updates)
        self._save("updating announcement")
        return schemas.Announcement.model_validate(row)

    def delete_announcement(self, announcement_id: str) -> None:
        row = self._get_row(models.Announcement, announcement_id, "Announcement")
        self.db.delete(row)
        self._save("deleting announcement")

    # -- help requests ------------------------------------------------

    def list_help_requests(
        self, class_id: str, statuses: Optional[Iterable[HelpRequestStatus]] = None
    ) -> List[schemas.HelpRequest]:
        query = self.db.query(models.HelpRequest).filter(models.HelpRequest.class_id == class_id)
        if statuses is not None:
            query = query.filter(models.HelpRequest.status.in_(list(statuses)))
        rows = query.order_by(models.HelpRequest.created_at).all()
        return [schemas.HelpRequest.model_validate(row) for row in rows]

    def get_help_request(self, request_id: str) -> Optional[schemas.HelpRequest]:
        row = self.db.get(models.HelpRequest, request_id)
        return schemas.HelpRequest.model_validate(row) if row else None

    def create_help_request(
        self, class_id: str, student_id: str, data: schemas.HelpRequestCreate, created_at: datetime
    ) -> schemas.HelpRequest:
        row = models.HelpRequest(
            class_id=class_id,
            student_id=student_id,
            status=HelpRequestStatus.pending,
            created_at=created_at,
            **data.model_dump(),
        )
        self.db.add(row)
        self._save("creating help request")
        return schemas.HelpRequest.model_validate(row)

    def update_help_request(self, request_id: str, updates: Dict[str, Any]) -> schemas.HelpRequest:
        row = self._get_row(models.HelpRequest, request_id, "Help request")
        _apply(row, updates)
        self._save("updating help request")
        return schemas.HelpRequest.model_validate(row)

    # -- feedback templates -------------------------------------------

    def list_feedback_templates(
        self, teacher_id: int, category: Optional[str] = None
    ) -> List[schemas.FeedbackTemplate]:
        query = self.db.query(models.FeedbackTemplate).filter(models.FeedbackTemplate.created_by == teacher_id)
        if category:
            query = query.filter(models.FeedbackTemplate.category == category)
        rows = query.order_by(models.FeedbackTemplate.name).all()
        return [schemas.FeedbackTemplate.model_validate(row) for row in rows]

    def get_feedback_template(self, template_id: str) -> Optional[schemas.FeedbackTemplate]:
        row = self.db.get(models.FeedbackTemplate, template_id)
        return schemas.FeedbackTemplate.model_validate(row) if row else None

    def create_feedback_template(
        self, teacher_id: int, data: schemas.FeedbackTemplateCreate
    ) -> schemas.FeedbackTemplate:
        row = models.FeedbackTemplate(created_by=teacher_id, **data.model_dump())
        self.db.add(row)
        self._save("creating feedback template")
        return schemas.FeedbackTemplate.model_validate(row)

    def update_feedback_template(self, template_id: str, updates: Dict[str, Any]) -> schemas.FeedbackTemplate:
        row = self._get_row(models.FeedbackTemplate, template_id, "Feedback template")
        _apply(row, updates)
        self._save("updating feedback template")
        return schemas.FeedbackTemplate.model_validate(row)

    def delete_feedback_template(self, template_id: str) -> None:
        row = self._get_row(models.FeedbackTemplate, template_id, "Feedback template")
        self.db.delete(row)
        self._save("deleting feedback template")
