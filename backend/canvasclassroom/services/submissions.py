"""
Submission progress and grading.

Students only write to lessons they can currently open. Re-submitting
replaces the pair's submission with a fresh Submitted one, and grading
works from any status, Draft included; re-grading overwrites the feedback.
Every write bumps ``version``; callers that pass an ``expected_version``
get a conflict when someone else wrote first.
"""

import logging
import uuid
from datetime import datetime, UTC
from typing import Dict, List, Optional

from .. import schemas
from ..errors import ForbiddenError, InvalidGradeError, NotFoundError, VersionConflictError
from ..gateway import PersistenceGateway
from ..models.enums import EnrollmentStatus, SubmissionStatus
from ..models.submission import FINAL_STEP
from .access import in_unit_order, lesson_access

logger = logging.getLogger(__name__)

MIN_GRADE = 0
MAX_GRADE = 100


def check_grade(grade: int) -> None:
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise InvalidGradeError(grade)


def check_version(submission: schemas.Submission, expected: Optional[int]) -> None:
    if expected is not None and expected != submission.version:
        raise VersionConflictError(expected, submission.version)


class SubmissionService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def require_enrolled(self, class_id: str, student_id: str) -> schemas.Student:
        """The student, if active and approved in the class."""
        student = self.gateway.get_student(student_id)
        enrollment = self.gateway.find_enrollment(student_id, class_id)
        if (
            student is None
            or not student.is_active
            or enrollment is None
            or enrollment.status != EnrollmentStatus.approved
        ):
            raise ForbiddenError(f"Student {student_id} is not enrolled in class {class_id}")
        return student

    def require_lesson(self, class_id: str, lesson_id: str) -> schemas.LessonPlan:
        lesson = self.gateway.get_lesson(lesson_id)
        if lesson is None or lesson.class_id != class_id or lesson.is_template:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    def lesson_statuses(self, class_id: str, student_id: str) -> Dict[str, SubmissionStatus]:
        return {
            submission.lesson_id: submission.status
            for submission in self.gateway.list_submissions(class_id, student_id=student_id)
        }

    def require_open_lesson(self, class_id: str, lesson_id: str, student_id: str) -> schemas.LessonPlan:
        """The lesson, if it exists and the enrolled student may open it right now."""
        lesson = self.require_lesson(class_id, lesson_id)
        self.require_enrolled(class_id, student_id)
        units = self.gateway.list_units(class_id)
        lessons = in_unit_order(self.gateway.list_lessons(class_id), units)
        access = lesson_access(lessons, units, self.lesson_statuses(class_id, student_id), datetime.now(UTC))
        if not access.get(lesson.id, False):
            raise ForbiddenError(f"Lesson {lesson_id} is not open to student {student_id} yet")
        return lesson

    def get_submission(self, class_id: str, submission_id: str) -> schemas.Submission:
        submission = self.gateway.get_submission(submission_id)
        if submission is None or submission.class_id != class_id:
            raise NotFoundError("Submission", submission_id)
        return submission

    def list_submissions(
        self,
        class_id: str,
        lesson_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[schemas.Submission]:
        return self.gateway.list_submissions(class_id, lesson_id=lesson_id, student_id=student_id)

    def update_progress(
        self, class_id: str, lesson_id: str, student_id: str, update: schemas.ProgressUpdate
    ) -> schemas.Submission:
        """Save in-progress work. Creates a Draft on first save; never changes status."""
        self.require_open_lesson(class_id, lesson_id, student_id)

        existing = self.gateway.find_submission(student_id, lesson_id)
        if existing is None:
            history = {}
            if update.history_item is not None:
                history[update.history_item.step_index] = update.history_item
            return self.gateway.create_submission(schemas.Submission(
                id=str(uuid.uuid4()),
                lesson_id=lesson_id,
                student_id=student_id,
                class_id=class_id,
                code=update.code,
                status=SubmissionStatus.draft,
                current_step=update.step_index,
                history=history,
                time_spent=update.time_spent,
            ))

        check_version(existing, update.expected_version)
        history = dict(existing.history)
        if update.history_item is not None:
            history[update.history_item.step_index] = update.history_item
        changes = {
            "code": update.code,
            "current_step": update.step_index,
            "history": history,
            "version": existing.version + 1,
        }
        if update.time_spent is not None:
            changes["time_spent"] = update.time_spent
        return self.gateway.update_submission(existing.model_copy(update=changes))

    def submit_lesson(
        self, class_id: str, lesson_id: str, student_id: str, request: schemas.SubmitRequest
    ) -> schemas.Submission:
        """Replace any earlier submission for the pair with a fresh Submitted one."""
        self.require_open_lesson(class_id, lesson_id, student_id)

        existing = self.gateway.find_submission(student_id, lesson_id)
        submission = schemas.Submission(
            id=str(uuid.uuid4()),
            lesson_id=lesson_id,
            student_id=student_id,
            class_id=class_id,
            code=request.code,
            text_answer=request.text_answer,
            status=SubmissionStatus.submitted,
            submitted_at=datetime.now(UTC),
            current_step=FINAL_STEP,
            history={},
            time_spent=request.time_spent,
            version=existing.version + 1 if existing else 1,
        )
        with self.gateway.atomic():
            if existing is not None:
                self.gateway.delete_submission(existing.id)
            created = self.gateway.create_submission(submission)
        logger.info(f"Student {student_id} submitted lesson {lesson_id}")
        return created

    def _graded(self, submission: schemas.Submission, grade: int, comment: str) -> schemas.Submission:
        return submission.model_copy(update={
            "status": SubmissionStatus.graded,
            "feedback": schemas.Feedback(grade=grade, comment=comment, graded_at=datetime.now(UTC)),
            "version": submission.version + 1,
        })

    def grade_submission(self, class_id: str, submission_id: str, request: schemas.GradeRequest) -> schemas.Submission:
        check_grade(request.grade)
        submission = self.get_submission(class_id, submission_id)
        check_version(submission, request.expected_version)
        return self.gateway.update_submission(self._graded(submission, request.grade, request.comment))

    def bulk_grade(self, class_id: str, request: schemas.BulkGradeRequest) -> List[schemas.Submission]:
        """Grade several submissions; nothing is written unless every id belongs to the class."""
        check_grade(request.grade)
        graded = [
            self._graded(self.get_submission(class_id, submission_id), request.grade, request.comment)
            for submission_id in dict.fromkeys(request.submission_ids)
        ]
        with self.gateway.atomic():
            saved = [self.gateway.update_submission(submission) for submission in graded]
        logger.info(f"Bulk graded {len(saved)} submissions in class {class_id}")
        return saved
