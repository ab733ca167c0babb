"""Student-side lesson runner: lesson access, step checks and tutoring help."""

import logging
from datetime import datetime, UTC
from typing import List, Optional

from .. import schemas
from ..ai import AICodeAnalysis, ContentGenerationClient
from ..errors import NotFoundError
from ..gateway import PersistenceGateway
from ..models.curriculum import classify_step
from ..models.enums import StepKind
from .access import in_unit_order, lesson_access
from .submissions import SubmissionService

logger = logging.getLogger(__name__)

OBSERVATION_FEEDBACK = "Great! Let's keep going."
RETRY_FEEDBACK = "I couldn't check that right now. Please try again in a moment."


class RunnerService:
    def __init__(self, gateway: PersistenceGateway, client: ContentGenerationClient):
        self.gateway = gateway
        self.client = client
        self.submissions = SubmissionService(gateway)

    def student_lessons(self, class_id: str, student_id: str) -> List[schemas.StudentLesson]:
        self.submissions.require_enrolled(class_id, student_id)
        units = self.gateway.list_units(class_id)
        lessons = in_unit_order(self.gateway.list_lessons(class_id), units)
        statuses = self.submissions.lesson_statuses(class_id, student_id)
        access = lesson_access(lessons, units, statuses, datetime.now(UTC))
        return [
            schemas.StudentLesson(
                **lesson.model_dump(),
                is_accessible=access[lesson.id],
                submission_status=statuses.get(lesson.id),
            )
            for lesson in lessons
        ]

    def check_step(
        self,
        class_id: str,
        lesson_id: str,
        step_index: int,
        student_id: str,
        request: schemas.StepCheckRequest,
    ) -> schemas.StepCheckResult:
        """Check one guided step and record the outcome in the student's draft."""
        lesson = self.submissions.require_open_lesson(class_id, lesson_id, student_id)
        if not 0 <= step_index < len(lesson.steps):
            raise NotFoundError("Step", step_index)
        instruction = lesson.steps[step_index]
        kind = classify_step(instruction)

        if kind == StepKind.observation:
            passed, feedback = True, OBSERVATION_FEEDBACK
            student_input = ""
        else:
            student_input = request.student_input if kind == StepKind.reflection else request.code
            validation = self.client.validate_step(student_input, instruction)
            if validation is None:
                passed, feedback = False, RETRY_FEEDBACK
            else:
                passed, feedback = validation.passed, validation.feedback

        outcome = schemas.StepHistory(
            step_index=step_index,
            student_input=student_input,
            feedback=feedback,
            passed=passed,
        )
        next_step = min(step_index + 1, len(lesson.steps)) if passed else step_index
        submission = self.submissions.update_progress(class_id, lesson_id, student_id, schemas.ProgressUpdate(
            code=request.code,
            step_index=next_step,
            history_item=outcome,
            time_spent=request.time_spent,
        ))
        return schemas.StepCheckResult(outcome=outcome, submission=submission)

    def hint(
        self, class_id: str, lesson_id: str, student_id: str, request: schemas.HintRequest
    ) -> Optional[AICodeAnalysis]:
        lesson = self.submissions.require_lesson(class_id, lesson_id)
        self.submissions.require_enrolled(class_id, student_id)
        return self.client.analyze_code(request.code, lesson.objective)

    def explain_error(self, error: str, code: str) -> Optional[str]:
        return self.client.explain_error(error, code)
