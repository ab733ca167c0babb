"""Rubrics and reusable feedback comments owned by a teacher."""

from typing import List, Optional, Tuple

from .. import schemas
from ..errors import InvalidRubricError, NotFoundError
from ..gateway import PersistenceGateway


def validate_criteria(criteria: List[schemas.RubricCriterion]) -> Tuple[bool, str]:
    """Validate rubric criteria structure."""
    if not criteria:
        return False, "Rubric must have at least one criterion"

    for i, criterion in enumerate(criteria):
        if not criterion.name.strip():
            return False, f"Criterion {i} must have a name"
        if criterion.max_points <= 0:
            return False, f"Criterion {i} points must be a positive number"

    return True, "Valid criteria"


def _require_valid(criteria: List[schemas.RubricCriterion]) -> None:
    is_valid, message = validate_criteria(criteria)
    if not is_valid:
        raise InvalidRubricError(message)


class RubricService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    # -- rubrics ------------------------------------------------------

    def list_rubrics(self, teacher_id: int, lesson_id: Optional[str] = None) -> List[schemas.Rubric]:
        return self.gateway.list_rubrics(teacher_id, lesson_id)

    def get_rubric(self, teacher_id: int, rubric_id: str) -> schemas.Rubric:
        rubric = self.gateway.get_rubric(rubric_id)
        if rubric is None or rubric.created_by != teacher_id:
            raise NotFoundError("Rubric", rubric_id)
        return rubric

    def create_rubric(self, teacher_id: int, data: schemas.RubricCreate) -> schemas.Rubric:
        _require_valid(data.criteria)
        return self.gateway.create_rubric(teacher_id, data)

    def update_rubric(self, teacher_id: int, rubric_id: str, data: schemas.RubricUpdate) -> schemas.Rubric:
        self.get_rubric(teacher_id, rubric_id)
        updates = data.model_dump(exclude_unset=True)
        if "criteria" in updates:
            _require_valid(data.criteria or [])
        return self.gateway.update_rubric(rubric_id, updates)

    def delete_rubric(self, teacher_id: int, rubric_id: str) -> None:
        self.get_rubric(teacher_id, rubric_id)
        self.gateway.delete_rubric(rubric_id)

    # -- feedback templates -------------------------------------------

    def list_feedback_templates(
        self, teacher_id: int, category: Optional[str] = None
    ) -> List[schemas.FeedbackTemplate]:
        return self.gateway.list_feedback_templates(teacher_id, category)

    def get_feedback_template(self, teacher_id: int, template_id: str) -> schemas.FeedbackTemplate:
        template = self.gateway.get_feedback_template(template_id)
        if template is None or template.created_by != teacher_id:
            raise NotFoundError("Feedback template", template_id)
        return template

    def create_feedback_template(
        self, teacher_id: int, data: schemas.FeedbackTemplateCreate
    ) -> schemas.FeedbackTemplate:
        return self.gateway.create_feedback_template(teacher_id, data)

    def update_feedback_template(
        self, teacher_id: int, template_id: str, data: schemas.FeedbackTemplateUpdate
    ) -> schemas.FeedbackTemplate:
        self.get_feedback_template(teacher_id, template_id)
        return self.gateway.update_feedback_template(template_id, data.model_dump(exclude_unset=True))

    def delete_feedback_template(self, teacher_id: int, template_id: str) -> None:
        self.get_feedback_template(teacher_id, template_id)
        self.gateway.delete_feedback_template(template_id)
