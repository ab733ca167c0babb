"""Rubrics and reusable feedback comments, scoped to the signed-in teacher."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from canvasclassroom import schemas
from canvasclassroom.auth import Teacher, get_current_active_teacher
from canvasclassroom.deps import get_gateway
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import RubricService

router = APIRouter(tags=["Rubrics"])


def get_rubric_service(gateway: PersistenceGateway = Depends(get_gateway)) -> RubricService:
    return RubricService(gateway)


@router.get("/rubrics", response_model=List[schemas.Rubric])
async def list_rubrics(
    lesson_id: Optional[str] = Query(None, alias="lessonId"),
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.list_rubrics(teacher.id, lesson_id)


@router.post("/rubrics", response_model=schemas.Rubric, status_code=status.HTTP_201_CREATED)
async def create_rubric(
    data: schemas.RubricCreate,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.create_rubric(teacher.id, data)


@router.get("/rubrics/{rubric_id}", response_model=schemas.Rubric)
async def get_rubric(
    rubric_id: str,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.get_rubric(teacher.id, rubric_id)


@router.patch("/rubrics/{rubric_id}", response_model=schemas.Rubric)
async def update_rubric(
    rubric_id: str,
    data: schemas.RubricUpdate,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.update_rubric(teacher.id, rubric_id, data)


@router.delete("/rubrics/{rubric_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rubric(
    rubric_id: str,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    service.delete_rubric(teacher.id, rubric_id)


@router.get("/feedback-templates", response_model=List[schemas.FeedbackTemplate])
async def list_feedback_templates(
    category: Optional[str] = None,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.list_feedback_templates(teacher.id, category)


@router.post("/feedback-templates", response_model=schemas.FeedbackTemplate, status_code=status.HTTP_201_CREATED)
async def create_feedback_template(
    data: schemas.FeedbackTemplateCreate,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.create_feedback_template(teacher.id, data)


@router.patch("/feedback-templates/{template_id}", response_model=schemas.FeedbackTemplate)
async def update_feedback_template(
    template_id: str,
    data: schemas.FeedbackTemplateUpdate,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    return service.update_feedback_template(teacher.id, template_id, data)


@router.delete("/feedback-templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feedback_template(
    template_id: str,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: RubricService = Depends(get_rubric_service),
):
    service.delete_feedback_template(teacher.id, template_id)
