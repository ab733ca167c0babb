"""Teacher-facing content generation.

These handlers are plain ``def`` so the blocking model calls run in the
threadpool. A missing or unusable model reply answers 502.
"""
from typing import List

from fastapi import APIRouter, Depends

from canvasclassroom import schemas
from canvasclassroom.ai import (
    AICodeAnalysis, AILessonResponse, ContentGenerationClient, CurriculumSuggestion, FullCurriculumResponse,
)
from canvasclassroom.ai.schemas import (
    CodeAnalysisRequest, CurriculumGenerationRequest, ErrorExplanation, ErrorExplanationRequest,
    LessonGenerationRequest,
)
from canvasclassroom.auth import Teacher, get_current_active_teacher
from canvasclassroom.deps import get_content_client, get_gateway, get_teacher_class
from canvasclassroom.errors import ContentUnavailableError
from canvasclassroom.gateway import PersistenceGateway

router = APIRouter(tags=["AI"])


def _require(result, what: str):
    if result is None:
        raise ContentUnavailableError(f"Could not generate {what}")
    return result


@router.post("/ai/lesson-plan", response_model=AILessonResponse)
def generate_lesson_plan(
    data: LessonGenerationRequest,
    teacher: Teacher = Depends(get_current_active_teacher),
    client: ContentGenerationClient = Depends(get_content_client),
):
    """Draft a lesson plan. The draft is returned for review, not saved."""
    plan = client.generate_lesson_plan(data.topic, data.level, data.type, data.previous_context)
    return _require(plan, "a lesson plan")


@router.post("/ai/analyze-code", response_model=AICodeAnalysis)
def analyze_code(
    data: CodeAnalysisRequest,
    teacher: Teacher = Depends(get_current_active_teacher),
    client: ContentGenerationClient = Depends(get_content_client),
):
    return _require(client.analyze_code(data.code, data.objective), "a code analysis")


@router.post("/ai/explain-error", response_model=ErrorExplanation)
def explain_error(
    data: ErrorExplanationRequest,
    teacher: Teacher = Depends(get_current_active_teacher),
    client: ContentGenerationClient = Depends(get_content_client),
):
    explanation = _require(client.explain_error(data.error, data.code), "an explanation")
    return ErrorExplanation(explanation=explanation)


@router.post("/ai/curriculum", response_model=FullCurriculumResponse)
def generate_curriculum(
    data: CurriculumGenerationRequest,
    teacher: Teacher = Depends(get_current_active_teacher),
    client: ContentGenerationClient = Depends(get_content_client),
):
    """Draft a full course of units and lessons; apply it with ``/classes/{id}/curriculum/apply``."""
    return _require(client.generate_full_curriculum(data.theme, data.duration), "a curriculum")


@router.post("/classes/{class_id}/curriculum/suggest", response_model=List[CurriculumSuggestion])
def suggest_curriculum(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    gateway: PersistenceGateway = Depends(get_gateway),
    client: ContentGenerationClient = Depends(get_content_client),
):
    """Suggest next topics based on the lessons the class already has."""
    lessons = gateway.list_lessons(classroom.id)
    return _require(client.suggest_curriculum(lessons), "suggestions")
