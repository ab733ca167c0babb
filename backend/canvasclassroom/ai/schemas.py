"""Shapes of the JSON replies expected from the content model."""

from typing import Optional

from pydantic import Field

from ..models.enums import Difficulty, LessonType
from ..schemas.base import CamelModel


class AILessonResponse(CamelModel):
    title: str
    difficulty: Difficulty = Difficulty.beginner
    objective: str = ""
    description: str = ""
    theory: Optional[str] = None
    steps: list[str] = Field(default_factory=list)
    starter_code: str = ""
    challenge: str = ""
    tags: list[str] = Field(default_factory=list)


class AICodeAnalysis(CamelModel):
    is_correct: bool
    hint: str = ""
    encouragement: str = ""


class AIStepValidation(CamelModel):
    passed: bool
    feedback: str = ""


class CurriculumSuggestion(CamelModel):
    topic: str
    reason: str = ""
    difficulty: Difficulty = Difficulty.beginner


class CurriculumUnitRequest(CamelModel):
    title: str
    description: str = ""
    order: int = 0


class CurriculumLessonRequest(CamelModel):
    unit_index: int = Field(..., ge=0)
    title: str
    topic: str = ""
    objective: str = ""
    difficulty: Difficulty = Difficulty.beginner
    description: str = ""
    theory: Optional[str] = None
    steps: list[str] = Field(default_factory=list)
    starter_code: str = ""
    challenge: str = ""
    tags: list[str] = Field(default_factory=list)


class FullCurriculumResponse(CamelModel):
    course_title: str = ""
    description: str = ""
    units: list[CurriculumUnitRequest] = Field(default_factory=list)
    lessons: list[CurriculumLessonRequest] = Field(default_factory=list)


class LessonGenerationRequest(CamelModel):
    topic: str = Field(..., min_length=1)
    level: str = "Beginner"
    type: LessonType = LessonType.lesson
    previous_context: str = ""


class CodeAnalysisRequest(CamelModel):
    code: str
    objective: str = ""


class ErrorExplanationRequest(CamelModel):
    error: str
    code: str = ""


class ErrorExplanation(CamelModel):
    explanation: str


class CurriculumGenerationRequest(CamelModel):
    theme: str = Field(..., min_length=1)
    duration: str = "Semester"


class ApplyCurriculumRequest(CamelModel):
    """Either a generated curriculum or the id of a built-in template."""
    curriculum: Optional[FullCurriculumResponse] = None
    template_id: Optional[str] = None
    use_existing_units: bool = False
