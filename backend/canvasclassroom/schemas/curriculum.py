"""Unit and lesson schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from ..models.enums import LessonType, Difficulty, EditorType, SubmissionStatus
from .base import CamelModel, PartialUpdate, UTCDateTime


class UnitCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    is_locked: bool = False
    is_sequential: bool = False
    available_at: Optional[UTCDateTime] = None


class UnitUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("title", "description", "is_locked", "is_sequential")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_locked: Optional[bool] = None
    is_sequential: Optional[bool] = None
    available_at: Optional[UTCDateTime] = None


class Unit(UnitCreate):
    id: str
    class_id: str
    order: int = 0


class UnitReorder(CamelModel):
    dragged_unit_id: str
    target_unit_id: str


class UnitIds(CamelModel):
    unit_ids: list[str]


class LessonContent(CamelModel):
    """Everything about a lesson except its identity and scoping."""
    type: LessonType = LessonType.lesson
    topic: str = ""
    title: str = Field(..., min_length=1, max_length=255)
    difficulty: Difficulty = Difficulty.beginner
    objective: str = ""
    description: str = ""
    theory: Optional[str] = None
    steps: list[str] = Field(default_factory=list)
    starter_code: str = ""
    challenge: str = ""
    is_ai_guided: bool = False
    tags: list[str] = Field(default_factory=list)
    reflection_question: Optional[str] = None
    rubric_id: Optional[str] = None
    is_template: bool = False
    variant: Optional[str] = None
    editor_type: Optional[EditorType] = None


class LessonCreate(LessonContent):
    unit_id: Optional[str] = None


class LessonUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = (
        "type", "topic", "title", "difficulty", "objective", "description",
        "steps", "starter_code", "challenge", "is_ai_guided", "tags",
    )

    type: Optional[LessonType] = None
    topic: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    difficulty: Optional[Difficulty] = None
    objective: Optional[str] = None
    description: Optional[str] = None
    theory: Optional[str] = None
    steps: Optional[list[str]] = None
    starter_code: Optional[str] = None
    challenge: Optional[str] = None
    is_ai_guided: Optional[bool] = None
    tags: Optional[list[str]] = None
    reflection_question: Optional[str] = None
    rubric_id: Optional[str] = None
    variant: Optional[str] = None
    editor_type: Optional[EditorType] = None


class LessonPlan(LessonContent):
    id: str
    class_id: Optional[str] = None
    unit_id: Optional[str] = None


class LessonMove(CamelModel):
    unit_id: Optional[str] = None
    insert_before_lesson_id: Optional[str] = None


class LessonAssign(CamelModel):
    class_ids: list[str]


class AppliedCurriculum(CamelModel):
    units: list[Unit]
    lessons: list[LessonPlan]
    skipped_lessons: int = 0


class StudentLesson(LessonPlan):
    """A lesson as the runner shows it to one student."""
    is_accessible: bool = True
    submission_status: Optional[SubmissionStatus] = None


class TemplateInstantiate(CamelModel):
    unit_id: Optional[str] = None


class LessonDuplicate(CamelModel):
    target_class_id: Optional[str] = None
