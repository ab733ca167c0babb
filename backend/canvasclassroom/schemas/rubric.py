"""Rubric and feedback template schemas."""

import uuid
from typing import ClassVar, Optional

from pydantic import Field, computed_field

from .base import CamelModel, PartialUpdate, UTCDateTime


class RubricCriterion(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    description: str = ""
    max_points: int


class RubricCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    criteria: list[RubricCriterion] = Field(default_factory=list)
    lesson_id: Optional[str] = None


class RubricUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "criteria")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    criteria: Optional[list[RubricCriterion]] = None
    lesson_id: Optional[str] = None


class Rubric(RubricCreate):
    id: str
    created_by: Optional[int] = None
    created_at: Optional[UTCDateTime] = None

    @computed_field
    @property
    def total_points(self) -> int:
        return sum(criterion.max_points for criterion in self.criteria)


class FeedbackTemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    comment: str = Field(..., min_length=1)
    category: Optional[str] = None


class FeedbackTemplateUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "comment")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    comment: Optional[str] = None
    category: Optional[str] = None


class FeedbackTemplate(FeedbackTemplateCreate):
    id: str
    created_by: int
    created_at: Optional[UTCDateTime] = None
