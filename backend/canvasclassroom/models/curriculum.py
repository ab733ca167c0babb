"""Unit and LessonPlan models."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Boolean, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import LessonType, Difficulty, EditorType, StepKind

NEXT_TAG = "[NEXT]"
TEXT_TAG = "[TEXT]"


class Unit(Base):
    """An ordered, lockable grouping of lessons within a class."""
    __tablename__ = "units"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    order = Column(Integer, nullable=False, default=0)
    is_locked = Column(Boolean, nullable=False, default=False)
    is_sequential = Column(Boolean, nullable=False, default=False)
    available_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom", back_populates="units")

    def __repr__(self):
        return f"<Unit(id={self.id}, title='{self.title}', order={self.order})>"


class LessonPlan(Base):
    """A single teachable lesson or assignment."""
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), index=True)
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="SET NULL"), index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), index=True)
    position = Column(Integer, nullable=False, default=0)
    type = Column(SQLEnum(LessonType), nullable=False, default=LessonType.lesson)
    topic = Column(String(255), default="")
    title = Column(String(255), nullable=False)
    difficulty = Column(SQLEnum(Difficulty), nullable=False, default=Difficulty.beginner)
    objective = Column(Text, default="")
    description = Column(Text, default="")
    theory = Column(Text)
    steps = Column(JSON, nullable=False, default=list)
    starter_code = Column(Text, nullable=False, default="")
    challenge = Column(Text, nullable=False, default="")
    is_ai_guided = Column(Boolean, default=False)
    tags = Column(JSON, nullable=False, default=list)
    reflection_question = Column(Text)
    rubric_id = Column(String(36), ForeignKey("rubrics.id", ondelete="SET NULL"))
    is_template = Column(Boolean, nullable=False, default=False)
    variant = Column(String(50))
    editor_type = Column(SQLEnum(EditorType))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    classroom = relationship("Classroom", back_populates="lessons")
    submissions = relationship("Submission", back_populates="lesson", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<LessonPlan(id={self.id}, title='{self.title}')>"

    @property
    def step_count(self):
        return len(self.steps) if self.steps else 0


def classify_step(step: str) -> StepKind:
    """Classify a lesson step by its control tag."""
    stripped = step.lstrip()
    if stripped.startswith(NEXT_TAG):
        return StepKind.observation
    if stripped.startswith(TEXT_TAG):
        return StepKind.reflection
    return StepKind.code


def strip_step_tag(step: str) -> str:
    """Return the instruction text without its control tag."""
    stripped = step.lstrip()
    for tag in (NEXT_TAG, TEXT_TAG):
        if stripped.startswith(tag):
            return stripped[len(tag):].strip()
    return step.strip()
