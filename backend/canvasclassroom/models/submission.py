"""Submission model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import SubmissionStatus

# currentStep value recorded once a lesson has been submitted
FINAL_STEP = 999


class Submission(Base):
    """One student's work against one lesson."""
    __tablename__ = "submissions"
    __table_args__ = (UniqueConstraint("student_id", "lesson_id", name="uq_submission_student_lesson"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    lesson_id = Column(String(36), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(Text, nullable=False, default="")
    text_answer = Column(Text)
    status = Column(SQLEnum(SubmissionStatus), nullable=False, default=SubmissionStatus.draft)
    current_step = Column(Integer)
    # step index (as string key) -> latest outcome for that step
    history = Column(JSON, nullable=False, default=dict)
    submitted_at = Column(DateTime(timezone=True))
    grade = Column(Integer)
    feedback_comment = Column(Text)
    graded_at = Column(DateTime(timezone=True))
    time_spent = Column(Integer)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    lesson = relationship("LessonPlan", back_populates="submissions")
    classroom = relationship("Classroom", back_populates="submissions")

    def __repr__(self):
        return f"<Submission(id={self.id}, student_id={self.student_id}, status={self.status})>"

    @property
    def is_complete(self):
        """Submitted or graded work counts as complete."""
        return self.status in (SubmissionStatus.submitted, SubmissionStatus.graded)

    @property
    def is_graded(self):
        return self.status == SubmissionStatus.graded
