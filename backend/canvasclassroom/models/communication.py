"""Announcement, HelpRequest and FeedbackTemplate models."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import HelpRequestStatus


class Announcement(Base):
    """Class-scoped broadcast, optionally scheduled and targeted."""
    __tablename__ = "announcements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    scheduled_at = Column(DateTime(timezone=True))
    created_by = Column(Integer, ForeignKey("teachers.id"))
    target_student_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    classroom = relationship("Classroom", back_populates="announcements")

    def __repr__(self):
        return f"<Announcement(id={self.id}, title='{self.title}')>"


class HelpRequest(Base):
    """A queued request for teacher help during a lesson."""
    __tablename__ = "help_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_id = Column(String(36), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text)
    status = Column(SQLEnum(HelpRequestStatus), nullable=False, default=HelpRequestStatus.pending)
    created_at = Column(DateTime(timezone=True), nullable=False)
    resolved_at = Column(DateTime(timezone=True))

    classroom = relationship("Classroom", back_populates="help_requests")

    def __repr__(self):
        return f"<HelpRequest(id={self.id}, status={self.status})>"


class FeedbackTemplate(Base):
    """Reusable grading comment owned by a teacher."""
    __tablename__ = "feedback_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    comment = Column(Text, nullable=False)
    category = Column(String(100))
    created_by = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<FeedbackTemplate(id={self.id}, name='{self.name}')>"
