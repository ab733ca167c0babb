"""Rubric model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, JSON
from sqlalchemy.sql import func
import uuid

from ..database import Base


class Rubric(Base):
    """Rubric model."""
    __tablename__ = "rubrics"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text)
    criteria = Column(JSON, nullable=False, default=list)
    lesson_id = Column(String(36), index=True)
    created_by = Column(Integer, ForeignKey("teachers.id"), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Rubric(id={self.id}, name='{self.name}')>"

