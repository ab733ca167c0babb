"""Student model."""

from sqlalchemy import Column, String, Text, DateTime, Boolean
from sqlalchemy.sql import func
import uuid

from ..database import Base


class Student(Base):
    """Student model. Students are archived, never hard-deleted."""
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    avatar = Column(String(4), nullable=False, default="")
    email = Column(String(255))
    student_id = Column(String(100))
    notes = Column(Text)
    enrolled_at = Column(DateTime(timezone=True))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}')>"

    @staticmethod
    def initials_for(name: str) -> str:
        """Avatar initials: first letter of up to the first two words, upper-cased."""
        return "".join(part[0] for part in name.split() if part).upper()[:2]
