"""Class (classroom) and Enrollment models."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from ..database import Base
from .enums import EditorType, EnrollmentStatus


class Classroom(Base):
    """A teacher's class or period; the root scoping entity."""
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    period = Column(String(100))
    academic_year = Column(String(20), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    class_code = Column(String(6), unique=True, nullable=False, index=True)
    default_editor_type = Column(SQLEnum(EditorType))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a class removes everything scoped to it
    units = relationship("Unit", back_populates="classroom", cascade="all, delete-orphan")
    lessons = relationship("LessonPlan", back_populates="classroom", cascade="all, delete-orphan")
    submissions = relationship("Submission", back_populates="classroom", cascade="all, delete-orphan")
    enrollments = relationship("Enrollment", back_populates="classroom", cascade="all, delete-orphan")
    announcements = relationship("Announcement", back_populates="classroom", cascade="all, delete-orphan")
    help_requests = relationship("HelpRequest", back_populates="classroom", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Classroom(id={self.id}, name='{self.name}', code='{self.class_code}')>"


class Enrollment(Base):
    """Link between a student and a class."""
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "class_id", name="uq_enrollment_student_class"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), nullable=False, index=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SQLEnum(EnrollmentStatus), nullable=False, default=EnrollmentStatus.pending)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())
    enrolled_at = Column(DateTime(timezone=True))

    classroom = relationship("Classroom", back_populates="enrollments")

    def __repr__(self):
        return f"<Enrollment(student_id={self.student_id}, class_id={self.class_id}, status={self.status})>"

    @property
    def is_approved(self):
        return self.status == EnrollmentStatus.approved
