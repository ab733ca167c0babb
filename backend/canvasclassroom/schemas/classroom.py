"""Class and enrollment schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from ..models.enums import EditorType, EnrollmentStatus
from .base import CamelModel, PartialUpdate, UTCDateTime


class ClassroomCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    period: Optional[str] = None
    academic_year: str = Field(..., min_length=1, max_length=20)
    default_editor_type: Optional[EditorType] = None


class ClassroomUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "academic_year")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    period: Optional[str] = None
    academic_year: Optional[str] = None
    default_editor_type: Optional[EditorType] = None


class Classroom(ClassroomCreate):
    id: str
    teacher_id: int
    class_code: str
    created_at: Optional[UTCDateTime] = None


class Enrollment(CamelModel):
    id: str
    student_id: str
    class_id: str
    status: EnrollmentStatus
    requested_at: Optional[UTCDateTime] = None
    enrolled_at: Optional[UTCDateTime] = None


class JoinClassRequest(CamelModel):
    class_code: str = Field(..., pattern=r"^\d{6}$")
