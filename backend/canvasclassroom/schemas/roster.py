"""Student and roster schemas."""

from typing import ClassVar, Optional

from pydantic import Field, computed_field

from .base import CamelModel, PartialUpdate, UTCDateTime


class StudentCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = None
    student_id: Optional[str] = None
    notes: Optional[str] = None


class StudentUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name",)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = None
    student_id: Optional[str] = None
    notes: Optional[str] = None


class Student(StudentCreate):
    id: str
    avatar: str = ""
    enrolled_at: Optional[UTCDateTime] = None
    is_active: bool = True


class RosterView(CamelModel):
    active: list[Student]
    archived: list[Student]

    @computed_field
    @property
    def active_count(self) -> int:
        return len(self.active)


class CsvImport(CamelModel):
    csv_data: str
