"""Announcement and help request schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from ..models.enums import HelpRequestStatus
from .base import CamelModel, PartialUpdate, UTCDateTime


class AnnouncementCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    scheduled_at: Optional[UTCDateTime] = None
    target_student_ids: list[str] = Field(default_factory=list)


class AnnouncementUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("title", "content", "target_student_ids")

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    scheduled_at: Optional[UTCDateTime] = None
    target_student_ids: Optional[list[str]] = None


class Announcement(AnnouncementCreate):
    id: str
    class_id: str
    created_by: Optional[int] = None
    created_at: Optional[UTCDateTime] = None


class HelpRequestCreate(CamelModel):
    lesson_id: str
    message: Optional[str] = None


class HelpRequest(CamelModel):
    id: str
    student_id: str
    class_id: str
    lesson_id: str
    message: Optional[str] = None
    status: HelpRequestStatus = HelpRequestStatus.pending
    created_at: UTCDateTime
    resolved_at: Optional[UTCDateTime] = None


class HelpStatusUpdate(CamelModel):
    status: HelpRequestStatus


class HelpQueueEntry(HelpRequest):
    waiting_minutes: int
    priority: str
