"""Class announcements, optionally scheduled and targeted at specific students."""

from datetime import datetime, UTC
from typing import List

from .. import schemas
from ..errors import NotFoundError
from ..gateway import PersistenceGateway
from .submissions import SubmissionService


def is_visible_to(announcement: schemas.Announcement, student_id: str, now: datetime) -> bool:
    """Published (no schedule or schedule passed) and untargeted or targeted at the student."""
    if announcement.scheduled_at is not None and announcement.scheduled_at > now:
        return False
    return not announcement.target_student_ids or student_id in announcement.target_student_ids


class AnnouncementService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def list_announcements(self, class_id: str) -> List[schemas.Announcement]:
        return self.gateway.list_announcements(class_id)

    def get_announcement(self, class_id: str, announcement_id: str) -> schemas.Announcement:
        announcement = self.gateway.get_announcement(announcement_id)
        if announcement is None or announcement.class_id != class_id:
            raise NotFoundError("Announcement", announcement_id)
        return announcement

    def create_announcement(
        self, class_id: str, teacher_id: int, data: schemas.AnnouncementCreate
    ) -> schemas.Announcement:
        return self.gateway.create_announcement(class_id, teacher_id, data)

    def update_announcement(
        self, class_id: str, announcement_id: str, data: schemas.AnnouncementUpdate
    ) -> schemas.Announcement:
        self.get_announcement(class_id, announcement_id)
        return self.gateway.update_announcement(announcement_id, data.model_dump(exclude_unset=True))

    def delete_announcement(self, class_id: str, announcement_id: str) -> None:
        self.get_announcement(class_id, announcement_id)
        self.gateway.delete_announcement(announcement_id)

    def visible_to_student(self, class_id: str, student_id: str) -> List[schemas.Announcement]:
        SubmissionService(self.gateway).require_enrolled(class_id, student_id)
        now = datetime.now(UTC)
        return [
            announcement for announcement in self.gateway.list_announcements(class_id)
            if is_visible_to(announcement, student_id, now)
        ]
