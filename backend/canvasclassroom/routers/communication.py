"""Announcements and the help queue, teacher side."""
from typing import List

from fastapi import APIRouter, Depends, Query, status

from canvasclassroom import schemas
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import AnnouncementService, HelpQueueService

router = APIRouter(prefix="/classes/{class_id}", tags=["Communication"])


def get_announcement_service(gateway: PersistenceGateway = Depends(get_gateway)) -> AnnouncementService:
    return AnnouncementService(gateway)


def get_help_queue_service(gateway: PersistenceGateway = Depends(get_gateway)) -> HelpQueueService:
    return HelpQueueService(gateway)


@router.get("/announcements", response_model=List[schemas.Announcement])
async def list_announcements(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnnouncementService = Depends(get_announcement_service),
):
    """All announcements of the class, newest first, including scheduled ones."""
    return service.list_announcements(classroom.id)


@router.post("/announcements", response_model=schemas.Announcement, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    data: schemas.AnnouncementCreate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.create_announcement(classroom.id, classroom.teacher_id, data)


@router.get("/announcements/{announcement_id}", response_model=schemas.Announcement)
async def get_announcement(
    announcement_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.get_announcement(classroom.id, announcement_id)


@router.patch("/announcements/{announcement_id}", response_model=schemas.Announcement)
async def update_announcement(
    announcement_id: str,
    data: schemas.AnnouncementUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return service.update_announcement(classroom.id, announcement_id, data)


@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnnouncementService = Depends(get_announcement_service),
):
    service.delete_announcement(classroom.id, announcement_id)


@router.get("/help-queue", response_model=List[schemas.HelpQueueEntry])
async def help_queue(
    include_resolved: bool = Query(False, alias="includeResolved"),
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: HelpQueueService = Depends(get_help_queue_service),
):
    """Open help requests, oldest first, with waiting time and priority."""
    return service.queue(classroom.id, include_resolved)


@router.patch("/help-queue/{request_id}", response_model=schemas.HelpRequest)
async def update_help_request(
    request_id: str,
    data: schemas.HelpStatusUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: HelpQueueService = Depends(get_help_queue_service),
):
    return service.update_status(classroom.id, request_id, data.status)
