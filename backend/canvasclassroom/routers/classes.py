"""Class management router."""
from typing import List

from fastapi import APIRouter, Depends, status

from canvasclassroom import schemas
from canvasclassroom.auth import Teacher, get_current_active_teacher
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import ClassService, LibraryService

router = APIRouter(prefix="/classes", tags=["Classes"])


def get_class_service(gateway: PersistenceGateway = Depends(get_gateway)) -> ClassService:
    return ClassService(gateway)


@router.get("", response_model=List[schemas.Classroom])
async def list_classes(
    teacher: Teacher = Depends(get_current_active_teacher),
    service: ClassService = Depends(get_class_service),
):
    """List the teacher's classes. A first-time teacher gets a starter class."""
    return service.list_classes(teacher.id)


@router.post("", response_model=schemas.Classroom, status_code=status.HTTP_201_CREATED)
async def create_class(
    data: schemas.ClassroomCreate,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: ClassService = Depends(get_class_service),
):
    return service.create_class(teacher.id, data)


@router.get("/{class_id}", response_model=schemas.Classroom)
async def get_class(classroom: schemas.Classroom = Depends(get_teacher_class)):
    return classroom


@router.patch("/{class_id}", response_model=schemas.Classroom)
async def update_class(
    data: schemas.ClassroomUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: ClassService = Depends(get_class_service),
):
    return service.update_class(classroom.teacher_id, classroom.id, data)


@router.delete("/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: ClassService = Depends(get_class_service),
):
    """Delete a class with its units, lessons, submissions, enrollments and announcements."""
    service.delete_class(classroom.teacher_id, classroom.id)


@router.get("/{class_id}/backup")
async def backup_class(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Download a full JSON backup of the class."""
    return LibraryService(gateway).backup(classroom.id)
