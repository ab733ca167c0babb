"""Lesson library: export/import, templates and copies across classes."""
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, status

from canvasclassroom import schemas
from canvasclassroom.auth import Teacher, get_current_active_teacher
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import LibraryService, list_curriculum_templates
from canvasclassroom.services.curriculum_templates import CurriculumTemplate

router = APIRouter(tags=["Library"])


def get_library_service(gateway: PersistenceGateway = Depends(get_gateway)) -> LibraryService:
    return LibraryService(gateway)


@router.get("/classes/{class_id}/export")
async def export_all_lessons(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    """Export every lesson of the class as one JSON document."""
    return service.export_all(classroom.id)


@router.get("/classes/{class_id}/lessons/{lesson_id}/export")
async def export_lesson(
    lesson_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    return service.export_lesson(classroom.id, lesson_id)


@router.post("/classes/{class_id}/import", response_model=List[schemas.LessonPlan], status_code=status.HTTP_201_CREATED)
async def import_lessons(
    payload: Any = Body(...),
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    """Import an exported lesson or ``{"lessons": [...]}``, given as JSON or as a JSON string."""
    return service.import_lessons(classroom.id, classroom.teacher_id, payload)


@router.post("/classes/{class_id}/lessons/{lesson_id}/promote", response_model=schemas.LessonPlan)
async def promote_to_template(
    lesson_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    """Turn a lesson into a reusable template owned by the teacher."""
    return service.promote_to_template(classroom.id, classroom.teacher_id, lesson_id)


@router.post(
    "/classes/{class_id}/lessons/{lesson_id}/duplicate",
    response_model=schemas.LessonPlan,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_lesson(
    lesson_id: str,
    data: Optional[schemas.LessonDuplicate] = None,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    target_class_id = data.target_class_id if data else None
    return service.duplicate_lesson(classroom.id, classroom.teacher_id, lesson_id, target_class_id)


@router.post(
    "/classes/{class_id}/lessons/{lesson_id}/assign",
    response_model=List[schemas.LessonPlan],
    status_code=status.HTTP_201_CREATED,
)
async def bulk_assign_lesson(
    lesson_id: str,
    data: schemas.LessonAssign,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    """Copy a lesson into several of the teacher's classes."""
    return service.bulk_assign(classroom.id, classroom.teacher_id, lesson_id, data.class_ids)


@router.get("/templates", response_model=List[schemas.LessonPlan])
async def list_templates(
    teacher: Teacher = Depends(get_current_active_teacher),
    service: LibraryService = Depends(get_library_service),
):
    return service.list_templates(teacher.id)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    teacher: Teacher = Depends(get_current_active_teacher),
    service: LibraryService = Depends(get_library_service),
):
    service.delete_template(teacher.id, template_id)


@router.post(
    "/classes/{class_id}/templates/{template_id}/instantiate",
    response_model=schemas.LessonPlan,
    status_code=status.HTTP_201_CREATED,
)
async def instantiate_template(
    template_id: str,
    data: Optional[schemas.TemplateInstantiate] = None,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: LibraryService = Depends(get_library_service),
):
    """Copy a template into the class."""
    unit_id = data.unit_id if data else None
    return service.instantiate_template(classroom.teacher_id, template_id, classroom.id, unit_id)


@router.get("/curriculum-templates", response_model=List[CurriculumTemplate])
async def curriculum_templates(teacher: Teacher = Depends(get_current_active_teacher)):
    """Built-in curricula that can be applied to a class."""
    return list_curriculum_templates()
