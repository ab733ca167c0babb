"""Units, lessons and curriculum import within a class."""
from typing import List

from fastapi import APIRouter, Depends, status

from canvasclassroom import schemas
from canvasclassroom.ai.schemas import ApplyCurriculumRequest
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.errors import ClassroomError, NotFoundError
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import CurriculumService, get_curriculum_template

router = APIRouter(prefix="/classes/{class_id}", tags=["Curriculum"])


def get_curriculum_service(gateway: PersistenceGateway = Depends(get_gateway)) -> CurriculumService:
    return CurriculumService(gateway)


# -- units ----------------------------------------------------------------

@router.get("/units", response_model=List[schemas.Unit])
async def list_units(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.list_units(classroom.id)


@router.post("/units", response_model=schemas.Unit, status_code=status.HTTP_201_CREATED)
async def create_unit(
    data: schemas.UnitCreate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.create_unit(classroom.id, data)


@router.post("/units/reorder", response_model=List[schemas.Unit])
async def reorder_units(
    data: schemas.UnitReorder,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """Drop the dragged unit at the target unit's position."""
    return service.reorder_units(classroom.id, data.dragged_unit_id, data.target_unit_id)


@router.post("/units/lock", response_model=List[schemas.Unit])
async def lock_units(
    data: schemas.UnitIds,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.set_locked(classroom.id, data.unit_ids, True)


@router.post("/units/unlock", response_model=List[schemas.Unit])
async def unlock_units(
    data: schemas.UnitIds,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.set_locked(classroom.id, data.unit_ids, False)


@router.patch("/units/{unit_id}", response_model=schemas.Unit)
async def update_unit(
    unit_id: str,
    data: schemas.UnitUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.update_unit(classroom.id, unit_id, data)


@router.delete("/units/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(
    unit_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    service.delete_unit(classroom.id, unit_id)


@router.post("/units/{unit_id}/toggle-lock", response_model=schemas.Unit)
async def toggle_lock(
    unit_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.toggle_lock(classroom.id, unit_id)


@router.post("/units/{unit_id}/toggle-sequential", response_model=schemas.Unit)
async def toggle_sequential(
    unit_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.toggle_sequential(classroom.id, unit_id)


# -- lessons --------------------------------------------------------------

@router.get("/lessons", response_model=List[schemas.LessonPlan])
async def list_lessons(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """The class's lessons in sequence order. Templates are not included."""
    return service.list_lessons(classroom.id)


@router.post("/lessons", response_model=schemas.LessonPlan, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    data: schemas.LessonCreate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.create_lesson(classroom.id, classroom.teacher_id, data)


@router.get("/lessons/{lesson_id}", response_model=schemas.LessonPlan)
async def get_lesson(
    lesson_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.get_lesson(classroom.id, lesson_id)


@router.patch("/lessons/{lesson_id}", response_model=schemas.LessonPlan)
async def update_lesson(
    lesson_id: str,
    data: schemas.LessonUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    return service.update_lesson(classroom.id, lesson_id, data)


@router.delete("/lessons/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(
    lesson_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    service.delete_lesson(classroom.id, lesson_id)


@router.post("/lessons/{lesson_id}/move", response_model=List[schemas.LessonPlan])
async def move_lesson(
    lesson_id: str,
    data: schemas.LessonMove,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """Move a lesson to a unit, optionally before another lesson. Returns the new sequence."""
    return service.move_lesson(classroom.id, lesson_id, data)


# -- curriculum import ----------------------------------------------------

@router.post("/curriculum/apply", response_model=schemas.AppliedCurriculum, status_code=status.HTTP_201_CREATED)
async def apply_curriculum(
    data: ApplyCurriculumRequest,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: CurriculumService = Depends(get_curriculum_service),
):
    """Create units and lessons from a generated curriculum or a built-in template."""
    if data.template_id:
        template = get_curriculum_template(data.template_id)
        if template is None:
            raise NotFoundError("Curriculum template", data.template_id)
        curriculum = template.to_curriculum()
    elif data.curriculum is not None:
        curriculum = data.curriculum
    else:
        raise ClassroomError("Provide either a curriculum or a templateId")
    return service.apply_curriculum(classroom.id, classroom.teacher_id, curriculum, data.use_existing_units)
