"""
Units and lessons inside a class: CRUD, reordering and curriculum import.

``reorder_units`` and ``move_lesson`` are pure list operations; the service
methods load the class sequence, apply them and persist the result.
"""

import logging
from typing import List, Optional, Sequence

from .. import schemas
from ..ai.schemas import FullCurriculumResponse
from ..errors import NotFoundError
from ..gateway import PersistenceGateway
from ..models.enums import LessonType

logger = logging.getLogger(__name__)


def densify_units(units: Sequence[schemas.Unit]) -> List[schemas.Unit]:
    """Reassign ``order`` to each unit's position in the list."""
    return [unit.model_copy(update={"order": index}) for index, unit in enumerate(units)]


def reorder_units(units: Sequence[schemas.Unit], dragged_id: str, target_id: str) -> List[schemas.Unit]:
    """Move the dragged unit to the target's index.

    Returns the units sorted by order and unchanged when either id is missing.
    """
    ordered = sorted(units, key=lambda unit: unit.order)
    ids = [unit.id for unit in ordered]
    if dragged_id not in ids or target_id not in ids:
        return ordered
    target_index = ids.index(target_id)
    dragged = ordered.pop(ids.index(dragged_id))
    ordered.insert(target_index, dragged)
    return densify_units(ordered)


def move_lesson(
    lessons: Sequence[schemas.LessonPlan],
    lesson_id: str,
    unit_id: Optional[str],
    insert_before_id: Optional[str] = None,
) -> List[schemas.LessonPlan]:
    """Move a lesson into ``unit_id``, before ``insert_before_id`` or at the end."""
    sequence = list(lessons)
    moving = next((lesson for lesson in sequence if lesson.id == lesson_id), None)
    if moving is None or insert_before_id == lesson_id:
        return sequence
    if insert_before_id is None and moving.unit_id == unit_id:
        return sequence

    remaining = [lesson for lesson in sequence if lesson.id != lesson_id]
    moved = moving.model_copy(update={"unit_id": unit_id})
    insert_at = next(
        (index for index, lesson in enumerate(remaining) if lesson.id == insert_before_id),
        None,
    )
    if insert_at is None:
        remaining.append(moved)
    else:
        remaining.insert(insert_at, moved)
    return remaining


class CurriculumService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    # -- units --------------------------------------------------------

    def list_units(self, class_id: str) -> List[schemas.Unit]:
        return self.gateway.list_units(class_id)

    def get_unit(self, class_id: str, unit_id: str) -> schemas.Unit:
        unit = self.gateway.get_unit(unit_id)
        if unit is None or unit.class_id != class_id:
            raise NotFoundError("Unit", unit_id)
        return unit

    def create_unit(self, class_id: str, data: schemas.UnitCreate) -> schemas.Unit:
        order = len(self.gateway.list_units(class_id))
        return self.gateway.create_unit(class_id, data, order)

    def update_unit(self, class_id: str, unit_id: str, data: schemas.UnitUpdate) -> schemas.Unit:
        self.get_unit(class_id, unit_id)
        return self.gateway.update_unit(unit_id, data.model_dump(exclude_unset=True))

    def delete_unit(self, class_id: str, unit_id: str) -> None:
        """Delete a unit; its lessons stay in the class without a unit."""
        self.get_unit(class_id, unit_id)
        with self.gateway.atomic():
            self.gateway.delete_unit(unit_id)
            self.gateway.save_unit_order(densify_units(self.gateway.list_units(class_id)))

    def reorder_units(self, class_id: str, dragged_id: str, target_id: str) -> List[schemas.Unit]:
        units = self.gateway.list_units(class_id)
        reordered = reorder_units(units, dragged_id, target_id)
        if [u.id for u in reordered] != [u.id for u in units]:
            self.gateway.save_unit_order(reordered)
        return reordered

    def toggle_lock(self, class_id: str, unit_id: str) -> schemas.Unit:
        unit = self.get_unit(class_id, unit_id)
        return self.gateway.update_unit(unit_id, {"is_locked": not unit.is_locked})

    def toggle_sequential(self, class_id: str, unit_id: str) -> schemas.Unit:
        unit = self.get_unit(class_id, unit_id)
        return self.gateway.update_unit(unit_id, {"is_sequential": not unit.is_sequential})

    def set_locked(self, class_id: str, unit_ids: Sequence[str], locked: bool) -> List[schemas.Unit]:
        """Lock or unlock several units at once."""
        for unit_id in unit_ids:
            self.get_unit(class_id, unit_id)
        with self.gateway.atomic():
            return [self.gateway.update_unit(unit_id, {"is_locked": locked}) for unit_id in unit_ids]

    # -- lessons ------------------------------------------------------

    def list_lessons(self, class_id: str) -> List[schemas.LessonPlan]:
        return self.gateway.list_lessons(class_id)

    def get_lesson(self, class_id: str, lesson_id: str) -> schemas.LessonPlan:
        lesson = self.gateway.get_lesson(lesson_id)
        if lesson is None or lesson.class_id != class_id or lesson.is_template:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    def _check_unit(self, class_id: str, unit_id: Optional[str]) -> None:
        if unit_id is not None:
            self.get_unit(class_id, unit_id)

    def create_lesson(self, class_id: str, teacher_id: int, data: schemas.LessonCreate) -> schemas.LessonPlan:
        self._check_unit(class_id, data.unit_id)
        content = data.model_copy(update={"is_template": False})
        return self.gateway.create_lesson(content, class_id, data.unit_id, teacher_id)

    def update_lesson(self, class_id: str, lesson_id: str, data: schemas.LessonUpdate) -> schemas.LessonPlan:
        self.get_lesson(class_id, lesson_id)
        return self.gateway.update_lesson(lesson_id, data.model_dump(exclude_unset=True))

    def delete_lesson(self, class_id: str, lesson_id: str) -> None:
        self.get_lesson(class_id, lesson_id)
        with self.gateway.atomic():
            self.gateway.delete_lesson(lesson_id)
            self.gateway.save_lesson_sequence(self.gateway.list_lessons(class_id))

    def move_lesson(self, class_id: str, lesson_id: str, move: schemas.LessonMove) -> List[schemas.LessonPlan]:
        self.get_lesson(class_id, lesson_id)
        self._check_unit(class_id, move.unit_id)
        lessons = self.gateway.list_lessons(class_id)
        moved = move_lesson(lessons, lesson_id, move.unit_id, move.insert_before_lesson_id)
        if moved != lessons:
            self.gateway.save_lesson_sequence(moved)
        return moved

    # -- curriculum import --------------------------------------------

    def apply_curriculum(
        self,
        class_id: str,
        teacher_id: int,
        curriculum: FullCurriculumResponse,
        use_existing_units: bool = False,
    ) -> schemas.AppliedCurriculum:
        """Bulk-create units and lessons from a generated or built-in curriculum.

        New units are appended after the existing ones, locked and sequential.
        With ``use_existing_units`` lessons are placed in the class's current
        units instead. A lesson whose ``unitIndex`` has no unit is skipped.
        """
        existing = self.gateway.list_units(class_id)
        created_units: List[schemas.Unit] = []
        created_lessons: List[schemas.LessonPlan] = []
        skipped = 0

        with self.gateway.atomic():
            if use_existing_units:
                targets = existing
            else:
                for unit in curriculum.units:
                    created_units.append(self.gateway.create_unit(
                        class_id,
                        schemas.UnitCreate(
                            title=unit.title,
                            description=unit.description,
                            is_locked=True,
                            is_sequential=True,
                        ),
                        len(existing) + unit.order,
                    ))
                targets = created_units
                ordered = sorted(existing + created_units, key=lambda u: u.order)
                self.gateway.save_unit_order(densify_units(ordered))

            for request in curriculum.lessons:
                if request.unit_index >= len(targets):
                    skipped += 1
                    continue
                content = schemas.LessonContent(
                    type=LessonType.lesson,
                    topic=request.topic,
                    title=request.title,
                    difficulty=request.difficulty,
                    objective=request.objective,
                    description=request.description,
                    theory=request.theory,
                    steps=request.steps,
                    starter_code=request.starter_code,
                    challenge=request.challenge,
                    tags=request.tags,
                    is_ai_guided=True,
                )
                created_lessons.append(self.gateway.create_lesson(
                    content, class_id, targets[request.unit_index].id, teacher_id
                ))

        if skipped:
            logger.warning(f"Skipped {skipped} curriculum lessons without a matching unit in class {class_id}")
        logger.info(
            f"Applied curriculum '{curriculum.course_title}' to class {class_id}: "
            f"{len(created_units)} units, {len(created_lessons)} lessons"
        )
        created_ids = {unit.id for unit in created_units}
        return schemas.AppliedCurriculum(
            units=[unit for unit in self.gateway.list_units(class_id) if unit.id in created_ids],
            lessons=created_lessons,
            skipped_lessons=skipped,
        )
