"""When a student may open a lesson: unit locks, release dates and sequencing."""

from datetime import datetime
from typing import Dict, List

from .. import schemas
from ..models.enums import SubmissionStatus

COMPLETE_STATUSES = (SubmissionStatus.submitted, SubmissionStatus.graded)


def unit_is_open(unit: schemas.Unit, now: datetime) -> bool:
    """A locked unit opens on its own once ``available_at`` has passed."""
    if not unit.is_locked:
        return True
    return unit.available_at is not None and unit.available_at <= now


def in_unit_order(lessons: List[schemas.LessonPlan], units: List[schemas.Unit]) -> List[schemas.LessonPlan]:
    # Unit order first, then position within the class sequence
    unit_rank = {unit.id: unit.order for unit in units}
    return sorted(
        lessons,
        key=lambda lesson: (lesson.unit_id is None, unit_rank.get(lesson.unit_id, 0)),
    )


def lesson_access(
    lessons: List[schemas.LessonPlan],
    units: List[schemas.Unit],
    statuses: Dict[str, SubmissionStatus],
    now: datetime,
) -> Dict[str, bool]:
    """Map lesson id to whether the student may open it.

    In sequential units every earlier lesson of the unit must be submitted
    or graded first. Lessons without a unit are always open.
    """
    units_by_id = {unit.id: unit for unit in units}
    access = {}
    for index, lesson in enumerate(lessons):
        unit = units_by_id.get(lesson.unit_id) if lesson.unit_id else None
        if unit is None:
            access[lesson.id] = True
            continue
        if not unit_is_open(unit, now):
            access[lesson.id] = False
            continue
        if unit.is_sequential:
            earlier = [other for other in lessons[:index] if other.unit_id == unit.id]
            access[lesson.id] = all(statuses.get(other.id) in COMPLETE_STATUSES for other in earlier)
        else:
            access[lesson.id] = True
    return access
