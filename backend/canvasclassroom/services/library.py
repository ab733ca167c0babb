"""
Lesson library: JSON export and import, templates, copies and class backups.

Exported lessons carry no identity or scoping (``id``, ``classId`` and
``unitId`` are dropped) so they can be imported into any class.
"""

import json
import logging
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .. import schemas
from ..errors import ImportFormatError, NotFoundError
from ..gateway import PersistenceGateway
from .classes import ClassService

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
SCOPING_FIELDS = {"id", "class_id", "unit_id"}


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def export_lesson(lesson: schemas.LessonPlan) -> Dict[str, Any]:
    data = lesson.model_dump(mode="json", by_alias=True, exclude=SCOPING_FIELDS)
    data.update(version=EXPORT_VERSION, exportedAt=_timestamp())
    return data


def export_lessons(lessons: List[schemas.LessonPlan]) -> Dict[str, Any]:
    return {
        "lessons": [
            lesson.model_dump(mode="json", by_alias=True, exclude=SCOPING_FIELDS)
            for lesson in lessons if not lesson.is_template
        ],
        "exportedAt": _timestamp(),
        "version": EXPORT_VERSION,
    }


def parse_lesson_import(payload: Any) -> List[schemas.LessonContent]:
    """Read an exported lesson or lesson collection.

    Accepts a JSON string or an already-decoded object. Raises
    ImportFormatError without partial results when anything is malformed.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"Invalid JSON: {e.msg}")

    if isinstance(payload, dict) and isinstance(payload.get("lessons"), list):
        items = payload["lessons"]
    elif isinstance(payload, dict):
        items = [payload]
    else:
        raise ImportFormatError("Expected a lesson object or an object with a 'lessons' array")

    lessons = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ImportFormatError(f"Lesson {index} is not an object")
        try:
            lessons.append(schemas.LessonContent.model_validate(item))
        except ValidationError as e:
            raise ImportFormatError(f"Lesson {index} is invalid: {e.errors()[0]['msg']}")
    return lessons


class LibraryService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self.classes = ClassService(gateway)

    def _class_lesson(self, class_id: str, lesson_id: str) -> schemas.LessonPlan:
        lesson = self.gateway.get_lesson(lesson_id)
        if lesson is None or lesson.class_id != class_id or lesson.is_template:
            raise NotFoundError("Lesson", lesson_id)
        return lesson

    def _copy_into(
        self,
        lesson: schemas.LessonContent,
        class_id: str,
        teacher_id: Optional[int],
        unit_id: Optional[str] = None,
        title: Optional[str] = None,
    ) -> schemas.LessonPlan:
        changes = {"is_template": False}
        if title is not None:
            changes["title"] = title
        return self.gateway.create_lesson(lesson.model_copy(update=changes), class_id, unit_id, teacher_id)

    # -- export / import ----------------------------------------------

    def export_lesson(self, class_id: str, lesson_id: str) -> Dict[str, Any]:
        return export_lesson(self._class_lesson(class_id, lesson_id))

    def export_all(self, class_id: str) -> Dict[str, Any]:
        return export_lessons(self.gateway.list_lessons(class_id))

    def import_lessons(self, class_id: str, teacher_id: int, payload: Any) -> List[schemas.LessonPlan]:
        """Import into the class with fresh ids and no unit."""
        lessons = parse_lesson_import(payload)
        with self.gateway.atomic():
            imported = [self._copy_into(lesson, class_id, teacher_id) for lesson in lessons]
        logger.info(f"Imported {len(imported)} lessons into class {class_id}")
        return imported

    # -- templates ----------------------------------------------------

    def list_templates(self, teacher_id: int) -> List[schemas.LessonPlan]:
        return self.gateway.list_templates(teacher_id)

    def get_template(self, teacher_id: int, template_id: str) -> schemas.LessonPlan:
        template = self.gateway.get_lesson(template_id)
        if (
            template is None
            or not template.is_template
            or self.gateway.lesson_owner(template_id) != teacher_id
        ):
            raise NotFoundError("Template", template_id)
        return template

    def promote_to_template(self, class_id: str, teacher_id: int, lesson_id: str) -> schemas.LessonPlan:
        """Turn a class lesson into a class-agnostic template."""
        self._class_lesson(class_id, lesson_id)
        with self.gateway.atomic():
            template = self.gateway.update_lesson(lesson_id, {
                "is_template": True,
                "class_id": None,
                "unit_id": None,
                "teacher_id": teacher_id,
            })
            self.gateway.save_lesson_sequence(self.gateway.list_lessons(class_id))
        return template

    def instantiate_template(
        self,
        teacher_id: int,
        template_id: str,
        class_id: str,
        unit_id: Optional[str] = None,
    ) -> schemas.LessonPlan:
        template = self.get_template(teacher_id, template_id)
        if unit_id is not None:
            unit = self.gateway.get_unit(unit_id)
            if unit is None or unit.class_id != class_id:
                raise NotFoundError("Unit", unit_id)
        return self._copy_into(template, class_id, teacher_id, unit_id)

    def delete_template(self, teacher_id: int, template_id: str) -> None:
        self.get_template(teacher_id, template_id)
        self.gateway.delete_lesson(template_id)

    # -- copies -------------------------------------------------------

    def duplicate_lesson(
        self,
        class_id: str,
        teacher_id: int,
        lesson_id: str,
        target_class_id: Optional[str] = None,
    ) -> schemas.LessonPlan:
        """Copy a lesson into this class or another class the teacher owns."""
        lesson = self._class_lesson(class_id, lesson_id)
        target = target_class_id or class_id
        self.classes.get_owned_class(teacher_id, target)
        unit_id = lesson.unit_id if target == class_id else None
        return self._copy_into(lesson, target, teacher_id, unit_id, title=f"{lesson.title} (Copy)")

    def bulk_assign(
        self, class_id: str, teacher_id: int, lesson_id: str, class_ids: List[str]
    ) -> List[schemas.LessonPlan]:
        """Copy one lesson into each of several classes."""
        lesson = self._class_lesson(class_id, lesson_id)
        targets = list(dict.fromkeys(class_ids))
        for target in targets:
            self.classes.get_owned_class(teacher_id, target)
        with self.gateway.atomic():
            return [self._copy_into(lesson, target, teacher_id) for target in targets]

    # -- backup -------------------------------------------------------

    def backup(self, class_id: str) -> Dict[str, Any]:
        """A complete JSON snapshot of one class."""
        classroom = self.gateway.get_class(class_id)
        if classroom is None:
            raise NotFoundError("Class", class_id)

        def dump(items):
            return [item.model_dump(mode="json", by_alias=True) for item in items]

        return {
            "version": EXPORT_VERSION,
            "exportedAt": _timestamp(),
            "class": classroom.model_dump(mode="json", by_alias=True),
            "units": dump(self.gateway.list_units(class_id)),
            "lessons": dump(self.gateway.list_lessons(class_id)),
            "students": dump(self.gateway.list_class_students(class_id)),
            "submissions": dump(self.gateway.list_submissions(class_id)),
            "announcements": dump(self.gateway.list_announcements(class_id)),
        }
