"""Class lifecycle: enrollment codes, default content, ownership and deletion."""

import logging
import secrets
from datetime import datetime, timedelta, UTC
from typing import List

from .. import schemas
from ..errors import ClassroomError, NotFoundError
from ..gateway import PersistenceGateway

logger = logging.getLogger(__name__)

CLASS_CODE_MIN = 100000
CLASS_CODE_MAX = 999999
MAX_CODE_ATTEMPTS = 100

DEFAULT_CLASS_NAME = "My First Class"
DEFAULT_PERIOD = "Period 1"


def generate_class_code() -> str:
    """A random 6-digit code in 100000-999999."""
    return str(CLASS_CODE_MIN + secrets.randbelow(CLASS_CODE_MAX - CLASS_CODE_MIN + 1))


def default_units(now: datetime) -> List[schemas.UnitCreate]:
    return [
        schemas.UnitCreate(
            title="Unit 1: Foundations",
            description="Core concepts of p5.js and drawing.",
            is_locked=False,
            is_sequential=True,
        ),
        schemas.UnitCreate(
            title="Unit 2: Interaction",
            description="Mouse and keyboard events.",
            is_locked=True,
            is_sequential=True,
        ),
        schemas.UnitCreate(
            title="Unit 3: Animation",
            description="Movement, velocity, and physics.",
            is_locked=True,
            is_sequential=True,
        ),
        schemas.UnitCreate(
            title="Unit 4: Future Tech",
            description="Advanced synthesis.",
            is_locked=False,
            is_sequential=True,
            available_at=now + timedelta(days=7),
        ),
    ]


class ClassService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def unique_class_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_class_code()
            if not self.gateway.class_code_exists(code):
                return code
        logger.error("Could not allocate a unique class code")
        raise ClassroomError("Could not allocate a unique class code")

    def list_classes(self, teacher_id: int) -> List[schemas.Classroom]:
        """List a teacher's classes, seeding a default class on first use."""
        classes = self.gateway.list_classes(teacher_id)
        if classes:
            return classes
        logger.info(f"Seeding default class for teacher {teacher_id}")
        default = schemas.ClassroomCreate(
            name=DEFAULT_CLASS_NAME,
            period=DEFAULT_PERIOD,
            academic_year=str(datetime.now(UTC).year),
        )
        with self.gateway.atomic():
            classroom = self.gateway.create_class(teacher_id, default, self.unique_class_code())
            self.seed_default_units(classroom.id)
        return [classroom]

    def seed_default_units(self, class_id: str) -> List[schemas.Unit]:
        now = datetime.now(UTC)
        return [
            self.gateway.create_unit(class_id, unit, order)
            for order, unit in enumerate(default_units(now))
        ]

    def create_class(self, teacher_id: int, data: schemas.ClassroomCreate) -> schemas.Classroom:
        classroom = self.gateway.create_class(teacher_id, data, self.unique_class_code())
        logger.info(f"Created class {classroom.id} ({classroom.name}) with code {classroom.class_code}")
        return classroom

    def get_owned_class(self, teacher_id: int, class_id: str) -> schemas.Classroom:
        """The class, if it exists and belongs to the teacher."""
        classroom = self.gateway.get_class(class_id)
        if classroom is None or classroom.teacher_id != teacher_id:
            raise NotFoundError("Class", class_id)
        return classroom

    def update_class(self, teacher_id: int, class_id: str, data: schemas.ClassroomUpdate) -> schemas.Classroom:
        self.get_owned_class(teacher_id, class_id)
        return self.gateway.update_class(class_id, data.model_dump(exclude_unset=True))

    def delete_class(self, teacher_id: int, class_id: str) -> None:
        """Delete a class and everything scoped to it. Templates are not class-scoped and survive."""
        self.get_owned_class(teacher_id, class_id)
        self.gateway.delete_class(class_id)
        logger.info(f"Deleted class {class_id}")
