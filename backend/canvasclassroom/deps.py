"""FastAPI dependencies shared by the routers."""
from fastapi import Depends
from sqlalchemy.orm import Session

from .ai import ContentGenerationClient
from .auth import Teacher, get_current_active_teacher
from .database import get_db
from .errors import NotFoundError
from .gateway import PersistenceGateway
from . import schemas
from .services import ClassService


def get_gateway(db: Session = Depends(get_db)) -> PersistenceGateway:
    """Dependency to get a persistence gateway bound to the request session."""
    return PersistenceGateway(db)


def get_content_client() -> ContentGenerationClient:
    """Dependency to get the content generation client."""
    return ContentGenerationClient()


def get_teacher_class(
    class_id: str,
    teacher: Teacher = Depends(get_current_active_teacher),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> schemas.Classroom:
    """The class named in the path, if the current teacher owns it."""
    return ClassService(gateway).get_owned_class(teacher.id, class_id)


def get_student_class(
    class_id: str,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> schemas.Classroom:
    """The class named in the path, for student routes."""
    classroom = gateway.get_class(class_id)
    if classroom is None:
        raise NotFoundError("Class", class_id)
    return classroom
