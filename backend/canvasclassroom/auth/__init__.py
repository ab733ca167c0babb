"""Authentication package for teacher and student accounts."""
from .models import (
    Teacher, Token, TeacherCreate, TeacherResponse,
    StudentAccount, StudentRegister, StudentAccountResponse,
)
from .service import (
    AuthService, get_current_teacher, get_current_active_teacher,
    get_current_student, get_current_active_student,
)
from .router import router as auth_router

__all__ = [
    'Teacher',
    'Token',
    'TeacherCreate',
    'TeacherResponse',
    'StudentAccount',
    'StudentRegister',
    'StudentAccountResponse',
    'AuthService',
    'get_current_teacher',
    'get_current_active_teacher',
    'get_current_student',
    'get_current_active_student',
    'auth_router'
]
