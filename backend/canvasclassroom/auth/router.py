"""Authentication routes for teacher and student accounts."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from canvasclassroom.database import get_db
from .models import (
    Teacher, Token, TeacherCreate, TeacherResponse,
    StudentAccount, StudentRegister, StudentAccountResponse,
)
from .service import AuthService, get_current_active_teacher, get_current_active_student

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get an instance of AuthService."""
    return AuthService(db)


def login_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Incorrect email or password",
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
async def register_teacher(
    teacher_data: TeacherCreate,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new teacher account."""
    return service.register_teacher(teacher_data)


@router.post("/login", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    """OAuth2 compatible token login, get an access token for future requests."""
    teacher = service.authenticate_teacher(form_data.username, form_data.password)
    if not teacher:
        raise login_failed()
    return Token(access_token=service.token_for(teacher))


@router.get("/me", response_model=TeacherResponse)
async def read_teacher_me(current_teacher: Teacher = Depends(get_current_active_teacher)):
    """Get the current teacher's profile."""
    return current_teacher


@router.post("/student/register", response_model=StudentAccountResponse, status_code=status.HTTP_201_CREATED)
async def register_student(
    student_data: StudentRegister,
    service: AuthService = Depends(get_auth_service)
):
    """Create a student login; the student then joins classes by code."""
    return service.register_student(student_data)


@router.post("/student/login", response_model=Token)
async def student_login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    account = service.authenticate_student(form_data.username, form_data.password)
    if not account:
        raise login_failed()
    return Token(access_token=service.student_token_for(account))


@router.get("/student/me", response_model=StudentAccountResponse)
async def read_student_me(current_student: StudentAccount = Depends(get_current_active_student)):
    return current_student
