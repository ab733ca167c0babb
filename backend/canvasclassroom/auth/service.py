"""Authentication service for teacher and student accounts and bearer tokens."""
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from canvasclassroom import schemas
from canvasclassroom.database import get_db
from canvasclassroom.gateway import PersistenceGateway
from .models import (
    Teacher, StudentAccount, TokenData, TeacherCreate, StudentRegister,
    SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, TEACHER_ROLE, STUDENT_ROLE,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
student_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/student/login")


def credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a new access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(UTC) + expires_delta
        else:
            expire = datetime.now(UTC) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

    def token_for(self, teacher: Teacher) -> str:
        return self.create_access_token(
            data={"sub": teacher.email, "role": TEACHER_ROLE, "teacher_id": teacher.id}
        )

    def student_token_for(self, account: StudentAccount) -> str:
        return self.create_access_token(
            data={"sub": account.email, "role": STUDENT_ROLE, "student_id": account.student_id}
        )

    def verify_token(self, token: str, role: str = TEACHER_ROLE) -> TokenData:
        """Verify and decode a JWT token issued for the given role."""
        try:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        except JWTError:
            raise credentials_exception()
        token_data = TokenData(
            email=payload.get("sub"),
            role=payload.get("role"),
            teacher_id=payload.get("teacher_id"),
            student_id=payload.get("student_id"),
        )
        subject = token_data.teacher_id if role == TEACHER_ROLE else token_data.student_id
        if token_data.email is None or token_data.role != role or subject is None:
            raise credentials_exception()
        return token_data

    def authenticate_teacher(self, email: str, password: str) -> Optional[Teacher]:
        """Authenticate a teacher with email and password."""
        teacher = self.db.query(Teacher).filter(Teacher.email == email).first()
        if not teacher or not teacher.verify_password(password):
            return None
        if not teacher.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive account"
            )
        teacher.last_login = datetime.now(UTC)
        self.db.commit()
        return teacher

    def authenticate_student(self, email: str, password: str) -> Optional[StudentAccount]:
        account = self.db.query(StudentAccount).filter(StudentAccount.email == email).first()
        if not account or not account.verify_password(password):
            return None
        if not account.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive account"
            )
        account.last_login = datetime.now(UTC)
        self.db.commit()
        return account

    def register_teacher(self, teacher_data: TeacherCreate) -> Teacher:
        """Register a new teacher account."""
        if self.db.query(Teacher).filter(Teacher.email == teacher_data.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        teacher = Teacher(email=teacher_data.email, full_name=teacher_data.full_name)
        teacher.set_password(teacher_data.password)

        self.db.add(teacher)
        self.db.commit()
        self.db.refresh(teacher)
        return teacher

    def register_student(self, student_data: StudentRegister) -> StudentAccount:
        """Register a student login together with the student record it signs in as."""
        if self.db.query(StudentAccount).filter(StudentAccount.email == student_data.email).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        gateway = PersistenceGateway(self.db)
        with gateway.atomic():
            student = gateway.create_student(
                schemas.StudentCreate(name=student_data.full_name, email=student_data.email)
            )
            account = StudentAccount(email=student_data.email, student_id=student.id)
            account.set_password(student_data.password)
            self.db.add(account)
        self.db.refresh(account)
        return account


def get_current_teacher(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Teacher:
    """Dependency to get the current teacher from the JWT token."""
    token_data = AuthService(db).verify_token(token)
    teacher = db.query(Teacher).filter(Teacher.id == token_data.teacher_id).first()
    if teacher is None:
        raise credentials_exception()
    return teacher


def get_current_active_teacher(current_teacher: Teacher = Depends(get_current_teacher)) -> Teacher:
    """Dependency to get the current active teacher."""
    if not current_teacher.is_active:
        raise HTTPException(status_code=400, detail="Inactive account")
    return current_teacher


def get_current_student(
    token: str = Depends(student_oauth2_scheme),
    db: Session = Depends(get_db)
) -> StudentAccount:
    """Dependency to get the signed-in student's account from the JWT token."""
    token_data = AuthService(db).verify_token(token, role=STUDENT_ROLE)
    account = db.query(StudentAccount).filter(StudentAccount.student_id == token_data.student_id).first()
    if account is None:
        raise credentials_exception()
    return account


def get_current_active_student(
    current_student: StudentAccount = Depends(get_current_student)
) -> StudentAccount:
    if not current_student.is_active:
        raise HTTPException(status_code=400, detail="Inactive account")
    return current_student
