"""Teacher and student account models and token schemas."""
import os
import string
from datetime import datetime, UTC
from typing import Optional

import bcrypt
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic import ConfigDict
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from canvasclassroom.database import Base

# JWT Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

TEACHER_ROLE = "teacher"
STUDENT_ROLE = "student"


class PasswordMixin:
    def set_password(self, password: str) -> None:
        """Hash and set the account password."""
        salt = bcrypt.gensalt()
        self.hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def verify_password(self, password: str) -> bool:
        """Verify the provided password against the stored hash."""
        return bcrypt.checkpw(password.encode('utf-8'), self.hashed_password.encode('utf-8'))


class Teacher(PasswordMixin, Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<Teacher(id={self.id}, email='{self.email}')>"


class StudentAccount(PasswordMixin, Base):
    """Login credentials for one student record."""
    __tablename__ = "student_accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    student_id = Column(String(36), ForeignKey("students.id"), unique=True, nullable=False)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<StudentAccount(id={self.id}, email='{self.email}', student_id={self.student_id})>"


# Pydantic models for request/response schemas
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
    teacher_id: Optional[int] = None
    student_id: Optional[str] = None


def check_password_complexity(v: str) -> str:
    if not any(char.isdigit() for char in v):
        raise ValueError('Password must contain at least one number')
    if not any(char.isupper() for char in v):
        raise ValueError('Password must contain at least one uppercase letter')
    if not any(char.islower() for char in v):
        raise ValueError('Password must contain at least one lowercase letter')
    if not any(char in string.punctuation for char in v):
        raise ValueError('Password must contain at least one special character')
    return v


class TeacherCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: Optional[str] = None

    @field_validator('password')
    @classmethod
    def password_complexity(cls, v: str) -> str:
        return check_password_complexity(v)


class TeacherResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str]
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class StudentRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=1, max_length=255)

    @field_validator('password')
    @classmethod
    def password_complexity(cls, v: str) -> str:
        return check_password_complexity(v)


class StudentAccountResponse(BaseModel):
    id: int
    email: str
    student_id: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
