"""Test configuration and fixtures."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from canvasclassroom import models  # noqa: F401
from canvasclassroom import schemas
from canvasclassroom.ai import ContentGenerationClient
from canvasclassroom.auth import AuthService, StudentAccount, Teacher
from canvasclassroom.database import Base, get_db
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import ClassService, CurriculumService, RosterService


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_PASSWORD = "TestPass123!"


@pytest.fixture
def engine():
    """Create a fresh test database per test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def gateway(db_session):
    return PersistenceGateway(db_session)


def _make_teacher(db_session, email, full_name):
    teacher = Teacher(email=email, full_name=full_name)
    teacher.set_password(TEST_PASSWORD)
    db_session.add(teacher)
    db_session.commit()
    db_session.refresh(teacher)
    return teacher


@pytest.fixture
def teacher(db_session):
    """Create a sample teacher account."""
    return _make_teacher(db_session, "teacher@example.com", "Test Teacher")


@pytest.fixture
def other_teacher(db_session):
    return _make_teacher(db_session, "other@example.com", "Other Teacher")


@pytest.fixture
def classroom(gateway, teacher):
    """Create a sample class owned by the teacher."""
    return ClassService(gateway).create_class(
        teacher.id,
        schemas.ClassroomCreate(name="Creative Coding", period="Period 2", academic_year="2026"),
    )


@pytest.fixture
def units(gateway, classroom):
    """An open sequential unit followed by a locked one."""
    service = CurriculumService(gateway)
    return [
        service.create_unit(classroom.id, schemas.UnitCreate(title="Shapes", is_sequential=True)),
        service.create_unit(classroom.id, schemas.UnitCreate(title="Motion", is_locked=True)),
    ]


@pytest.fixture
def lessons(gateway, classroom, teacher, units):
    """Two lessons in the first unit and one in the second."""
    service = CurriculumService(gateway)
    return [
        service.create_lesson(classroom.id, teacher.id, schemas.LessonCreate(
            title="Your First Canvas",
            objective="Create a canvas",
            steps=["[NEXT] Look at the canvas", "Call createCanvas(400, 400)", "[TEXT] What did you make?"],
            tags=["canvas", "setup"],
            unit_id=units[0].id,
        )),
        service.create_lesson(classroom.id, teacher.id, schemas.LessonCreate(
            title="Drawing Shapes",
            objective="Draw circles",
            steps=["Draw a circle with circle()"],
            tags=["shapes"],
            unit_id=units[0].id,
        )),
        service.create_lesson(classroom.id, teacher.id, schemas.LessonCreate(
            title="Bouncing Ball",
            objective="Animate a ball",
            tags=["animation", "shapes"],
            unit_id=units[1].id,
        )),
    ]


@pytest.fixture
def students(gateway, classroom):
    """Two approved, active students."""
    service = RosterService(gateway)
    return [
        service.add_student(classroom.id, schemas.StudentCreate(name="Ada Lovelace", email="ada@example.com", student_id="S1")),
        service.add_student(classroom.id, schemas.StudentCreate(name="Grace Hopper", email="grace@example.com", student_id="S2")),
    ]


@pytest.fixture
def content_client():
    """A content client stand-in with every remote call mocked."""
    return MagicMock(spec=ContentGenerationClient)


@pytest.fixture
def client(db_session, content_client):
    from canvasclassroom.main import app
    from canvasclassroom.deps import get_content_client

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_content_client] = lambda: content_client

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(db_session, teacher):
    token = AuthService(db_session).token_for(teacher)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(db_session, other_teacher):
    token = AuthService(db_session).token_for(other_teacher)
    return {"Authorization": f"Bearer {token}"}


def _make_student_account(db_session, student):
    account = StudentAccount(email=student.email, student_id=student.id)
    account.set_password(TEST_PASSWORD)
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def student_headers(db_session, students):
    """Bearer headers for Ada and Grace, in that order."""
    service = AuthService(db_session)
    return [
        {"Authorization": f"Bearer {service.student_token_for(_make_student_account(db_session, student))}"}
        for student in students
    ]
