"""Test cases for database utilities and the persistence gateway."""

import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy.exc import SQLAlchemyError

from canvasclassroom import models, schemas
from canvasclassroom.database import (
    get_db, get_db_session, create_tables, drop_tables,
    check_database_connection, engine, Base
)
from canvasclassroom.errors import NotFoundError
from canvasclassroom.models.enums import SubmissionStatus


class TestDatabaseUtilities:
    """Test cases for database utility functions."""

    def test_get_db_dependency(self):
        """Test get_db dependency function."""
        db_generator = get_db()
        db_session = next(db_generator)

        assert db_session is not None

        # Clean up
        try:
            next(db_generator)
        except StopIteration:
            pass  # Expected behavior

    def test_get_db_session_context_manager(self):
        """Test get_db_session context manager."""
        with get_db_session() as db:
            assert db is not None
            assert db.is_active

    def test_get_db_session_propagates_errors(self):
        with pytest.raises(SQLAlchemyError):
            with get_db_session():
                raise SQLAlchemyError("Test error")

    @patch('canvasclassroom.database.Base.metadata.create_all')
    def test_create_tables_success(self, mock_create_all):
        """Test successful table creation."""
        mock_create_all.return_value = None

        create_tables()

        mock_create_all.assert_called_once_with(bind=engine)

    @patch('canvasclassroom.database.Base.metadata.create_all')
    def test_create_tables_error(self, mock_create_all):
        """Test table creation error handling."""
        mock_create_all.side_effect = SQLAlchemyError("Connection failed")

        with pytest.raises(SQLAlchemyError):
            create_tables()

    @patch('canvasclassroom.database.Base.metadata.drop_all')
    def test_drop_tables_error(self, mock_drop_all):
        mock_drop_all.side_effect = SQLAlchemyError("Connection failed")

        with pytest.raises(SQLAlchemyError):
            drop_tables()

    @patch('canvasclassroom.database.engine.connect')
    def test_check_database_connection_success(self, mock_connect):
        """Test successful database connection check."""
        mock_conn = MagicMock()
        mock_connect.return_value.__enter__.return_value = mock_conn

        assert check_database_connection() is True
        mock_conn.execute.assert_called_once()

    @patch('canvasclassroom.database.engine.connect')
    def test_check_database_connection_failure(self, mock_connect):
        """Test database connection check failure."""
        mock_connect.side_effect = SQLAlchemyError("Connection failed")

        assert check_database_connection() is False

    def test_all_tables_registered(self):
        tables = set(Base.metadata.tables)
        assert {
            "teachers", "student_accounts", "classes", "enrollments", "students", "units", "lessons",
            "submissions", "rubrics", "announcements", "help_requests", "feedback_templates",
        } <= tables


class TestPersistenceGateway:
    def test_atomic_rolls_back_every_write(self, gateway, classroom):
        with pytest.raises(RuntimeError):
            with gateway.atomic():
                gateway.create_unit(classroom.id, schemas.UnitCreate(title="Kept?"), 0)
                raise RuntimeError("boom")

        assert gateway.list_units(classroom.id) == []

    def test_nested_atomic_commits_once(self, gateway, classroom):
        with gateway.atomic():
            gateway.create_unit(classroom.id, schemas.UnitCreate(title="Outer"), 0)
            with gateway.atomic():
                gateway.create_unit(classroom.id, schemas.UnitCreate(title="Inner"), 1)

        assert [unit.title for unit in gateway.list_units(classroom.id)] == ["Outer", "Inner"]

    def test_update_missing_row_raises_not_found(self, gateway):
        with pytest.raises(NotFoundError):
            gateway.update_unit("missing", {"title": "Nope"})

    def test_student_avatar_from_name(self, gateway):
        student = gateway.create_student(schemas.StudentCreate(name="ada lovelace king"))
        assert student.avatar == "AL"

        renamed = gateway.update_student(student.id, {"name": "Grace"})
        assert renamed.avatar == "G"

    def test_submission_history_round_trip(self, gateway, classroom, lessons, students):
        created = gateway.create_submission(schemas.Submission(
            id="sub-1",
            lesson_id=lessons[0].id,
            student_id=students[0].id,
            class_id=classroom.id,
            code="circle(1, 2, 3);",
            history={2: schemas.StepHistory(step_index=2, student_input="x", feedback="ok", passed=True)},
        ))

        loaded = gateway.get_submission(created.id)
        assert loaded.status == SubmissionStatus.draft
        assert loaded.history[2].passed is True
        assert loaded.feedback is None

    def test_delete_class_cascades(self, gateway, db_session, classroom, units, lessons, students):
        gateway.delete_class(classroom.id)

        assert gateway.get_class(classroom.id) is None
        assert db_session.query(models.Unit).count() == 0
        assert db_session.query(models.LessonPlan).count() == 0
        assert db_session.query(models.Enrollment).count() == 0
        # Students are not class-scoped
        assert db_session.query(models.Student).count() == 2

    def test_delete_unit_detaches_lessons(self, gateway, units, lessons):
        gateway.delete_unit(units[0].id)

        assert gateway.get_lesson(lessons[0].id).unit_id is None
        assert gateway.get_lesson(lessons[2].id).unit_id == units[1].id
