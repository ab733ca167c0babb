"""Tests for roster CSV handling and enrollment decisions."""

import pytest

from canvasclassroom import schemas
from canvasclassroom.errors import InvalidTransitionError, NotFoundError
from canvasclassroom.models.enums import EnrollmentStatus
from canvasclassroom.services import RosterService, parse_roster_csv
from canvasclassroom.services.roster import map_csv_header, roster_to_csv


@pytest.fixture
def service(gateway):
    return RosterService(gateway)


class TestCsvParsing:
    def test_header_mapping_order(self):
        assert map_csv_header(["Student Name", "Email Address", "Student ID"]) == {"name": 0, "email": 1, "student_id": 2}

    def test_column_maps_to_one_field(self):
        # "Student Name" matches name first, so it cannot also be the id column
        assert map_csv_header(["Student Name"]) == {"name": 0}

    def test_first_matching_column_wins(self):
        assert map_csv_header(["Name", "Nickname", "ID"]) == {"name": 0, "student_id": 2}

    def test_parse_rows(self):
        csv_data = (
            "Name,Email,ID\n"
            "Ada Lovelace,ada@example.com,S1\n"
            "\n"
            ",nobody@example.com,S9\n"
            "Grace Hopper,,S2\n"
        )
        rows = parse_roster_csv(csv_data)

        assert [row.name for row in rows] == ["Ada Lovelace", "Grace Hopper"]
        assert rows[0].email == "ada@example.com"
        assert rows[1].email is None
        assert rows[1].student_id == "S2"

    def test_quoted_fields_and_short_rows(self):
        rows = parse_roster_csv('name,email\n"Lovelace, Ada"\n')
        assert rows[0].name == "Lovelace, Ada"
        assert rows[0].email is None

    def test_empty_input(self):
        assert parse_roster_csv("") == []
        assert parse_roster_csv("Name,Email\n") == []

    def test_export(self):
        students = [
            schemas.Student(id="1", name="Ada Lovelace", email="ada@example.com", student_id="S1"),
            schemas.Student(id="2", name="Grace Hopper"),
        ]
        lines = roster_to_csv(students).splitlines()
        assert lines == ["Name,Email,Student ID", "Ada Lovelace,ada@example.com,S1", "Grace Hopper,,"]


class TestRoster:
    def test_import_enrolls_students(self, service, gateway, classroom):
        imported = service.import_csv(classroom.id, "Name,Email\nAda Lovelace,ada@example.com\nAlan Turing,\n")

        assert [s.avatar for s in imported] == ["AL", "AT"]
        assert all(s.enrolled_at is not None for s in imported)
        assert service.roster(classroom.id).active_count == 2
        enrollments = gateway.list_enrollments(classroom.id, EnrollmentStatus.approved)
        assert len(enrollments) == 2

    def test_import_does_not_deduplicate(self, service, classroom):
        service.import_csv(classroom.id, "Name\nAda\n")
        service.import_csv(classroom.id, "Name\nAda\n")
        assert service.roster(classroom.id).active_count == 2

    def test_archive_and_restore(self, service, classroom, students):
        service.archive_student(classroom.id, students[0].id)
        view = service.roster(classroom.id)
        assert [s.id for s in view.archived] == [students[0].id]
        assert [s.id for s in view.active] == [students[1].id]

        service.restore_student(classroom.id, students[0].id)
        assert service.roster(classroom.id).active_count == 2

    def test_export_only_active(self, service, classroom, students):
        service.archive_student(classroom.id, students[1].id)
        exported = service.export_csv(classroom.id)
        assert "Ada Lovelace" in exported
        assert "Grace Hopper" not in exported

    def test_update_student_recomputes_avatar(self, service, classroom, students):
        updated = service.update_student(classroom.id, students[0].id, schemas.StudentUpdate(name="Augusta King"))
        assert updated.avatar == "AK"
        assert updated.email == "ada@example.com"


class TestEnrollment:
    def test_join_creates_pending_request(self, service, classroom):
        enrollment = service.join_by_code("kid-1", schemas.JoinClassRequest(class_code=classroom.class_code))
        assert enrollment.status == EnrollmentStatus.pending
        assert enrollment.enrolled_at is None

        again = service.join_by_code("kid-1", schemas.JoinClassRequest(class_code=classroom.class_code))
        assert again.id == enrollment.id

    def test_join_unknown_code(self, service, classroom):
        code = "100000" if classroom.class_code != "100000" else "100001"
        with pytest.raises(NotFoundError):
            service.join_by_code("kid-1", schemas.JoinClassRequest(class_code=code))

    def test_approve_creates_placeholder_student(self, service, gateway, classroom):
        request = service.join_by_code("kid-1", schemas.JoinClassRequest(class_code=classroom.class_code))

        approved = service.approve_enrollment(classroom.id, request.id)

        assert approved.status == EnrollmentStatus.approved
        assert approved.enrolled_at is not None
        student = gateway.get_student("kid-1")
        assert student.name == "New Student"
        assert student.avatar == "NS"

    def test_approve_keeps_existing_student(self, service, gateway, classroom):
        existing = gateway.create_student(schemas.StudentCreate(name="Alan Turing"))
        request = service.join_by_code(existing.id, schemas.JoinClassRequest(class_code=classroom.class_code))

        service.approve_enrollment(classroom.id, request.id)

        assert gateway.get_student(existing.id).name == "Alan Turing"
        assert [s.id for s in service.roster(classroom.id).active] == [existing.id]

    def test_reject_sets_status_only(self, service, gateway, classroom):
        request = service.join_by_code("kid-2", schemas.JoinClassRequest(class_code=classroom.class_code))

        rejected = service.reject_enrollment(classroom.id, request.id)

        assert rejected.status == EnrollmentStatus.rejected
        assert rejected.enrolled_at is None
        assert gateway.get_student("kid-2") is None

    def test_only_pending_can_be_decided(self, service, classroom):
        request = service.join_by_code("kid-3", schemas.JoinClassRequest(class_code=classroom.class_code))
        service.reject_enrollment(classroom.id, request.id)

        with pytest.raises(InvalidTransitionError):
            service.approve_enrollment(classroom.id, request.id)

    def test_list_filters_by_status(self, service, classroom, students):
        service.join_by_code("kid-4", schemas.JoinClassRequest(class_code=classroom.class_code))

        pending = service.list_enrollments(classroom.id, EnrollmentStatus.pending)
        assert [e.student_id for e in pending] == ["kid-4"]
        assert len(service.list_enrollments(classroom.id)) == 3
