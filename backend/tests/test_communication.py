"""Tests for help requests, announcements, rubrics and feedback templates."""

from datetime import datetime, timedelta, UTC

import pytest
from pydantic import ValidationError

from canvasclassroom import schemas
from canvasclassroom.errors import ForbiddenError, InvalidRubricError, InvalidTransitionError, NotFoundError
from canvasclassroom.models.enums import HelpRequestStatus
from canvasclassroom.services import AnnouncementService, HelpQueueService, RubricService, validate_criteria
from canvasclassroom.services.announcements import is_visible_to
from canvasclassroom.services.help_queue import priority_for, queue_entries


NOW = datetime(2026, 3, 1, 10, 0, tzinfo=UTC)


def help_request(waited, request_id="h1"):
    return schemas.HelpRequest(
        id=request_id,
        student_id="s1",
        class_id="c1",
        lesson_id="l1",
        created_at=NOW - waited,
    )


class TestHelpQueue:
    @pytest.mark.parametrize("waited, priority", [
        (timedelta(0), "normal"),
        (timedelta(minutes=4, seconds=59), "normal"),
        (timedelta(minutes=5), "elevated"),
        (timedelta(minutes=15), "elevated"),
        (timedelta(minutes=15, seconds=1), "urgent"),
        (timedelta(minutes=16), "urgent"),
    ])
    def test_priority_buckets(self, waited, priority):
        assert priority_for(waited) == priority

    def test_part_minutes_count_toward_urgency(self):
        [entry] = queue_entries([help_request(timedelta(minutes=15, seconds=50))], NOW)

        assert entry.waiting_minutes == 15
        assert entry.priority == "urgent"

    def test_entries_oldest_first(self):
        entries = queue_entries(
            [help_request(timedelta(minutes=2), "new"), help_request(timedelta(minutes=20), "old")], NOW
        )

        assert [e.id for e in entries] == ["old", "new"]
        assert [e.waiting_minutes for e in entries] == [20, 2]
        assert [e.priority for e in entries] == ["urgent", "normal"]

    @pytest.fixture
    def service(self, gateway):
        return HelpQueueService(gateway)

    def ask(self, service, classroom, lesson, student):
        return service.request_help(
            classroom.id, student.id, schemas.HelpRequestCreate(lesson_id=lesson.id, message="Stuck!")
        )

    def test_request_help(self, service, classroom, lessons, students):
        request = self.ask(service, classroom, lessons[0], students[0])

        assert request.status == HelpRequestStatus.pending
        assert request.resolved_at is None
        [entry] = service.queue(classroom.id)
        assert entry.id == request.id
        assert entry.priority == "normal"

    def test_unenrolled_student_cannot_ask(self, service, gateway, classroom, lessons):
        stranger = gateway.create_student(schemas.StudentCreate(name="Stranger"))
        with pytest.raises(ForbiddenError):
            self.ask(service, classroom, lessons[0], stranger)

    def test_status_moves_forward(self, service, classroom, lessons, students):
        request = self.ask(service, classroom, lessons[0], students[0])

        working = service.update_status(classroom.id, request.id, HelpRequestStatus.in_progress)
        assert working.status == HelpRequestStatus.in_progress
        assert working.resolved_at is None

        resolved = service.update_status(classroom.id, request.id, HelpRequestStatus.resolved)
        assert resolved.resolved_at is not None

        with pytest.raises(InvalidTransitionError):
            service.update_status(classroom.id, request.id, HelpRequestStatus.pending)

    def test_pending_can_resolve_directly(self, service, classroom, lessons, students):
        request = self.ask(service, classroom, lessons[0], students[0])
        resolved = service.update_status(classroom.id, request.id, HelpRequestStatus.resolved)
        assert resolved.status == HelpRequestStatus.resolved

    def test_same_status_is_rejected(self, service, classroom, lessons, students):
        request = self.ask(service, classroom, lessons[0], students[0])
        with pytest.raises(InvalidTransitionError):
            service.update_status(classroom.id, request.id, HelpRequestStatus.pending)

    def test_resolved_hidden_by_default(self, service, classroom, lessons, students):
        first = self.ask(service, classroom, lessons[0], students[0])
        self.ask(service, classroom, lessons[1], students[1])
        service.update_status(classroom.id, first.id, HelpRequestStatus.resolved)

        assert len(service.queue(classroom.id)) == 1
        assert len(service.queue(classroom.id, include_resolved=True)) == 2

    def test_unknown_request(self, service, classroom):
        with pytest.raises(NotFoundError):
            service.update_status(classroom.id, "missing", HelpRequestStatus.resolved)


class TestAnnouncements:
    def announcement(self, **kwargs):
        return schemas.Announcement(id="a1", class_id="c1", title="Hello", **kwargs)

    def test_visibility(self):
        assert is_visible_to(self.announcement(), "s1", NOW)
        assert not is_visible_to(self.announcement(scheduled_at=NOW + timedelta(hours=1)), "s1", NOW)
        assert is_visible_to(self.announcement(scheduled_at=NOW - timedelta(hours=1)), "s1", NOW)
        assert is_visible_to(self.announcement(target_student_ids=["s1"]), "s1", NOW)
        assert not is_visible_to(self.announcement(target_student_ids=["s2"]), "s1", NOW)

    @pytest.fixture
    def service(self, gateway):
        return AnnouncementService(gateway)

    def test_crud(self, service, teacher, classroom):
        created = service.create_announcement(
            classroom.id, teacher.id, schemas.AnnouncementCreate(title="Welcome", content="Hi all")
        )
        assert created.created_by == teacher.id

        updated = service.update_announcement(
            classroom.id, created.id, schemas.AnnouncementUpdate(content="Hi everyone")
        )
        assert updated.title == "Welcome"
        assert updated.content == "Hi everyone"

        service.delete_announcement(classroom.id, created.id)
        assert service.list_announcements(classroom.id) == []

    def test_student_sees_only_published_targeted(self, service, teacher, classroom, students):
        ada, grace = students
        service.create_announcement(classroom.id, teacher.id, schemas.AnnouncementCreate(title="Everyone"))
        service.create_announcement(
            classroom.id, teacher.id, schemas.AnnouncementCreate(title="Just Grace", target_student_ids=[grace.id])
        )
        service.create_announcement(
            classroom.id, teacher.id,
            schemas.AnnouncementCreate(title="Later", scheduled_at=datetime.now(UTC) + timedelta(days=1)),
        )

        assert [a.title for a in service.visible_to_student(classroom.id, ada.id)] == ["Everyone"]
        assert {a.title for a in service.visible_to_student(classroom.id, grace.id)} == {"Everyone", "Just Grace"}

    def test_wrong_class(self, service, teacher, classroom):
        created = service.create_announcement(classroom.id, teacher.id, schemas.AnnouncementCreate(title="Hi"))
        with pytest.raises(NotFoundError):
            service.get_announcement("other-class", created.id)


class TestRubrics:
    def criterion(self, name="Creativity", points=10):
        return schemas.RubricCriterion(name=name, max_points=points)

    @pytest.mark.parametrize("criteria, message", [
        ([], "Rubric must have at least one criterion"),
        ([schemas.RubricCriterion(name="  ", max_points=5)], "Criterion 0 must have a name"),
        ([schemas.RubricCriterion(name="Code", max_points=0)], "Criterion 0 points must be a positive number"),
    ])
    def test_invalid_criteria(self, criteria, message):
        assert validate_criteria(criteria) == (False, message)

    def test_valid_criteria(self):
        assert validate_criteria([self.criterion()]) == (True, "Valid criteria")

    @pytest.fixture
    def service(self, gateway):
        return RubricService(gateway)

    def test_create_and_total_points(self, service, teacher):
        rubric = service.create_rubric(
            teacher.id,
            schemas.RubricCreate(name="Sketch", criteria=[self.criterion(), self.criterion("Code", 15)]),
        )
        assert rubric.total_points == 25
        assert rubric.model_dump(by_alias=True)["totalPoints"] == 25
        assert [r.id for r in service.list_rubrics(teacher.id)] == [rubric.id]

    def test_create_rejects_empty_criteria(self, service, teacher):
        with pytest.raises(InvalidRubricError):
            service.create_rubric(teacher.id, schemas.RubricCreate(name="Empty"))

    def test_update_validates_new_criteria(self, service, teacher):
        rubric = service.create_rubric(teacher.id, schemas.RubricCreate(name="Sketch", criteria=[self.criterion()]))

        renamed = service.update_rubric(teacher.id, rubric.id, schemas.RubricUpdate(name="Sketchbook"))
        assert renamed.name == "Sketchbook"
        assert renamed.total_points == 10

        with pytest.raises(InvalidRubricError):
            service.update_rubric(teacher.id, rubric.id, schemas.RubricUpdate(criteria=[]))

    def test_rubrics_are_private(self, service, teacher, other_teacher):
        rubric = service.create_rubric(teacher.id, schemas.RubricCreate(name="Sketch", criteria=[self.criterion()]))
        assert service.list_rubrics(other_teacher.id) == []
        with pytest.raises(NotFoundError):
            service.delete_rubric(other_teacher.id, rubric.id)

    def test_feedback_templates(self, service, teacher, other_teacher):
        praise = service.create_feedback_template(
            teacher.id, schemas.FeedbackTemplateCreate(name="Great", comment="Great work!", category="praise")
        )
        service.create_feedback_template(
            teacher.id, schemas.FeedbackTemplateCreate(name="Indent", comment="Check your indentation", category="style")
        )

        assert [t.id for t in service.list_feedback_templates(teacher.id, "praise")] == [praise.id]
        assert len(service.list_feedback_templates(teacher.id)) == 2
        assert service.list_feedback_templates(other_teacher.id) == []

        updated = service.update_feedback_template(
            teacher.id, praise.id, schemas.FeedbackTemplateUpdate(comment="Amazing work!")
        )
        assert updated.comment == "Amazing work!"

        service.delete_feedback_template(teacher.id, praise.id)
        with pytest.raises(NotFoundError):
            service.get_feedback_template(teacher.id, praise.id)


@pytest.mark.parametrize("schema, field", [
    (schemas.AnnouncementUpdate, "title"),
    (schemas.AnnouncementUpdate, "target_student_ids"),
    (schemas.RubricUpdate, "criteria"),
    (schemas.FeedbackTemplateUpdate, "comment"),
])
def test_updates_reject_null_for_required_fields(schema, field):
    with pytest.raises(ValidationError, match="cannot be null"):
        schema(**{field: None})
    assert schema().model_dump(exclude_unset=True) == {}


def test_updates_accept_null_for_optional_fields():
    assert schemas.AnnouncementUpdate(scheduled_at=None).model_dump(exclude_unset=True) == {"scheduled_at": None}
    assert schemas.FeedbackTemplateUpdate(category=None).model_dump(exclude_unset=True) == {"category": None}
