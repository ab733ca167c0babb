"""Tests for submission progress, lesson access, resubmission and grading rules."""

from datetime import datetime, timedelta, UTC

import pytest

from canvasclassroom import schemas
from canvasclassroom.errors import ForbiddenError, InvalidGradeError, NotFoundError, VersionConflictError
from canvasclassroom.models import FINAL_STEP
from canvasclassroom.models.enums import SubmissionStatus
from canvasclassroom.services import CurriculumService, RosterService, SubmissionService


@pytest.fixture
def service(gateway):
    return SubmissionService(gateway)


def save(service, classroom, lesson, student, step, code="", item=None, **kwargs):
    return service.update_progress(
        classroom.id, lesson.id, student.id,
        schemas.ProgressUpdate(code=code, step_index=step, history_item=item, **kwargs),
    )


def outcome(step, passed=True):
    return schemas.StepHistory(step_index=step, student_input="", feedback="ok", passed=passed)


def submit(service, classroom, lesson, student, code="draw();"):
    return service.submit_lesson(classroom.id, lesson.id, student.id, schemas.SubmitRequest(code=code))


class TestProgress:
    def test_first_save_creates_draft(self, service, classroom, lessons, students):
        submission = save(service, classroom, lessons[0], students[0], 1, "a", outcome(0))

        assert submission.status == SubmissionStatus.draft
        assert submission.student_id == students[0].id
        assert submission.current_step == 1
        assert list(submission.history) == [0]
        assert submission.version == 1

    def test_later_saves_upsert_history(self, service, classroom, lessons, students):
        save(service, classroom, lessons[0], students[0], 0, "a", outcome(0, False))
        save(service, classroom, lessons[0], students[0], 1, "b", outcome(0, True))
        submission = save(service, classroom, lessons[0], students[0], 2, "c", outcome(1), time_spent=60000)

        assert submission.code == "c"
        assert submission.current_step == 2
        assert submission.history[0].passed is True
        assert set(submission.history) == {0, 1}
        assert submission.time_spent == 60000
        assert submission.version == 3

    def test_progress_never_changes_status(self, service, classroom, lessons, students):
        submit(service, classroom, lessons[0], students[0])
        submission = save(service, classroom, lessons[0], students[0], 1, "more")
        assert submission.status == SubmissionStatus.submitted

    def test_stale_version_conflicts(self, service, classroom, lessons, students):
        save(service, classroom, lessons[0], students[0], 0)
        save(service, classroom, lessons[0], students[0], 1, expected_version=1)

        with pytest.raises(VersionConflictError):
            save(service, classroom, lessons[0], students[0], 2, expected_version=1)

    def test_unenrolled_student_is_forbidden(self, service, gateway, classroom, lessons):
        stranger = gateway.create_student(schemas.StudentCreate(name="Stranger"))
        with pytest.raises(ForbiddenError):
            save(service, classroom, lessons[0], stranger, 0)

    def test_archived_student_is_forbidden(self, service, gateway, classroom, lessons, students):
        RosterService(gateway).archive_student(classroom.id, students[0].id)
        with pytest.raises(ForbiddenError):
            save(service, classroom, lessons[0], students[0], 0)

    def test_lesson_outside_class_is_not_found(self, service, classroom, students):
        with pytest.raises(NotFoundError):
            service.update_progress(classroom.id, "missing", students[0].id, schemas.ProgressUpdate(code="", step_index=0))


class TestLessonAccess:
    def test_locked_unit_rejects_progress_and_submit(self, service, gateway, classroom, lessons, students):
        with pytest.raises(ForbiddenError):
            save(service, classroom, lessons[2], students[0], 0, "ball")
        with pytest.raises(ForbiddenError):
            submit(service, classroom, lessons[2], students[0])

        assert gateway.list_submissions(classroom.id, lesson_id=lessons[2].id) == []

    def test_unlocking_opens_the_unit(self, service, gateway, classroom, units, lessons, students):
        CurriculumService(gateway).update_unit(classroom.id, units[1].id, schemas.UnitUpdate(is_locked=False))

        assert save(service, classroom, lessons[2], students[0], 0).status == SubmissionStatus.draft

    def test_release_date_opens_the_unit(self, service, gateway, classroom, units, lessons, students):
        CurriculumService(gateway).update_unit(
            classroom.id, units[1].id,
            schemas.UnitUpdate(available_at=datetime.now(UTC) - timedelta(minutes=1)),
        )

        assert submit(service, classroom, lessons[2], students[0]).status == SubmissionStatus.submitted

    def test_sequential_unit_needs_earlier_lessons_done(self, service, classroom, lessons, students):
        with pytest.raises(ForbiddenError):
            save(service, classroom, lessons[1], students[0], 0)
        with pytest.raises(ForbiddenError):
            submit(service, classroom, lessons[1], students[0])

    def test_a_draft_does_not_open_the_next_lesson(self, service, classroom, lessons, students):
        save(service, classroom, lessons[0], students[0], 1)
        with pytest.raises(ForbiddenError):
            submit(service, classroom, lessons[1], students[0])

    def test_submitting_opens_the_next_lesson(self, service, classroom, lessons, students):
        submit(service, classroom, lessons[0], students[0])

        assert submit(service, classroom, lessons[1], students[0]).status == SubmissionStatus.submitted
        # Grace has not finished the first lesson yet
        with pytest.raises(ForbiddenError):
            save(service, classroom, lessons[1], students[1], 0)


class TestSubmit:
    def test_submit_replaces_draft(self, service, gateway, classroom, lessons, students):
        draft = save(service, classroom, lessons[0], students[0], 1, "a", outcome(0))
        submitted = submit(service, classroom, lessons[0], students[0], "final")

        assert submitted.id != draft.id
        assert submitted.status == SubmissionStatus.submitted
        assert submitted.submitted_at is not None
        assert submitted.current_step == FINAL_STEP
        assert submitted.history == {}
        assert submitted.version == draft.version + 1
        assert gateway.get_submission(draft.id) is None
        assert len(gateway.list_submissions(classroom.id, lesson_id=lessons[0].id)) == 1

    def test_resubmitting_after_grading_clears_feedback(self, service, classroom, lessons, students):
        first = submit(service, classroom, lessons[0], students[0])
        service.grade_submission(classroom.id, first.id, schemas.GradeRequest(grade=80))

        again = submit(service, classroom, lessons[0], students[0], "v2")
        assert again.status == SubmissionStatus.submitted
        assert again.feedback is None


class TestGrading:
    def test_grade_submission(self, service, classroom, lessons, students):
        submitted = submit(service, classroom, lessons[0], students[0])
        graded = service.grade_submission(
            classroom.id, submitted.id, schemas.GradeRequest(grade=92, comment="Lovely colors")
        )

        assert graded.status == SubmissionStatus.graded
        assert graded.feedback.grade == 92
        assert graded.feedback.comment == "Lovely colors"
        assert graded.feedback.graded_at is not None

    def test_regrade_overwrites_feedback(self, service, classroom, lessons, students):
        submitted = submit(service, classroom, lessons[0], students[0])
        service.grade_submission(classroom.id, submitted.id, schemas.GradeRequest(grade=50))
        regraded = service.grade_submission(classroom.id, submitted.id, schemas.GradeRequest(grade=75, comment="Better"))

        assert regraded.feedback.grade == 75
        assert regraded.feedback.comment == "Better"

    @pytest.mark.parametrize("grade", [-1, 101])
    def test_grade_out_of_range(self, service, classroom, lessons, students, grade):
        submitted = submit(service, classroom, lessons[0], students[0])
        with pytest.raises(InvalidGradeError):
            service.grade_submission(classroom.id, submitted.id, schemas.GradeRequest(grade=grade))

    def test_draft_can_be_graded(self, service, classroom, lessons, students):
        draft = save(service, classroom, lessons[0], students[0], 1, "half done")
        graded = service.grade_submission(classroom.id, draft.id, schemas.GradeRequest(grade=40, comment="Keep going"))

        assert graded.status == SubmissionStatus.graded
        assert graded.feedback.grade == 40
        assert graded.code == "half done"
        assert graded.version == draft.version + 1

    def test_draft_grade_still_checks_range(self, service, classroom, lessons, students):
        draft = save(service, classroom, lessons[0], students[0], 0)
        with pytest.raises(InvalidGradeError):
            service.grade_submission(classroom.id, draft.id, schemas.GradeRequest(grade=101))

    def test_grade_with_stale_version(self, service, classroom, lessons, students):
        submitted = submit(service, classroom, lessons[0], students[0])
        service.grade_submission(classroom.id, submitted.id, schemas.GradeRequest(grade=60))

        with pytest.raises(VersionConflictError):
            service.grade_submission(
                classroom.id, submitted.id,
                schemas.GradeRequest(grade=70, expected_version=submitted.version),
            )

    def test_bulk_grade(self, service, classroom, lessons, students):
        ids = [submit(service, classroom, lessons[0], student).id for student in students]
        graded = service.bulk_grade(
            classroom.id, schemas.BulkGradeRequest(submission_ids=ids + [ids[0]], grade=85, comment="Nice")
        )

        assert len(graded) == 2
        assert all(s.feedback.grade == 85 for s in graded)

    def test_bulk_grade_includes_drafts(self, service, classroom, lessons, students):
        submitted = submit(service, classroom, lessons[0], students[0])
        draft = save(service, classroom, lessons[0], students[1], 0)

        graded = service.bulk_grade(
            classroom.id, schemas.BulkGradeRequest(submission_ids=[submitted.id, draft.id], grade=70)
        )

        assert [s.status for s in graded] == [SubmissionStatus.graded, SubmissionStatus.graded]

    def test_bulk_grade_unknown_id(self, service, gateway, classroom, lessons, students):
        submitted = submit(service, classroom, lessons[0], students[0])
        with pytest.raises(NotFoundError):
            service.bulk_grade(
                classroom.id, schemas.BulkGradeRequest(submission_ids=[submitted.id, "ghost"], grade=85)
            )
        assert gateway.get_submission(submitted.id).feedback is None
