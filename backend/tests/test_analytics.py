"""Tests for class analytics and the gradebook."""

import csv
import io

import pytest

from canvasclassroom import schemas
from canvasclassroom.errors import NotFoundError
from canvasclassroom.models.enums import SubmissionStatus
from canvasclassroom.services import AnalyticsService, RosterService, SubmissionService
from canvasclassroom.services.analytics import concept_mastery, gradebook_rows, struggling_lessons


@pytest.fixture
def graded_class(gateway, classroom, lessons, students):
    """Ada: lesson 0 graded 90, lesson 1 graded 60. Grace: lesson 0 submitted, lesson 1 draft."""
    service = SubmissionService(gateway)
    ada, grace = students

    def submit(lesson, student, time_spent):
        return service.submit_lesson(
            classroom.id, lesson.id, student.id,
            schemas.SubmitRequest(code="x", time_spent=time_spent),
        )

    first = submit(lessons[0], ada, 120000)
    second = submit(lessons[1], ada, 240000)
    service.grade_submission(classroom.id, first.id, schemas.GradeRequest(grade=90))
    service.grade_submission(classroom.id, second.id, schemas.GradeRequest(grade=60))
    submit(lessons[0], grace, 60000)
    service.update_progress(classroom.id, lessons[1].id, grace.id, schemas.ProgressUpdate(
        code="y",
        step_index=0,
        history_item=schemas.StepHistory(step_index=0, passed=False),
    ))
    return classroom


@pytest.fixture
def service(gateway):
    return AnalyticsService(gateway)


class TestClassAnalytics:
    def test_overview(self, service, graded_class):
        overview = service.class_analytics(graded_class.id).overview

        assert overview.total_lessons == 3
        assert overview.total_submissions == 4
        assert overview.completed_submissions == 3
        # 3 complete out of 3 lessons x 2 students
        assert overview.completion_rate == 50
        assert overview.average_grade == 75
        assert overview.graded_count == 2
        assert overview.avg_time_spent == 2
        assert overview.active_students == 2

    def test_lesson_completion_and_struggling(self, service, graded_class, lessons):
        analytics = service.class_analytics(graded_class.id)

        rows = {row.lesson_id: row for row in analytics.lesson_completion}
        assert rows[lessons[0].id].rate == 100
        assert rows[lessons[1].id].rate == 50
        assert rows[lessons[1].id].pending == 1
        assert rows[lessons[2].id].rate == 0
        assert [row.lesson_id for row in analytics.struggling_lessons] == [lessons[2].id]

    def test_average_grades_only_for_graded_lessons(self, service, graded_class, lessons):
        grades = service.class_analytics(graded_class.id).average_grades
        assert [(g.lesson_id, g.average) for g in grades] == [(lessons[0].id, 90), (lessons[1].id, 60)]

    def test_student_progress_sorted(self, service, graded_class, students):
        progress = service.class_analytics(graded_class.id).student_progress
        assert [(p.name, p.completed, p.progress) for p in progress] == [
            ("Ada Lovelace", 2, 67),
            ("Grace Hopper", 1, 33),
        ]

    def test_archived_students_are_excluded(self, service, gateway, graded_class, students):
        RosterService(gateway).archive_student(graded_class.id, students[0].id)

        overview = service.class_analytics(graded_class.id).overview
        assert overview.active_students == 1
        assert overview.total_submissions == 2
        assert overview.graded_count == 0

    def test_empty_class(self, service, classroom):
        overview = service.class_analytics(classroom.id).overview
        assert overview.completion_rate == 0
        assert overview.average_grade == 0


class TestStudentSummary:
    def test_summary(self, service, graded_class, students):
        summary = service.student_summary(graded_class.id, students[0].id)

        assert summary.completed == 2
        assert summary.total == 3
        assert summary.avg_grade == 75
        assert summary.avg_time == 3
        assert summary.success_rate is None

    def test_success_rate_from_history(self, service, graded_class, students):
        summary = service.student_summary(graded_class.id, students[1].id)
        assert summary.success_rate == 0
        assert summary.avg_grade is None

    def test_unknown_student(self, service, graded_class):
        with pytest.raises(NotFoundError):
            service.student_summary(graded_class.id, "ghost")


def test_concept_mastery_counts_passing_grades():
    lessons = [
        schemas.LessonPlan(id="l1", title="A", tags=["shapes", "color"]),
        schemas.LessonPlan(id="l2", title="B", tags=["shapes"]),
    ]

    def graded(lesson_id, grade):
        return schemas.Submission(
            id=lesson_id + "-s", lesson_id=lesson_id, student_id="s", class_id="c",
            status=SubmissionStatus.graded,
            feedback=schemas.Feedback(grade=grade, graded_at="2026-01-01T00:00:00Z"),
        )

    mastery = concept_mastery(lessons, [graded("l1", 80), graded("l2", 50)])
    assert [(m.tag, m.mastery, m.lessons) for m in mastery] == [("shapes", 50, 2), ("color", 100, 1)]


def test_struggling_lessons_keeps_worst_five():
    rows = [
        schemas.LessonCompletion(lesson_id=str(i), title=str(i), completed=0, total=10, rate=rate, pending=0)
        for i, rate in enumerate([40, 10, 60, 0, 30, 20, 45])
    ]
    assert [row.rate for row in struggling_lessons(rows)] == [0, 10, 20, 30, 40]


class TestGradebook:
    def test_rows(self, service, graded_class, lessons):
        rows = service.gradebook(graded_class.id)

        ada, grace = rows
        assert ada["Student Name"] == "Ada Lovelace"
        assert ada["Your First Canvas"] == 90
        assert ada["Bouncing Ball"] == "Not Started"
        assert ada["Average"] == 75
        assert ada["Completed"] == "2/3"
        assert grace["Your First Canvas"] == "Submitted"
        assert grace["Drawing Shapes"] == "In Progress"
        assert grace["Average"] == "N/A"
        assert grace["Completed"] == "0/3"

    def test_rows_without_ungraded_labels(self):
        student = schemas.Student(id="s1", name="Ada")
        lesson = schemas.LessonPlan(id="l1", title="Shapes")
        rows = gradebook_rows([student], [lesson], [], include_ungraded=False)
        assert rows[0]["Shapes"] == ""

    def test_csv(self, service, graded_class):
        reader = csv.DictReader(io.StringIO(service.gradebook_csv(graded_class.id)))
        rows = list(reader)
        assert reader.fieldnames[:3] == ["Student Name", "Student ID", "Email"]
        assert reader.fieldnames[-2:] == ["Average", "Completed"]
        assert rows[0]["Your First Canvas"] == "90"

    def test_json(self, service, graded_class, lessons):
        document = service.gradebook_json(graded_class.id)
        assert "exportDate" in document
        assert len(document["students"]) == 2
        assert [l["title"] for l in document["lessons"]] == [l.title for l in lessons]
