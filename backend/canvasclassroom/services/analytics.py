"""
Class and student analytics, and the gradebook.

Only active students count: archived students drop out of every
denominator and their submissions are ignored.
"""

import csv
import io
from collections import defaultdict
from datetime import datetime, UTC
from typing import Any, Dict, List

from .. import schemas
from ..errors import NotFoundError
from ..gateway import PersistenceGateway
from ..models.enums import SubmissionStatus

MASTERY_PASS_GRADE = 70
MASTERY_TOP_TAGS = 8
STRUGGLING_RATE = 50
STRUGGLING_LIMIT = 5
MS_PER_MINUTE = 60000

COMPLETE = (SubmissionStatus.submitted, SubmissionStatus.graded)
UNGRADED_LABELS = {
    SubmissionStatus.submitted: "Submitted",
    SubmissionStatus.draft: "In Progress",
}
NOT_STARTED = "Not Started"


def _pct(part: float, whole: float) -> int:
    return round(part / whole * 100) if whole else 0


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0


def _grade(submission: schemas.Submission):
    if submission.status == SubmissionStatus.graded and submission.feedback is not None:
        return submission.feedback.grade
    return None


def overall_stats(
    lessons: List[schemas.LessonPlan],
    submissions: List[schemas.Submission],
    student_count: int,
) -> schemas.OverallStats:
    completed = [s for s in submissions if s.status in COMPLETE]
    grades = [g for g in map(_grade, submissions) if g is not None]
    times = [s.time_spent for s in submissions if s.time_spent]
    return schemas.OverallStats(
        total_lessons=len(lessons),
        total_submissions=len(submissions),
        completed_submissions=len(completed),
        completion_rate=_pct(len(completed), len(lessons) * student_count),
        average_grade=round(_mean(grades)),
        avg_time_spent=round(_mean(times) / MS_PER_MINUTE),
        graded_count=len([s for s in submissions if s.status == SubmissionStatus.graded]),
        active_students=student_count,
    )


def lesson_completion(
    lessons: List[schemas.LessonPlan],
    submissions: List[schemas.Submission],
    student_count: int,
) -> List[schemas.LessonCompletion]:
    by_lesson = defaultdict(list)
    for submission in submissions:
        by_lesson[submission.lesson_id].append(submission)
    rows = []
    for lesson in lessons:
        subs = by_lesson[lesson.id]
        completed = len([s for s in subs if s.status in COMPLETE])
        rows.append(schemas.LessonCompletion(
            lesson_id=lesson.id,
            title=lesson.title,
            completed=completed,
            total=student_count,
            rate=_pct(completed, student_count),
            pending=len([s for s in subs if s.status == SubmissionStatus.draft]),
        ))
    return rows


def lesson_grades(
    lessons: List[schemas.LessonPlan], submissions: List[schemas.Submission]
) -> List[schemas.LessonGrade]:
    """Average grade per lesson, for lessons with at least one grade."""
    grades = defaultdict(list)
    for submission in submissions:
        grade = _grade(submission)
        if grade is not None:
            grades[submission.lesson_id].append(grade)
    return [
        schemas.LessonGrade(
            lesson_id=lesson.id,
            title=lesson.title,
            average=round(_mean(grades[lesson.id])),
            count=len(grades[lesson.id]),
        )
        for lesson in lessons if grades[lesson.id]
    ]


def struggling_lessons(completion: List[schemas.LessonCompletion]) -> List[schemas.LessonCompletion]:
    low = [row for row in completion if row.rate < STRUGGLING_RATE]
    return sorted(low, key=lambda row: row.rate)[:STRUGGLING_LIMIT]


def student_progress(
    students: List[schemas.Student],
    lessons: List[schemas.LessonPlan],
    submissions: List[schemas.Submission],
) -> List[schemas.StudentProgress]:
    completed = defaultdict(int)
    for submission in submissions:
        if submission.status in COMPLETE:
            completed[submission.student_id] += 1
    rows = [
        schemas.StudentProgress(
            student_id=student.id,
            name=student.name,
            completed=completed[student.id],
            total=len(lessons),
            progress=_pct(completed[student.id], len(lessons)),
        )
        for student in students
    ]
    return sorted(rows, key=lambda row: row.progress, reverse=True)


def concept_mastery(
    lessons: List[schemas.LessonPlan], submissions: List[schemas.Submission]
) -> List[schemas.ConceptMastery]:
    """Share of graded lessons per tag with a passing grade; the most-covered tags first."""
    lessons_by_id = {lesson.id: lesson for lesson in lessons}
    totals = defaultdict(int)
    passed = defaultdict(int)
    for submission in submissions:
        grade = _grade(submission)
        lesson = lessons_by_id.get(submission.lesson_id)
        if grade is None or lesson is None:
            continue
        for tag in lesson.tags:
            totals[tag] += 1
            if grade >= MASTERY_PASS_GRADE:
                passed[tag] += 1
    rows = [
        schemas.ConceptMastery(tag=tag, mastery=_pct(passed[tag], total), lessons=total)
        for tag, total in totals.items()
    ]
    return sorted(rows, key=lambda row: row.lessons, reverse=True)[:MASTERY_TOP_TAGS]


def student_summary(
    student_id: str,
    lessons: List[schemas.LessonPlan],
    submissions: List[schemas.Submission],
) -> schemas.StudentSummary:
    own = [s for s in submissions if s.student_id == student_id]
    completed = len([s for s in own if s.status in COMPLETE])
    grades = [g for g in map(_grade, own) if g is not None]
    total_time = sum(s.time_spent or 0 for s in own)
    attempts = [item for s in own for item in s.history.values()]
    return schemas.StudentSummary(
        student_id=student_id,
        completed=completed,
        total=len(lessons),
        avg_grade=round(_mean(grades)) if grades else None,
        avg_time=round(total_time / completed / MS_PER_MINUTE) if completed else 0,
        success_rate=_pct(len([a for a in attempts if a.passed]), len(attempts)) if attempts else None,
        concept_mastery=concept_mastery(lessons, own),
    )


def gradebook_rows(
    students: List[schemas.Student],
    lessons: List[schemas.LessonPlan],
    submissions: List[schemas.Submission],
    include_ungraded: bool = True,
) -> List[Dict[str, Any]]:
    """One row per student: identity, a column per lesson, Average and Completed."""
    by_pair = {(s.student_id, s.lesson_id): s for s in submissions}
    rows = []
    for student in students:
        row: Dict[str, Any] = {
            "Student Name": student.name,
            "Student ID": student.student_id or "",
            "Email": student.email or "",
        }
        grades = []
        for lesson in lessons:
            submission = by_pair.get((student.id, lesson.id))
            grade = _grade(submission) if submission else None
            if grade is not None:
                row[lesson.title] = grade
                grades.append(grade)
            elif not include_ungraded:
                row[lesson.title] = ""
            elif submission is not None:
                row[lesson.title] = UNGRADED_LABELS.get(submission.status, NOT_STARTED)
            else:
                row[lesson.title] = NOT_STARTED
        row["Average"] = round(_mean(grades)) if grades else "N/A"
        row["Completed"] = f"{len(grades)}/{len(lessons)}"
        rows.append(row)
    return rows


def gradebook_csv(rows: List[Dict[str, Any]]) -> str:
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


class AnalyticsService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    def _active_data(self, class_id: str):
        students = [s for s in self.gateway.list_class_students(class_id) if s.is_active]
        active_ids = {s.id for s in students}
        lessons = self.gateway.list_lessons(class_id)
        submissions = [
            s for s in self.gateway.list_submissions(class_id)
            if s.student_id in active_ids
        ]
        return students, lessons, submissions

    def class_analytics(self, class_id: str) -> schemas.ClassAnalytics:
        students, lessons, submissions = self._active_data(class_id)
        completion = lesson_completion(lessons, submissions, len(students))
        return schemas.ClassAnalytics(
            overview=overall_stats(lessons, submissions, len(students)),
            lesson_completion=completion,
            average_grades=lesson_grades(lessons, submissions),
            struggling_lessons=struggling_lessons(completion),
            student_progress=student_progress(students, lessons, submissions),
        )

    def student_summary(self, class_id: str, student_id: str) -> schemas.StudentSummary:
        students, lessons, submissions = self._active_data(class_id)
        if student_id not in {s.id for s in students}:
            raise NotFoundError("Student", student_id)
        return student_summary(student_id, lessons, submissions)

    def gradebook(self, class_id: str, include_ungraded: bool = True) -> List[Dict[str, Any]]:
        students, lessons, submissions = self._active_data(class_id)
        return gradebook_rows(students, lessons, submissions, include_ungraded)

    def gradebook_json(self, class_id: str, include_ungraded: bool = True) -> Dict[str, Any]:
        students, lessons, submissions = self._active_data(class_id)
        return {
            "exportDate": datetime.now(UTC).isoformat(),
            "students": gradebook_rows(students, lessons, submissions, include_ungraded),
            "lessons": [
                {"id": l.id, "title": l.title, "type": l.type.value, "difficulty": l.difficulty.value}
                for l in lessons
            ],
        }

    def gradebook_csv(self, class_id: str, include_ungraded: bool = True) -> str:
        return gradebook_csv(self.gradebook(class_id, include_ungraded))
