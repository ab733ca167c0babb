"""Analytics read models."""

from typing import Optional

from .base import CamelModel


class OverallStats(CamelModel):
    total_lessons: int
    total_submissions: int
    completed_submissions: int
    completion_rate: int
    average_grade: int
    avg_time_spent: int
    graded_count: int
    active_students: int


class LessonCompletion(CamelModel):
    lesson_id: str
    title: str
    completed: int
    total: int
    rate: int
    pending: int


class LessonGrade(CamelModel):
    lesson_id: str
    title: str
    average: int
    count: int


class StudentProgress(CamelModel):
    student_id: str
    name: str
    completed: int
    total: int
    progress: int


class ConceptMastery(CamelModel):
    tag: str
    mastery: int
    lessons: int


class StudentSummary(CamelModel):
    student_id: str
    completed: int
    total: int
    avg_grade: Optional[int] = None
    avg_time: int
    success_rate: Optional[int] = None
    concept_mastery: list[ConceptMastery]


class ClassAnalytics(CamelModel):
    overview: OverallStats
    lesson_completion: list[LessonCompletion]
    average_grades: list[LessonGrade]
    struggling_lessons: list[LessonCompletion]
    student_progress: list[StudentProgress]
