"""SQLAlchemy models for CanvasClassroom."""

from .enums import (
    LessonType, Difficulty, EditorType, SubmissionStatus,
    EnrollmentStatus, HelpRequestStatus, StepKind,
)
from .classroom import Classroom, Enrollment
from .student import Student
from .curriculum import Unit, LessonPlan, classify_step, strip_step_tag
from .submission import Submission, FINAL_STEP
from .rubric import Rubric
from .communication import Announcement, HelpRequest, FeedbackTemplate

__all__ = [
    "Classroom",
    "Enrollment",
    "Student",
    "Unit",
    "LessonPlan",
    "Submission",
    "Rubric",
    "Announcement",
    "HelpRequest",
    "FeedbackTemplate",
    "LessonType",
    "Difficulty",
    "EditorType",
    "SubmissionStatus",
    "EnrollmentStatus",
    "HelpRequestStatus",
    "StepKind",
    "FINAL_STEP",
    "classify_step",
    "strip_step_tag",
]
