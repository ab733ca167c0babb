"""Shared enums for models, schemas and services."""
import enum


class LessonType(enum.Enum):
    lesson = "Lesson"
    assignment = "Assignment"


class Difficulty(enum.Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"


class EditorType(enum.Enum):
    p5 = "p5"
    scratch = "scratch"


class SubmissionStatus(enum.Enum):
    """Forward-only progression of a student's work on a lesson."""
    draft = "Draft"
    submitted = "Submitted"
    graded = "Graded"


class EnrollmentStatus(enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class HelpRequestStatus(enum.Enum):
    """Forward-only progression of a help request."""
    pending = "pending"
    in_progress = "in-progress"
    resolved = "resolved"


class StepKind(enum.Enum):
    """How the student runner checks a lesson step."""
    observation = "observation"
    reflection = "reflection"
    code = "code"
