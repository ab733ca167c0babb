"""Pydantic entity shapes exchanged by the gateway, services and API."""

from .base import CamelModel, PartialUpdate, UTCDateTime, as_utc
from .classroom import Classroom, ClassroomCreate, ClassroomUpdate, Enrollment, JoinClassRequest
from .curriculum import (
    Unit, UnitCreate, UnitUpdate, UnitReorder, UnitIds,
    LessonContent, LessonCreate, LessonUpdate, LessonPlan, LessonMove, LessonAssign,
    AppliedCurriculum, StudentLesson, TemplateInstantiate, LessonDuplicate,
)
from .roster import Student, StudentCreate, StudentUpdate, RosterView, CsvImport
from .submission import (
    StepHistory, Feedback, Submission, ProgressUpdate, SubmitRequest,
    GradeRequest, BulkGradeRequest, StepCheckRequest, StepCheckResult, HintRequest,
)
from .rubric import (
    RubricCriterion, Rubric, RubricCreate, RubricUpdate,
    FeedbackTemplate, FeedbackTemplateCreate, FeedbackTemplateUpdate,
)
from .communication import (
    Announcement, AnnouncementCreate, AnnouncementUpdate,
    HelpRequest, HelpRequestCreate, HelpStatusUpdate, HelpQueueEntry,
)
from .analytics import (
    OverallStats, LessonCompletion, LessonGrade, StudentProgress,
    ConceptMastery, StudentSummary, ClassAnalytics,
)

__all__ = [
    "CamelModel", "PartialUpdate", "UTCDateTime", "as_utc",
    "Classroom", "ClassroomCreate", "ClassroomUpdate", "Enrollment", "JoinClassRequest",
    "Unit", "UnitCreate", "UnitUpdate", "UnitReorder", "UnitIds",
    "LessonContent", "LessonCreate", "LessonUpdate", "LessonPlan", "LessonMove", "LessonAssign",
    "AppliedCurriculum", "StudentLesson", "TemplateInstantiate", "LessonDuplicate",
    "Student", "StudentCreate", "StudentUpdate", "RosterView", "CsvImport",
    "StepHistory", "Feedback", "Submission", "ProgressUpdate", "SubmitRequest",
    "GradeRequest", "BulkGradeRequest", "StepCheckRequest", "StepCheckResult", "HintRequest",
    "RubricCriterion", "Rubric", "RubricCreate", "RubricUpdate",
    "FeedbackTemplate", "FeedbackTemplateCreate", "FeedbackTemplateUpdate",
    "Announcement", "AnnouncementCreate", "AnnouncementUpdate",
    "HelpRequest", "HelpRequestCreate", "HelpStatusUpdate", "HelpQueueEntry",
    "OverallStats", "LessonCompletion", "LessonGrade", "StudentProgress",
    "ConceptMastery", "StudentSummary", "ClassAnalytics",
]
