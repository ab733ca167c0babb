"""Submission, progress and grading schemas."""

from typing import Optional

from pydantic import Field

from ..models.enums import SubmissionStatus
from .base import CamelModel, UTCDateTime


class StepHistory(CamelModel):
    step_index: int = Field(..., ge=0)
    student_input: str = ""
    feedback: str = ""
    passed: bool = False


class Feedback(CamelModel):
    grade: int
    comment: str = ""
    graded_at: UTCDateTime


class Submission(CamelModel):
    id: str
    lesson_id: str
    student_id: str
    class_id: str
    code: str = ""
    status: SubmissionStatus = SubmissionStatus.draft
    submitted_at: Optional[UTCDateTime] = None
    feedback: Optional[Feedback] = None
    current_step: Optional[int] = None
    text_answer: Optional[str] = None
    history: dict[int, StepHistory] = Field(default_factory=dict)
    time_spent: Optional[int] = None
    version: int = 1


class ProgressUpdate(CamelModel):
    code: str
    step_index: int = Field(..., ge=0)
    history_item: Optional[StepHistory] = None
    time_spent: Optional[int] = Field(None, ge=0)
    expected_version: Optional[int] = None


class SubmitRequest(CamelModel):
    code: str
    text_answer: Optional[str] = None
    time_spent: Optional[int] = Field(None, ge=0)


class GradeRequest(CamelModel):
    grade: int
    comment: str = ""
    expected_version: Optional[int] = None


class BulkGradeRequest(CamelModel):
    submission_ids: list[str] = Field(..., min_length=1)
    grade: int
    comment: str = ""


class StepCheckRequest(CamelModel):
    code: str
    student_input: str = ""
    time_spent: Optional[int] = Field(None, ge=0)


class StepCheckResult(CamelModel):
    outcome: StepHistory
    submission: Submission


class HintRequest(CamelModel):
    code: str
