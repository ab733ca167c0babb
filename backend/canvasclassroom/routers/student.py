"""Student-facing routes: joining, the lesson runner, help and announcements.

Every route acts as the student named in the bearer token; class routes
also require an approved enrollment in the class.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from canvasclassroom import schemas
from canvasclassroom.ai import AICodeAnalysis, ContentGenerationClient
from canvasclassroom.ai.schemas import ErrorExplanation, ErrorExplanationRequest
from canvasclassroom.auth import StudentAccount, get_current_active_student
from canvasclassroom.deps import get_content_client, get_gateway, get_student_class
from canvasclassroom.errors import ContentUnavailableError
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import (
    AnnouncementService, HelpQueueService, RosterService, RunnerService, SubmissionService,
)

router = APIRouter(prefix="/student", tags=["Student"])


def get_runner_service(
    gateway: PersistenceGateway = Depends(get_gateway),
    client: ContentGenerationClient = Depends(get_content_client),
) -> RunnerService:
    return RunnerService(gateway, client)


def get_submission_service(gateway: PersistenceGateway = Depends(get_gateway)) -> SubmissionService:
    return SubmissionService(gateway)


@router.post("/join", response_model=schemas.Enrollment, status_code=status.HTTP_201_CREATED)
async def join_class(
    data: schemas.JoinClassRequest,
    student: StudentAccount = Depends(get_current_active_student),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Ask to join a class by its 6-digit code. The teacher approves the request."""
    return RosterService(gateway).join_by_code(student.student_id, data)


@router.get("/classes/{class_id}/lessons", response_model=List[schemas.StudentLesson])
async def list_lessons(
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: RunnerService = Depends(get_runner_service),
):
    """Lessons in unit order, flagged with whether the student can open them yet."""
    return service.student_lessons(classroom.id, student.student_id)


@router.get("/classes/{class_id}/submissions", response_model=List[schemas.Submission])
async def list_own_submissions(
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: SubmissionService = Depends(get_submission_service),
):
    service.require_enrolled(classroom.id, student.student_id)
    return service.list_submissions(classroom.id, student_id=student.student_id)


@router.put("/classes/{class_id}/lessons/{lesson_id}/progress", response_model=schemas.Submission)
async def update_progress(
    lesson_id: str,
    data: schemas.ProgressUpdate,
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: SubmissionService = Depends(get_submission_service),
):
    """Save draft code and the latest step outcome."""
    return service.update_progress(classroom.id, lesson_id, student.student_id, data)


@router.post(
    "/classes/{class_id}/lessons/{lesson_id}/submit",
    response_model=schemas.Submission,
    status_code=status.HTTP_201_CREATED,
)
async def submit_lesson(
    lesson_id: str,
    data: schemas.SubmitRequest,
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.submit_lesson(classroom.id, lesson_id, student.student_id, data)


@router.post("/classes/{class_id}/lessons/{lesson_id}/steps/{step_index}/check", response_model=schemas.StepCheckResult)
def check_step(
    lesson_id: str,
    step_index: int,
    data: schemas.StepCheckRequest,
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: RunnerService = Depends(get_runner_service),
):
    """Check a guided step and record the outcome."""
    return service.check_step(classroom.id, lesson_id, step_index, student.student_id, data)


@router.post("/classes/{class_id}/lessons/{lesson_id}/hint", response_model=AICodeAnalysis)
def get_hint(
    lesson_id: str,
    data: schemas.HintRequest,
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    service: RunnerService = Depends(get_runner_service),
):
    analysis = service.hint(classroom.id, lesson_id, student.student_id, data)
    if analysis is None:
        raise ContentUnavailableError("Could not analyze the code right now")
    return analysis


@router.post("/explain-error", response_model=ErrorExplanation)
def explain_error(
    data: ErrorExplanationRequest,
    student: StudentAccount = Depends(get_current_active_student),
    service: RunnerService = Depends(get_runner_service),
):
    explanation = service.explain_error(data.error, data.code)
    if explanation is None:
        raise ContentUnavailableError("Could not explain the error right now")
    return ErrorExplanation(explanation=explanation)


@router.post("/classes/{class_id}/help", response_model=schemas.HelpRequest, status_code=status.HTTP_201_CREATED)
async def request_help(
    data: schemas.HelpRequestCreate,
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    return HelpQueueService(gateway).request_help(classroom.id, student.student_id, data)


@router.get("/classes/{class_id}/announcements", response_model=List[schemas.Announcement])
async def list_announcements(
    student: StudentAccount = Depends(get_current_active_student),
    classroom: schemas.Classroom = Depends(get_student_class),
    gateway: PersistenceGateway = Depends(get_gateway),
):
    """Announcements that are published and addressed to this student."""
    return AnnouncementService(gateway).visible_to_student(classroom.id, student.student_id)
