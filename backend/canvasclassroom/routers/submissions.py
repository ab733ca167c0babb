"""Teacher-side submission review and grading."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from canvasclassroom import schemas
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import SubmissionService

router = APIRouter(prefix="/classes/{class_id}/submissions", tags=["Submissions"])


def get_submission_service(gateway: PersistenceGateway = Depends(get_gateway)) -> SubmissionService:
    return SubmissionService(gateway)


@router.get("", response_model=List[schemas.Submission])
async def list_submissions(
    lesson_id: Optional[str] = Query(None, alias="lessonId"),
    student_id: Optional[str] = Query(None, alias="studentId"),
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.list_submissions(classroom.id, lesson_id=lesson_id, student_id=student_id)


@router.post("/bulk-grade", response_model=List[schemas.Submission])
async def bulk_grade(
    data: schemas.BulkGradeRequest,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: SubmissionService = Depends(get_submission_service),
):
    """Grade several submissions with one grade and comment. All succeed or none are saved."""
    return service.bulk_grade(classroom.id, data)


@router.get("/{submission_id}", response_model=schemas.Submission)
async def get_submission(
    submission_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.get_submission(classroom.id, submission_id)


@router.post("/{submission_id}/grade", response_model=schemas.Submission)
async def grade_submission(
    submission_id: str,
    data: schemas.GradeRequest,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: SubmissionService = Depends(get_submission_service),
):
    return service.grade_submission(classroom.id, submission_id, data)
