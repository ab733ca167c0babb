"""Roster and enrollment router."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from canvasclassroom import schemas
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.models.enums import EnrollmentStatus
from canvasclassroom.services import RosterService

router = APIRouter(prefix="/classes/{class_id}", tags=["Roster"])


def get_roster_service(gateway: PersistenceGateway = Depends(get_gateway)) -> RosterService:
    return RosterService(gateway)


@router.get("/students", response_model=schemas.RosterView)
async def get_roster(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    """Enrolled students split into active and archived."""
    return service.roster(classroom.id)


@router.post("/students", response_model=schemas.Student, status_code=status.HTTP_201_CREATED)
async def add_student(
    data: schemas.StudentCreate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.add_student(classroom.id, data)


@router.post("/students/import", response_model=List[schemas.Student], status_code=status.HTTP_201_CREATED)
async def import_students(
    data: schemas.CsvImport,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    """Import students from CSV text with a header row (name, email, student id)."""
    return service.import_csv(classroom.id, data.csv_data)


@router.get("/students/export", response_class=PlainTextResponse)
async def export_students(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return PlainTextResponse(
        service.export_csv(classroom.id),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="roster_{classroom.id}.csv"'},
    )


@router.patch("/students/{student_id}", response_model=schemas.Student)
async def update_student(
    student_id: str,
    data: schemas.StudentUpdate,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.update_student(classroom.id, student_id, data)


@router.post("/students/{student_id}/archive", response_model=schemas.Student)
async def archive_student(
    student_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    """Remove a student from the active roster. Their work is kept."""
    return service.archive_student(classroom.id, student_id)


@router.post("/students/{student_id}/restore", response_model=schemas.Student)
async def restore_student(
    student_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.restore_student(classroom.id, student_id)


@router.get("/enrollments", response_model=List[schemas.Enrollment])
async def list_enrollments(
    enrollment_status: Optional[EnrollmentStatus] = Query(None, alias="status"),
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.list_enrollments(classroom.id, enrollment_status)


@router.post("/enrollments/{enrollment_id}/approve", response_model=schemas.Enrollment)
async def approve_enrollment(
    enrollment_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.approve_enrollment(classroom.id, enrollment_id)


@router.post("/enrollments/{enrollment_id}/reject", response_model=schemas.Enrollment)
async def reject_enrollment(
    enrollment_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: RosterService = Depends(get_roster_service),
):
    return service.reject_enrollment(classroom.id, enrollment_id)
