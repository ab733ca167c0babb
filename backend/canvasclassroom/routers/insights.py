"""Class analytics and gradebook export."""
from enum import Enum

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from canvasclassroom import schemas
from canvasclassroom.deps import get_gateway, get_teacher_class
from canvasclassroom.gateway import PersistenceGateway
from canvasclassroom.services import AnalyticsService

router = APIRouter(prefix="/classes/{class_id}", tags=["Analytics"])


class GradebookFormat(str, Enum):
    json = "json"
    csv = "csv"


def get_analytics_service(gateway: PersistenceGateway = Depends(get_gateway)) -> AnalyticsService:
    return AnalyticsService(gateway)


@router.get("/analytics", response_model=schemas.ClassAnalytics)
async def class_analytics(
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Completion, grade and progress figures over active students."""
    return service.class_analytics(classroom.id)


@router.get("/analytics/students/{student_id}", response_model=schemas.StudentSummary)
async def student_summary(
    student_id: str,
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.student_summary(classroom.id, student_id)


@router.get("/gradebook")
async def gradebook(
    export_format: GradebookFormat = Query(GradebookFormat.json, alias="format"),
    include_ungraded: bool = Query(True, alias="includeUngraded"),
    classroom: schemas.Classroom = Depends(get_teacher_class),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """One row per active student with a column per lesson, as JSON or CSV."""
    if export_format == GradebookFormat.csv:
        return PlainTextResponse(
            service.gradebook_csv(classroom.id, include_ungraded),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="gradebook_{classroom.id}.csv"'},
        )
    return service.gradebook_json(classroom.id, include_ungraded)
