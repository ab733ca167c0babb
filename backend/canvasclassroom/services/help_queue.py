"""Student help requests and the teacher's triage queue."""

import logging
from datetime import datetime, timedelta, UTC
from typing import List, Optional

from .. import schemas
from ..errors import InvalidTransitionError, NotFoundError
from ..gateway import PersistenceGateway
from ..models.enums import HelpRequestStatus
from .submissions import SubmissionService

logger = logging.getLogger(__name__)

URGENT_AFTER = timedelta(minutes=15)
ELEVATED_AFTER = timedelta(minutes=5)

STATUS_SEQUENCE = [
    HelpRequestStatus.pending,
    HelpRequestStatus.in_progress,
    HelpRequestStatus.resolved,
]
OPEN_STATUSES = (HelpRequestStatus.pending, HelpRequestStatus.in_progress)


def waited(request: schemas.HelpRequest, now: datetime) -> timedelta:
    return max(timedelta(0), now - request.created_at)


def priority_for(elapsed: timedelta) -> str:
    """Bucket on the exact wait; the displayed minutes are rounded down."""
    if elapsed > URGENT_AFTER:
        return "urgent"
    if elapsed >= ELEVATED_AFTER:
        return "elevated"
    return "normal"


def queue_entries(requests: List[schemas.HelpRequest], now: datetime) -> List[schemas.HelpQueueEntry]:
    """Oldest first, each with how long it has waited and its priority bucket."""
    entries = []
    for request in sorted(requests, key=lambda r: r.created_at):
        elapsed = waited(request, now)
        entries.append(schemas.HelpQueueEntry(
            **request.model_dump(),
            waiting_minutes=int(elapsed.total_seconds() // 60),
            priority=priority_for(elapsed),
        ))
    return entries


class HelpQueueService:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self.submissions = SubmissionService(gateway)

    def request_help(self, class_id: str, student_id: str, data: schemas.HelpRequestCreate) -> schemas.HelpRequest:
        self.submissions.require_lesson(class_id, data.lesson_id)
        self.submissions.require_enrolled(class_id, student_id)
        request = self.gateway.create_help_request(class_id, student_id, data, datetime.now(UTC))
        logger.info(f"Help requested by student {student_id} on lesson {data.lesson_id}")
        return request

    def queue(self, class_id: str, include_resolved: bool = False) -> List[schemas.HelpQueueEntry]:
        statuses: Optional[tuple] = None if include_resolved else OPEN_STATUSES
        requests = self.gateway.list_help_requests(class_id, statuses)
        return queue_entries(requests, datetime.now(UTC))

    def update_status(self, class_id: str, request_id: str, status: HelpRequestStatus) -> schemas.HelpRequest:
        """Move a request forward; resolving stamps ``resolved_at``."""
        request = self.gateway.get_help_request(request_id)
        if request is None or request.class_id != class_id:
            raise NotFoundError("Help request", request_id)
        if STATUS_SEQUENCE.index(status) <= STATUS_SEQUENCE.index(request.status):
            raise InvalidTransitionError("Help request", request.status.value, status.value)
        updates = {"status": status}
        if status == HelpRequestStatus.resolved:
            updates["resolved_at"] = datetime.now(UTC)
        return self.gateway.update_help_request(request_id, updates)
