"""Domain exceptions raised by the gateway and services.

Each exception carries the HTTP status the API answers with; the handler
registered in ``main`` does the translation.
"""


class ClassroomError(Exception):
    """Base exception for classroom domain errors."""
    status_code = 400

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or "Classroom error"
        super().__init__(self.message)


class NotFoundError(ClassroomError):
    """Raised when an entity does not exist or is outside the caller's scope."""
    status_code = 404

    def __init__(self, entity: str, entity_id, message: str = ""):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} not found: {entity_id}")


class ForbiddenError(ClassroomError):
    """Raised when a student is not allowed to act in a class."""
    status_code = 403


class InvalidTransitionError(ClassroomError):
    """Raised when a status change would move an entity backwards."""
    status_code = 409

    def __init__(self, entity: str, current, requested, message: str = ""):
        self.entity = entity
        self.current = current
        self.requested = requested
        super().__init__(message or f"{entity} cannot move from {current} to {requested}")


class VersionConflictError(ClassroomError):
    """Raised when a write was based on a stale version of a submission."""
    status_code = 409

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Submission was modified (expected version {expected}, found {actual})")


class InvalidGradeError(ClassroomError):
    """Raised when a grade falls outside 0-100."""
    status_code = 422

    def __init__(self, grade):
        self.grade = grade
        super().__init__(f"Grade must be between 0 and 100, got {grade}")


class ImportFormatError(ClassroomError):
    """Raised when a lesson import payload cannot be read."""
    status_code = 400


class InvalidRubricError(ClassroomError):
    """Raised when rubric criteria are malformed."""
    status_code = 422


class ContentUnavailableError(ClassroomError):
    """Raised when the content model returned no usable result."""
    status_code = 502
