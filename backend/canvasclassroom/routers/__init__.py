"""API routers, one per area of the classroom."""
from . import ai, classes, communication, curriculum, insights, library, roster, rubrics, student, submissions

__all__ = [
    'ai',
    'classes',
    'communication',
    'curriculum',
    'insights',
    'library',
    'roster',
    'rubrics',
    'student',
    'submissions',
]
