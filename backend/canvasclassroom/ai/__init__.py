"""Content generation through a hosted chat-completions model."""
from .client import ContentGenerationClient, clean_json
from .schemas import (
    AILessonResponse, AICodeAnalysis, AIStepValidation,
    CurriculumSuggestion, CurriculumUnitRequest, CurriculumLessonRequest,
    FullCurriculumResponse,
)

__all__ = [
    'ContentGenerationClient',
    'clean_json',
    'AILessonResponse',
    'AICodeAnalysis',
    'AIStepValidation',
    'CurriculumSuggestion',
    'CurriculumUnitRequest',
    'CurriculumLessonRequest',
    'FullCurriculumResponse',
]
