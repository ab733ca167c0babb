"""
Content generation client.

Talks to an OpenRouter-compatible chat-completions endpoint. Every public
method returns a validated result or ``None``; failures are logged, never
raised, so callers only have to handle the missing result.

Example:
    >>> client = ContentGenerationClient()
    >>> plan = client.generate_lesson_plan("Loops", "Beginner", LessonType.lesson)
"""

import json
import logging
import os
import re
from typing import Iterable, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..models.enums import LessonType
from . import prompts
from .schemas import (
    AILessonResponse, AICodeAnalysis, AIStepValidation,
    CurriculumSuggestion, FullCurriculumResponse,
)

logger = logging.getLogger(__name__)

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "x-ai/grok-4.1-fast")
OPENROUTER_URL = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
OPENROUTER_TIMEOUT = float(os.getenv("OPENROUTER_TIMEOUT", "60"))

M = TypeVar("M", bound=BaseModel)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def clean_json(text: str) -> str:
    """Strip a markdown code fence wrapped around a JSON reply."""
    clean = text.strip()
    if clean.startswith("```"):
        clean = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", clean))
    return clean


class ContentGenerationClient:
    """Stateless wrapper around the chat-completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = OPENROUTER_API_KEY if api_key is None else api_key
        self.model = model or OPENROUTER_MODEL
        self.url = url or OPENROUTER_URL
        self.timeout = timeout or OPENROUTER_TIMEOUT

    def _complete(self, messages: list[dict], json_mode: bool = False) -> Optional[str]:
        """Send one chat request and return the reply text."""
        if not self.api_key:
            logger.error("OPENROUTER_API_KEY is not set; content generation is unavailable")
            return None

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": 0.7,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            response = requests.post(
                self.url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "HTTP-Referer": "https://canvasclassroom.app",
                    "X-Title": "CanvasClassroom",
                },
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error calling content model: {e}")
            return None

        if not response.ok:
            logger.error(f"Content model returned {response.status_code}: {response.text[:500]}")
            return None

        try:
            return response.json()["choices"][0]["message"]["content"] or None
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected reply from content model: {e}")
            return None

    def _parse(self, text: Optional[str], model: Type[M], label: str) -> Optional[M]:
        if not text:
            return None
        try:
            return model.model_validate(json.loads(clean_json(text)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse {label} reply: {e}")
            return None

    def generate_lesson_plan(
        self,
        topic: str,
        level: str,
        lesson_type: LessonType,
        previous_context: str = "",
    ) -> Optional[AILessonResponse]:
        messages = prompts.lesson_plan_messages(topic, level, lesson_type, previous_context)
        return self._parse(self._complete(messages, json_mode=True), AILessonResponse, "lesson plan")

    def analyze_code(self, code: str, objective: str) -> Optional[AICodeAnalysis]:
        messages = prompts.code_analysis_messages(code, objective)
        return self._parse(self._complete(messages, json_mode=True), AICodeAnalysis, "code analysis")

    def validate_step(self, student_input: str, instruction: str) -> Optional[AIStepValidation]:
        messages = prompts.step_validation_messages(student_input, instruction)
        return self._parse(self._complete(messages, json_mode=True), AIStepValidation, "step validation")

    def explain_error(self, error: str, code: str) -> Optional[str]:
        """Plain-text explanation of a runtime error."""
        return self._complete(prompts.error_explanation_messages(error, code))

    def suggest_curriculum(self, lessons: Iterable) -> Optional[list[CurriculumSuggestion]]:
        """Suggest next topics; accepts ``{"suggestions": [...]}`` or a bare list."""
        text = self._complete(prompts.curriculum_suggestion_messages(lessons), json_mode=True)
        if not text:
            return None
        try:
            parsed = json.loads(clean_json(text))
            if isinstance(parsed, dict) and isinstance(parsed.get("suggestions"), list):
                items = parsed["suggestions"]
            elif isinstance(parsed, list):
                items = parsed
            else:
                logger.error("Curriculum suggestion reply has no suggestions list")
                return None
            return [CurriculumSuggestion.model_validate(item) for item in items]
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse curriculum suggestion reply: {e}")
            return None

    def generate_full_curriculum(self, theme: str, duration: str) -> Optional[FullCurriculumResponse]:
        messages = prompts.full_curriculum_messages(theme, duration)
        return self._parse(self._complete(messages, json_mode=True), FullCurriculumResponse, "curriculum")
