"""Quiz Prompts - Templates for question, suggestion and hint prompts."""

from .templates import (
    build_hint_prompt,
    build_question_prompt,
    build_suggestion_prompt,
)

__all__ = ["build_question_prompt", "build_suggestion_prompt", "build_hint_prompt"]
