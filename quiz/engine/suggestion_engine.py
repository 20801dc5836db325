"""Suggestion Engine - AI study suggestions and hints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models.schemas import EvaluatedResponse, Question
from ..prompts import build_hint_prompt, build_suggestion_prompt
from .parser import REQUIRED_SUGGESTIONS, parse_suggestions

if TYPE_CHECKING:
    from ..llm.gateway import CompletionGateway

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Asks the suggestion and hint chains for short study advice.

    Suggestions come from the first provider whose output holds three
    qualifying lines; ``AllProvidersExhaustedError`` propagates so the
    caller decides how to surface it.
    """

    def __init__(self, suggestion_gateway: CompletionGateway, hint_gateway: CompletionGateway):
        self.suggestion_gateway = suggestion_gateway
        self.hint_gateway = hint_gateway

    async def suggestions_for(self, responses: list[EvaluatedResponse], score: int) -> list[str]:
        """Three suggestions tailored to the incorrect responses.

        Args:
            responses: Evaluated responses of the submission
            score: Number of correct responses

        Returns:
            Exactly three suggestion strings
        """
        mistakes = [
            {
                "question_id": r.question_id,
                "user_response": r.user_response,
                "correct_answer": r.correct_answer,
            }
            for r in responses
            if not r.is_correct
        ]
        prompt = build_suggestion_prompt(score, len(responses), mistakes)
        suggestions = await self.suggestion_gateway.generate(
            prompt,
            REQUIRED_SUGGESTIONS,
            parser=parse_suggestions,
            min_count=REQUIRED_SUGGESTIONS,
        )
        logger.debug(f"Generated {len(suggestions)} suggestions ({len(mistakes)} mistakes)")
        return suggestions

    async def hint_for(self, question: Question) -> str:
        prompt = build_hint_prompt(question.text, question.options)
        return await self.hint_gateway.complete(prompt)
