"""Quiz Engines - Business logic."""

from .parser import ParsedQuestion, parse_questions, parse_suggestions
from .difficulty_engine import AdaptiveDifficultyEngine
from .scoring_engine import QuizScoringEngine
from .suggestion_engine import SuggestionEngine
from .quiz_engine import QuizEngine

__all__ = [
    "ParsedQuestion",
    "parse_questions",
    "parse_suggestions",
    "AdaptiveDifficultyEngine",
    "QuizScoringEngine",
    "SuggestionEngine",
    "QuizEngine",
]
