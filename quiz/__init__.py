"""Quiz Module - AI-generated quizzes with adaptive difficulty.

Architecture:
- models/: Enums, Pydantic schemas, PerformanceMetrics
- engine/: Parser, AdaptiveDifficultyEngine, ScoringEngine, SuggestionEngine, QuizEngine
- llm/: Completion providers, fallback gateway and factory
- storage/: apsw database and stores (users, quizzes, submissions, leaderboards)
- notifications/: Result emails
- prompts/: Prompt templates
"""

from .engine import (
    AdaptiveDifficultyEngine,
    QuizEngine,
    QuizScoringEngine,
    SuggestionEngine,
    parse_questions,
    parse_suggestions,
)
from .llm import CompletionGateway, GatewayFactory
from .models import DifficultyDistribution, DifficultyMode, Question, Quiz, QuizDifficulty, Submission
from .notifications import EmailNotifier
from .storage import Database, LeaderboardStore, QuizStore, SubmissionStore, UserStore

__all__ = [
    # Models
    "QuizDifficulty",
    "DifficultyMode",
    "DifficultyDistribution",
    "Question",
    "Quiz",
    "Submission",
    # Engines
    "parse_questions",
    "parse_suggestions",
    "AdaptiveDifficultyEngine",
    "QuizScoringEngine",
    "SuggestionEngine",
    "QuizEngine",
    # LLM
    "CompletionGateway",
    "GatewayFactory",
    # Notifications
    "EmailNotifier",
    # Storage
    "Database",
    "UserStore",
    "QuizStore",
    "SubmissionStore",
    "LeaderboardStore",
]
