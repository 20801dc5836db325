"""Quiz Models - Enums, Schemas and metrics."""

from .enums import DifficultyMode, PerformanceLevel, PerformanceTrend, QuizDifficulty, Timeframe
from .schemas import (
    AuthResponse,
    CreateQuizRequest,
    CreateQuizResponse,
    DifficultyDistribution,
    EvaluatedResponse,
    HintResponse,
    HistoryFilters,
    HistoryResponse,
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardQuery,
    LoginRequest,
    PublicQuestion,
    Question,
    Quiz,
    QuizSummary,
    RegisterRequest,
    RetryResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
    Submission,
    User,
    UserPublic,
)
from .state import PerformanceMetrics

__all__ = [
    # Enums
    "QuizDifficulty",
    "DifficultyMode",
    "PerformanceTrend",
    "PerformanceLevel",
    "Timeframe",
    # Records
    "User",
    "UserPublic",
    "Question",
    "PublicQuestion",
    "Quiz",
    "QuizSummary",
    "EvaluatedResponse",
    "Submission",
    "DifficultyDistribution",
    # Requests / responses
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "CreateQuizRequest",
    "CreateQuizResponse",
    "SubmitQuizRequest",
    "SubmitQuizResponse",
    "HintResponse",
    "HistoryFilters",
    "HistoryResponse",
    "RetryResponse",
    "LeaderboardEntry",
    "LeaderboardPage",
    "LeaderboardQuery",
    # Metrics
    "PerformanceMetrics",
]
