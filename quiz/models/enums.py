"""Quiz Enums - Difficulty, trend, timeframe and performance levels."""

from enum import Enum


class QuizDifficulty(str, Enum):
    """Difficulty of a single question."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class DifficultyMode(str, Enum):
    """Difficulty requested for a whole quiz."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    ADAPTIVE = "ADAPTIVE"  # split computed from the user's history


class PerformanceTrend(str, Enum):
    """Direction of recent scores (first half vs second half)."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class Timeframe(str, Enum):
    """Leaderboard time windows."""

    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int | None:
        return {"week": 7, "month": 30, "year": 365}.get(self.value)


class PerformanceLevel(str, Enum):
    """Result bands shown to the user and in the results email."""

    EXCELLENT = "excellent"  # >= 80%
    GOOD = "good"  # 60-79%
    PRACTICING = "keep_practicing"  # 40-59%
    NEEDS_STUDY = "needs_study"  # < 40%
