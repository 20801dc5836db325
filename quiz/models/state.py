"""Performance metrics derived from a user's recent submissions."""

from dataclasses import dataclass, field

from .enums import PerformanceTrend


@dataclass
class PerformanceMetrics:
    """Aggregate view of the most recent submissions.

    Attributes:
        recent_percentages: Per-submission correctness, oldest first
        average_recent_percentage: Simple mean of ``recent_percentages``
        overall_percentage: Correct answers over all answered questions
        trend: Direction between the first and second half of the sequence
        total_attempts: Number of submissions considered
        total_questions: Questions answered across those submissions
        total_correct: Correct answers across those submissions
    """

    recent_percentages: list[float] = field(default_factory=list)
    average_recent_percentage: float = 50.0
    overall_percentage: float = 50.0
    trend: PerformanceTrend = PerformanceTrend.STABLE
    total_attempts: int = 0
    total_questions: int = 0
    total_correct: int = 0
