"""Adaptive Difficulty Engine - Easy/medium/hard split from recent scores."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models.enums import DifficultyMode, PerformanceTrend, QuizDifficulty
from ..models.schemas import DifficultyDistribution, Submission
from ..models.state import PerformanceMetrics

if TYPE_CHECKING:
    from ..storage.submission_store import SubmissionStore

logger = logging.getLogger(__name__)


def round_half_up(numerator: int, denominator: int = 100) -> int:
    """Integer ``numerator / denominator`` rounded half-up, without floats."""
    return (2 * numerator + denominator) // (2 * denominator)


class AdaptiveDifficultyEngine:
    """Turns a user's recent submissions into a target question mix.

    Steps:
        1. No history: fixed 40/40/20 split
        2. Mean correctness of the last 10 answered submissions
        3. Trend from first half vs second half (needs 3+ points, +-10)
        4. Band lookup, with a 10 point shift in the outer bands
        5. Trend nudge of 5 points between easy and hard
        6. Clamp and renormalize to 100 (medium absorbs rounding)
        7. Convert to counts (medium absorbs rounding)

    Example:
        >>> engine = AdaptiveDifficultyEngine(submission_store)
        >>> dist = await engine.compute("user-1", "Mathematics", 10)
        >>> dist.easy + dist.medium + dist.hard
        10
    """

    HISTORY_LIMIT = 10
    TREND_THRESHOLD = 10.0
    TREND_MIN_POINTS = 3
    TREND_NUDGE = 5
    BAND_SHIFT = 10

    BALANCED = (40, 40, 20)

    # (min recent %, easy %, medium %, hard %)
    BANDS = [
        (80, 20, 40, 40),
        (60, 30, 50, 20),
        (40, 50, 35, 15),
        (0, 60, 30, 10),
    ]

    CLAMPS = {
        QuizDifficulty.EASY: (10, 70),
        QuizDifficulty.MEDIUM: (20, 60),
        QuizDifficulty.HARD: (5, 50),
    }

    MIN_COUNTS = {
        QuizDifficulty.EASY: 1,
        QuizDifficulty.MEDIUM: 1,
        QuizDifficulty.HARD: 0,
    }

    def __init__(self, submission_store: SubmissionStore | None = None):
        self.submission_store = submission_store

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    async def compute(
        self, user_id: str, subject: str | None, total_questions: int
    ) -> DifficultyDistribution:
        """Read the user's recent submissions and return the split.

        Args:
            user_id: User whose history drives the split
            subject: Restrict history to quizzes on this subject (None: all)
            total_questions: Requested quiz length (>= 1)

        Returns:
            Distribution whose counts sum to ``total_questions``
        """
        if self.submission_store is None:
            raise RuntimeError("AdaptiveDifficultyEngine needs a submission store")

        # Fetch extra rows: retry placeholders carry no answers and are skipped
        history = await self.submission_store.recent_for_user(
            user_id, limit=self.HISTORY_LIMIT * 2, subject=subject
        )
        distribution = self.from_history(history, total_questions)
        logger.info(
            f"Adaptive split for {user_id} ({subject or 'all subjects'}): "
            f"{distribution.easy}/{distribution.medium}/{distribution.hard}"
        )
        return distribution

    def from_history(
        self, submissions: list[Submission], total_questions: int
    ) -> DifficultyDistribution:
        """Split for submissions ordered most recent first."""
        if total_questions < 1:
            raise ValueError(f"total_questions must be >= 1, got {total_questions}")

        metrics = self.analyze_performance(submissions)
        if metrics.total_attempts == 0:
            easy, medium, hard = self.to_counts(self.BALANCED, total_questions)
            return DifficultyDistribution(
                easy=easy,
                medium=medium,
                hard=hard,
                reasoning="No previous quiz history - using balanced distribution",
            )

        percentages = self.target_percentages(metrics)
        easy, medium, hard = self.to_counts(percentages, total_questions)
        return DifficultyDistribution(
            easy=easy,
            medium=medium,
            hard=hard,
            reasoning=(
                f"Based on {metrics.average_recent_percentage:.1f}% recent performance "
                f"({metrics.trend.value} trend)"
            ),
        )

    @staticmethod
    def fixed(mode: DifficultyMode, total_questions: int) -> DifficultyDistribution:
        """All questions at one requested difficulty."""
        counts = {level: 0 for level in QuizDifficulty}
        counts[QuizDifficulty(mode.value)] = total_questions
        return DifficultyDistribution(
            easy=counts[QuizDifficulty.EASY],
            medium=counts[QuizDifficulty.MEDIUM],
            hard=counts[QuizDifficulty.HARD],
            reasoning=f"Fixed {mode.value} difficulty requested",
        )

    # =========================================================================
    # STEPS
    # =========================================================================

    def analyze_performance(self, submissions: list[Submission]) -> PerformanceMetrics:
        """Metrics over the most recent answered submissions.

        Args:
            submissions: Most recent first (as returned by the store)
        """
        answered = [s for s in submissions if s.total > 0][: self.HISTORY_LIMIT]
        if not answered:
            return PerformanceMetrics()

        # Chronological order so the second half is the most recent one
        sequence = [s.percentage for s in reversed(answered)]
        total_questions = sum(s.total for s in answered)
        total_correct = sum(s.score for s in answered)

        return PerformanceMetrics(
            recent_percentages=sequence,
            average_recent_percentage=sum(sequence) / len(sequence),
            overall_percentage=total_correct / total_questions * 100,
            trend=self.calculate_trend(sequence),
            total_attempts=len(answered),
            total_questions=total_questions,
            total_correct=total_correct,
        )

    def calculate_trend(self, sequence: list[float]) -> PerformanceTrend:
        """Compare the mean of the first half with the mean of the rest."""
        if len(sequence) < self.TREND_MIN_POINTS:
            return PerformanceTrend.STABLE

        middle = len(sequence) // 2
        first, second = sequence[:middle], sequence[middle:]
        change = sum(second) / len(second) - sum(first) / len(first)

        if change > self.TREND_THRESHOLD:
            return PerformanceTrend.IMPROVING
        if change < -self.TREND_THRESHOLD:
            return PerformanceTrend.DECLINING
        return PerformanceTrend.STABLE

    def band_percentages(self, metrics: PerformanceMetrics) -> tuple[int, int, int]:
        """Base triple for the band, including the outer-band shift."""
        score = metrics.average_recent_percentage
        for threshold, easy, medium, hard in self.BANDS:
            if score >= threshold:
                break

        if threshold == 80 and metrics.trend == PerformanceTrend.DECLINING:
            easy, hard = easy + self.BAND_SHIFT, hard - self.BAND_SHIFT
        elif threshold == 0 and metrics.trend == PerformanceTrend.IMPROVING:
            easy, hard = easy - self.BAND_SHIFT, hard + self.BAND_SHIFT

        return easy, medium, hard

    def target_percentages(self, metrics: PerformanceMetrics) -> tuple[int, int, int]:
        """Band triple, trend nudge, clamp and renormalize to exactly 100."""
        easy, medium, hard = self.band_percentages(metrics)

        if metrics.trend == PerformanceTrend.IMPROVING:
            easy, hard = easy - self.TREND_NUDGE, hard + self.TREND_NUDGE
        elif metrics.trend == PerformanceTrend.DECLINING:
            easy, hard = easy + self.TREND_NUDGE, hard - self.TREND_NUDGE

        easy = self._clamp(QuizDifficulty.EASY, easy)
        medium = self._clamp(QuizDifficulty.MEDIUM, medium)
        hard = self._clamp(QuizDifficulty.HARD, hard)

        total = easy + medium + hard
        if total != 100:
            easy = round_half_up(easy * 100, total)
            hard = round_half_up(hard * 100, total)
        return easy, 100 - easy - hard, hard

    def to_counts(self, percentages: tuple[int, int, int], total: int) -> tuple[int, int, int]:
        """Integer counts summing to ``total``.

        Easy and hard are rounded half-up and medium takes the remainder.
        Minimums (easy and medium >= 1) are borrowed from the largest other
        bucket still above its own minimum; when ``total`` is too small to
        honour every minimum the exact sum wins.
        """
        easy_pct, _, hard_pct = percentages
        counts = {
            QuizDifficulty.EASY: round_half_up(easy_pct * total),
            QuizDifficulty.HARD: round_half_up(hard_pct * total),
        }
        counts[QuizDifficulty.MEDIUM] = total - counts[QuizDifficulty.EASY] - counts[QuizDifficulty.HARD]

        for level in (QuizDifficulty.EASY, QuizDifficulty.MEDIUM):
            while counts[level] < self.MIN_COUNTS[level]:
                donors = [
                    other
                    for other in (QuizDifficulty.MEDIUM, QuizDifficulty.EASY, QuizDifficulty.HARD)
                    if other != level and counts[other] > self.MIN_COUNTS[other]
                ]
                if not donors:
                    break
                donor = max(donors, key=lambda d: counts[d])
                counts[donor] -= 1
                counts[level] += 1

        return (
            counts[QuizDifficulty.EASY],
            counts[QuizDifficulty.MEDIUM],
            counts[QuizDifficulty.HARD],
        )

    def _clamp(self, level: QuizDifficulty, value: int) -> int:
        low, high = self.CLAMPS[level]
        return max(low, min(high, value))
