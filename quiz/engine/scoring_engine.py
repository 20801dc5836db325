"""Quiz Scoring Engine - Answer evaluation and performance levels."""

from ..models.enums import PerformanceLevel
from ..models.schemas import EvaluatedResponse, Quiz


class QuizScoringEngine:
    """Scores a submission against the stored correct answers.

    A response is correct when it equals the stored answer text after
    surrounding whitespace is stripped from both sides; beyond that the
    comparison is exact and case-sensitive. Answers for question ids the
    quiz does not contain are recorded as incorrect with ``"Unknown"`` as the
    correct answer.

    Performance levels:
        - >= 80%: Excellent
        - 60-79%: Good Job
        - 40-59%: Keep Practicing
        - < 40%: Need More Study

    Example:
        >>> engine = QuizScoringEngine()
        >>> level, title, color = engine.performance_level(85.0)
        >>> print(title)  # "Excellent! 🏆"
    """

    UNKNOWN_ANSWER = "Unknown"

    # (threshold, level, title, color)
    LEVEL_THRESHOLDS = [
        (80, PerformanceLevel.EXCELLENT, "Excellent! 🏆", "#4CAF50"),
        (60, PerformanceLevel.GOOD, "Good Job! 👍", "#FF9800"),
        (40, PerformanceLevel.PRACTICING, "Keep Practicing! 📚", "#FF5722"),
        (0, PerformanceLevel.NEEDS_STUDY, "Need More Study 💪", "#F44336"),
    ]

    def performance_level(self, percentage: float) -> tuple[PerformanceLevel, str, str]:
        """Return ``(level, title, color)`` for a percentage (0-100)."""
        for threshold, level, title, color in self.LEVEL_THRESHOLDS:
            if percentage >= threshold:
                return level, title, color
        return self.LEVEL_THRESHOLDS[-1][1:4]

    def evaluate_answer(self, quiz: Quiz, question_id: str, user_response: str) -> EvaluatedResponse:
        question = quiz.get_question(question_id)
        if question is None:
            return EvaluatedResponse(
                question_id=question_id,
                user_response=user_response,
                correct_answer=self.UNKNOWN_ANSWER,
                is_correct=False,
            )

        return EvaluatedResponse(
            question_id=question_id,
            user_response=user_response,
            correct_answer=question.correct_answer,
            is_correct=user_response.strip() == question.correct_answer.strip(),
        )

    def evaluate(self, quiz: Quiz, responses: dict[str, str]) -> tuple[list[EvaluatedResponse], int]:
        """Evaluate every submitted answer.

        Args:
            quiz: Stored quiz
            responses: Answer text keyed by question id

        Returns:
            Tuple of (evaluated responses, number correct)
        """
        evaluated = [
            self.evaluate_answer(quiz, question_id, str(answer))
            for question_id, answer in responses.items()
        ]
        score = sum(1 for r in evaluated if r.is_correct)
        return evaluated, score

    @staticmethod
    def percentage(score: int, total: int) -> float:
        return round(score / total * 100, 1) if total > 0 else 0.0
