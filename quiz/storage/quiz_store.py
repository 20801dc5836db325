"""Quiz Store - Persistence for generated quizzes."""

from __future__ import annotations

import json
import logging

from ..models.schemas import DifficultyDistribution, Question, Quiz
from .database import Database, from_db_time, to_db_time

logger = logging.getLogger(__name__)

_COLUMNS = (
    "quiz_id, user_id, created_by, grade, subject, difficulty, total_questions, "
    "max_score, questions, distribution, created_at"
)


class QuizStore:
    """Saves and loads quizzes keyed by ``quiz_id``.

    Questions and the distribution used to build the quiz are stored as
    JSON text columns; quizzes are immutable once saved.

    Example:
        >>> store = QuizStore(db)
        >>> await store.save(quiz)
        >>> loaded = await store.get(quiz.quiz_id)
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _row_to_quiz(row: tuple) -> Quiz:
        (
            quiz_id,
            user_id,
            created_by,
            grade,
            subject,
            difficulty,
            total_questions,
            max_score,
            questions,
            distribution,
            created_at,
        ) = row
        return Quiz(
            quiz_id=quiz_id,
            user_id=user_id,
            created_by=created_by,
            grade=grade,
            subject=subject,
            difficulty=difficulty,
            total_questions=total_questions,
            max_score=max_score,
            questions=[Question.model_validate(q) for q in json.loads(questions)],
            distribution=(
                DifficultyDistribution.model_validate_json(distribution) if distribution else None
            ),
            created_at=from_db_time(created_at),
        )

    async def save(self, quiz: Quiz) -> None:
        """Persist a new quiz.

        Args:
            quiz: Quiz to insert (``quiz_id`` must be new)
        """
        self.db.execute(
            f"INSERT INTO quizzes ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                quiz.quiz_id,
                quiz.user_id,
                quiz.created_by,
                quiz.grade,
                quiz.subject,
                quiz.difficulty.value,
                quiz.total_questions,
                quiz.max_score,
                json.dumps([q.model_dump(mode="json") for q in quiz.questions]),
                quiz.distribution.model_dump_json() if quiz.distribution else None,
                to_db_time(quiz.created_at),
            ),
        )
        logger.debug(f"Quiz saved: {quiz.quiz_id} ({quiz.total_questions} questions)")

    async def get(self, quiz_id: str) -> Quiz | None:
        """Load a quiz.

        Returns:
            Quiz if found, None otherwise
        """
        rows = self.db.execute(f"SELECT {_COLUMNS} FROM quizzes WHERE quiz_id = ?", (quiz_id,))
        if not rows:
            logger.debug(f"Quiz not found: {quiz_id}")
            return None
        return self._row_to_quiz(rows[0])
