"""Submission Store - Quiz attempts and history queries."""

from __future__ import annotations

import json
import logging
import uuid

from core.exceptions import NotFoundError

from ..models.schemas import EvaluatedResponse, HistoryFilters, Quiz, Submission, User
from .database import Database, from_db_time, to_db_time

logger = logging.getLogger(__name__)

_COLUMNS = (
    "s.submission_id, s.quiz_id, s.user_id, s.username, s.responses, s.score, "
    "s.suggestions, s.email_sent, s.submitted_at"
)


class SubmissionStore:
    """Saves submissions and answers history queries.

    A submission is written once per attempt; the only later change is
    flipping ``email_sent`` after a successful notification.

    Example:
        >>> store = SubmissionStore(db)
        >>> await store.save(submission)
        >>> recent = await store.recent_for_user("user-1", limit=10)
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def new_id() -> str:
        return f"sub-{uuid.uuid4().hex[:16]}"

    @staticmethod
    def _row_to_submission(row: tuple) -> Submission:
        (
            submission_id,
            quiz_id,
            user_id,
            username,
            responses,
            score,
            suggestions,
            email_sent,
            submitted_at,
        ) = row
        return Submission(
            submission_id=submission_id,
            quiz_id=quiz_id,
            user_id=user_id,
            username=username,
            responses=[EvaluatedResponse.model_validate(r) for r in json.loads(responses)],
            score=score,
            suggestions=json.loads(suggestions),
            email_sent=bool(email_sent),
            submitted_at=from_db_time(submitted_at),
        )

    # =========================================================================
    # WRITES
    # =========================================================================

    async def save(self, submission: Submission) -> Submission:
        self.db.execute(
            "INSERT INTO submissions (submission_id, quiz_id, user_id, username, responses, "
            "score, total, suggestions, email_sent, submitted_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                submission.submission_id,
                submission.quiz_id,
                submission.user_id,
                submission.username,
                json.dumps([r.model_dump() for r in submission.responses]),
                submission.score,
                submission.total,
                json.dumps(submission.suggestions),
                int(submission.email_sent),
                to_db_time(submission.submitted_at),
            ),
        )
        logger.debug(
            f"Submission saved: {submission.submission_id} "
            f"({submission.score}/{submission.total})"
        )
        return submission

    async def mark_email_sent(self, submission_id: str) -> None:
        with self.db.transaction():
            rows = self.db.execute(
                "SELECT 1 FROM submissions WHERE submission_id = ?", (submission_id,)
            )
            if not rows:
                raise NotFoundError(
                    message="Submission not found", details={"submission_id": submission_id}
                )
            self.db.execute(
                "UPDATE submissions SET email_sent = 1 WHERE submission_id = ?",
                (submission_id,),
            )

    async def create_retry(self, quiz: Quiz, user: User) -> Submission:
        """Record a fresh, empty attempt at ``quiz``.

        Empty attempts carry no responses and are ignored by the difficulty
        estimator and the leaderboards.
        """
        submission = Submission(
            submission_id=self.new_id(),
            quiz_id=quiz.quiz_id,
            user_id=user.user_id,
            username=user.username,
        )
        await self.save(submission)
        logger.info(f"Retry attempt created for {quiz.quiz_id} by {user.username}")
        return submission

    # =========================================================================
    # READS
    # =========================================================================

    async def get(self, submission_id: str) -> Submission | None:
        rows = self.db.execute(
            f"SELECT {_COLUMNS} FROM submissions s WHERE s.submission_id = ?",
            (submission_id,),
        )
        return self._row_to_submission(rows[0]) if rows else None

    async def recent_for_user(
        self, user_id: str, limit: int = 10, subject: str | None = None
    ) -> list[Submission]:
        """Most recent submissions first, optionally for one subject.

        Args:
            user_id: Owner of the submissions
            limit: Maximum rows returned
            subject: Only submissions whose quiz has this subject
        """
        sql = f"SELECT {_COLUMNS} FROM submissions s"
        params: list = []
        if subject:
            sql += " JOIN quizzes q ON q.quiz_id = s.quiz_id WHERE s.user_id = ? AND q.subject = ? COLLATE NOCASE"
            params += [user_id, subject]
        else:
            sql += " WHERE s.user_id = ?"
            params.append(user_id)
        sql += " ORDER BY s.submitted_at DESC LIMIT ?"
        params.append(limit)

        rows = self.db.execute(sql, tuple(params))
        return [self._row_to_submission(row) for row in rows]

    async def history(self, user_id: str, filters: HistoryFilters) -> list[Submission]:
        """Submissions of a user, newest first, narrowed by ``filters``."""
        conditions = ["s.user_id = ?"]
        params: list = [user_id]

        if filters.grade is not None:
            conditions.append("q.grade = ?")
            params.append(filters.grade)
        if filters.subject:
            conditions.append("q.subject = ? COLLATE NOCASE")
            params.append(filters.subject)
        if filters.min_marks is not None:
            conditions.append("s.score >= ?")
            params.append(filters.min_marks)
        if filters.max_marks is not None:
            conditions.append("s.score <= ?")
            params.append(filters.max_marks)
        if filters.date_from is not None:
            conditions.append("s.submitted_at >= ?")
            params.append(to_db_time(filters.date_from))
        if filters.date_to is not None:
            conditions.append("s.submitted_at <= ?")
            params.append(to_db_time(filters.date_to))

        sql = (
            f"SELECT {_COLUMNS} FROM submissions s "
            "JOIN quizzes q ON q.quiz_id = s.quiz_id "
            f"WHERE {' AND '.join(conditions)} "
            "ORDER BY s.submitted_at DESC"
        )
        rows = self.db.execute(sql, tuple(params))
        return [self._row_to_submission(row) for row in rows]
