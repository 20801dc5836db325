"""Leaderboard Store - SQL aggregation over submissions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from ..models.enums import Timeframe
from ..models.schemas import LeaderboardEntry, LeaderboardPage, LeaderboardQuery
from .database import Database, from_db_time, to_db_time

logger = logging.getLogger(__name__)

TREND_WINDOW = 5

_AGGREGATE = """
SELECT
    s.user_id,
    MAX(s.username),
    SUM(s.score) AS total_score,
    COUNT(*) AS total_quizzes,
    MAX(s.score),
    MIN(s.score),
    AVG(s.score) AS average_score,
    MAX(s.submitted_at),
    SUM(CASE WHEN s.score = s.total THEN 1 ELSE 0 END),
    json_group_array(DISTINCT q.subject),
    json_group_array(DISTINCT q.grade),
    json_group_array(DISTINCT q.difficulty)
FROM submissions s
JOIN quizzes q ON q.quiz_id = s.quiz_id
WHERE {where}
GROUP BY s.user_id
ORDER BY total_score DESC, average_score DESC, total_quizzes DESC, s.user_id
"""


@dataclass
class BoardFilter:
    """Conditions shared by every board. Empty attempts never count."""

    timeframe: Timeframe = Timeframe.ALL
    subject: str | None = None
    grade: int | None = None
    difficulty: str | None = None
    user_id: str | None = None
    now: datetime | None = None
    conditions: list[str] = field(default_factory=list, init=False)
    params: list[Any] = field(default_factory=list, init=False)

    def __post_init__(self):
        self.conditions.append("s.total > 0")
        if self.timeframe.days is not None:
            since = (self.now or datetime.now(timezone.utc)) - timedelta(days=self.timeframe.days)
            self.conditions.append("s.submitted_at >= ?")
            self.params.append(to_db_time(since))
        if self.subject:
            self.conditions.append("q.subject = ? COLLATE NOCASE")
            self.params.append(self.subject)
        if self.grade is not None:
            self.conditions.append("q.grade = ?")
            self.params.append(self.grade)
        if self.difficulty:
            self.conditions.append("q.difficulty = ?")
            self.params.append(self.difficulty.upper())
        if self.user_id:
            self.conditions.append("s.user_id = ?")
            self.params.append(self.user_id)

    @property
    def where(self) -> str:
        return " AND ".join(self.conditions)


@dataclass
class _Aggregate:
    user_id: str
    username: str
    total_score: int
    total_quizzes: int
    max_score: int
    min_score: int
    average_score: float
    last_activity: datetime | None
    perfect_scores: int
    subjects: list[str]
    grades: list[int]
    difficulties: list[str]

    @classmethod
    def from_row(cls, row: tuple) -> _Aggregate:
        return cls(
            user_id=row[0],
            username=row[1],
            total_score=row[2],
            total_quizzes=row[3],
            max_score=row[4],
            min_score=row[5],
            average_score=row[6],
            last_activity=from_db_time(row[7]),
            perfect_scores=row[8],
            subjects=sorted(json.loads(row[9])),
            grades=sorted(json.loads(row[10])),
            difficulties=sorted(json.loads(row[11])),
        )

    @property
    def consistency(self) -> float:
        """1 - (max - min) / max; higher means steadier scores."""
        spread = (self.max_score - self.min_score) / (self.max_score or 1)
        return round(1 - spread, 2)

    @property
    def perfect_score_rate(self) -> float:
        return round(self.perfect_scores / self.total_quizzes * 100, 1)

    def entry(self, rank: int, **extra: Any) -> LeaderboardEntry:
        return LeaderboardEntry(
            rank=rank,
            user_id=self.user_id,
            username=self.username,
            total_score=self.total_score,
            total_quizzes=self.total_quizzes,
            max_score=self.max_score,
            average_score=round(self.average_score, 2),
            last_activity=self.last_activity,
            **extra,
        )


def score_trend(scores: list[int]) -> float:
    """Mean of the two newest minus mean of the two oldest of ``scores``.

    ``scores`` is ordered newest first and holds at most five items.
    """
    if len(scores) < 2:
        return 0.0
    newest, oldest = scores[:2], scores[-2:]
    return round(sum(newest) / len(newest) - sum(oldest) / len(oldest), 2)


def trend_label(value: float) -> str:
    if value > 0:
        return "improving"
    if value < 0:
        return "declining"
    return "stable"


class LeaderboardStore:
    """Ranked boards computed on demand from the submissions table.

    Example:
        >>> store = LeaderboardStore(db)
        >>> page = await store.global_board(LeaderboardQuery(limit=5))
        >>> page.leaderboard[0].rank
        1
    """

    def __init__(self, db: Database):
        self.db = db

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _aggregate(
        self, board: BoardFilter, limit: int | None = None, offset: int = 0
    ) -> list[_Aggregate]:
        sql = _AGGREGATE.format(where=board.where)
        params = list(board.params)
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params += [limit, offset]
        return [_Aggregate.from_row(row) for row in self.db.execute(sql, tuple(params))]

    def _recent_scores(self, board: BoardFilter, user_id: str) -> list[int]:
        rows = self.db.execute(
            "SELECT s.score FROM submissions s JOIN quizzes q ON q.quiz_id = s.quiz_id "
            f"WHERE {board.where} AND s.user_id = ? "
            "ORDER BY s.submitted_at DESC LIMIT ?",
            (*board.params, user_id, TREND_WINDOW),
        )
        return [row[0] for row in rows]

    @staticmethod
    def _page(
        entries: list[LeaderboardEntry], query: LeaderboardQuery, **filters: Any
    ) -> LeaderboardPage:
        return LeaderboardPage(
            leaderboard=entries,
            filters={
                **filters,
                "timeframe": query.timeframe.value,
                "limit": query.limit,
                "offset": query.offset,
            },
            metadata={"count": len(entries), "has_more": len(entries) == query.limit},
        )

    # =========================================================================
    # BOARDS
    # =========================================================================

    async def global_board(self, query: LeaderboardQuery) -> LeaderboardPage:
        """Top performers across every subject and grade."""
        board = BoardFilter(timeframe=query.timeframe)
        rows = self._aggregate(board, query.limit, query.offset)
        entries = [
            row.entry(query.offset + i + 1, consistency=row.consistency)
            for i, row in enumerate(rows)
        ]
        return self._page(entries, query)

    async def subject_board(
        self,
        subject: str,
        query: LeaderboardQuery,
        grade: int | None = None,
        difficulty: str | None = None,
    ) -> LeaderboardPage:
        """Ranking within one subject, with each user's recent trend."""
        board = BoardFilter(
            timeframe=query.timeframe, subject=subject, grade=grade, difficulty=difficulty
        )
        entries = []
        for i, row in enumerate(self._aggregate(board, query.limit, query.offset)):
            trend = score_trend(self._recent_scores(board, row.user_id))
            entries.append(
                row.entry(
                    query.offset + i + 1,
                    subject=subject,
                    trend=trend_label(trend),
                    trend_value=trend,
                    grades_attempted=row.grades,
                    difficulties_attempted=row.difficulties,
                )
            )
        return self._page(
            entries,
            query,
            subject=subject,
            grade=grade if grade is not None else "all",
            difficulty=difficulty.upper() if difficulty else "all",
        )

    async def grade_board(
        self,
        grade: int,
        query: LeaderboardQuery,
        subject: str | None = None,
        difficulty: str | None = None,
    ) -> LeaderboardPage:
        board = BoardFilter(
            timeframe=query.timeframe, subject=subject, grade=grade, difficulty=difficulty
        )
        entries = [
            row.entry(
                query.offset + i + 1,
                grade=grade,
                subjects_attempted=row.subjects,
                difficulties_attempted=row.difficulties,
            )
            for i, row in enumerate(self._aggregate(board, query.limit, query.offset))
        ]
        return self._page(
            entries,
            query,
            grade=grade,
            subject=subject or "all",
            difficulty=difficulty.upper() if difficulty else "all",
        )

    async def difficulty_board(
        self,
        difficulty: str,
        query: LeaderboardQuery,
        subject: str | None = None,
        grade: int | None = None,
    ) -> LeaderboardPage:
        board = BoardFilter(
            timeframe=query.timeframe, subject=subject, grade=grade, difficulty=difficulty
        )
        entries = [
            row.entry(
                query.offset + i + 1,
                difficulty=difficulty.upper(),
                perfect_scores=row.perfect_scores,
                perfect_score_rate=row.perfect_score_rate,
                subjects_attempted=row.subjects,
                grades_attempted=row.grades,
            )
            for i, row in enumerate(self._aggregate(board, query.limit, query.offset))
        ]
        return self._page(
            entries,
            query,
            difficulty=difficulty.upper(),
            subject=subject or "all",
            grade=grade if grade is not None else "all",
        )

    # =========================================================================
    # USER RANK AND STATS
    # =========================================================================

    async def user_rank(self, user_id: str, timeframe: Timeframe = Timeframe.ALL) -> dict[str, Any]:
        """Position of one user globally, per subject and per grade."""
        everyone = self._aggregate(BoardFilter(timeframe=timeframe))
        position = next((i for i, row in enumerate(everyone) if row.user_id == user_id), None)

        own = self._aggregate(BoardFilter(timeframe=timeframe, user_id=user_id))
        stats = own[0] if own else None

        subject_ranks = []
        grade_ranks = []
        if stats is not None:
            for subject in stats.subjects:
                ranked = self._aggregate(BoardFilter(timeframe=timeframe, subject=subject))
                subject_ranks.append(self._rank_in(ranked, user_id, subject=subject))
            for grade in stats.grades:
                ranked = self._aggregate(BoardFilter(timeframe=timeframe, grade=grade))
                grade_ranks.append(self._rank_in(ranked, user_id, grade=grade))

        return {
            "user_id": user_id,
            "timeframe": timeframe.value,
            "global_rank": {
                "rank": position + 1 if position is not None else None,
                "total_users": len(everyone),
            },
            "subject_ranks": subject_ranks,
            "grade_ranks": grade_ranks,
            "user_stats": (
                {
                    "total_quizzes": stats.total_quizzes,
                    "total_score": stats.total_score,
                    "average_score": round(stats.average_score, 2),
                    "max_score": stats.max_score,
                    "subjects": stats.subjects,
                    "grades": stats.grades,
                    "last_activity": stats.last_activity,
                }
                if stats is not None
                else None
            ),
        }

    @staticmethod
    def _rank_in(ranked: list[_Aggregate], user_id: str, **key: Any) -> dict[str, Any]:
        for i, row in enumerate(ranked):
            if row.user_id == user_id:
                return {**key, "rank": i + 1, "total_users": len(ranked), "total_score": row.total_score}
        return {**key, "rank": None, "total_users": len(ranked), "total_score": 0}

    async def stats(self, timeframe: Timeframe = Timeframe.ALL) -> dict[str, Any]:
        """Overview, performance and activity figures for all submissions."""
        board = BoardFilter(timeframe=timeframe)
        rows = self.db.execute(
            "SELECT COUNT(*), COUNT(DISTINCT s.user_id), COUNT(DISTINCT q.subject), "
            "COUNT(DISTINCT q.grade), COUNT(DISTINCT q.difficulty), "
            "COALESCE(SUM(s.score), 0), AVG(s.score), MAX(s.score), "
            "COALESCE(SUM(CASE WHEN s.score = s.total THEN 1 ELSE 0 END), 0) "
            "FROM submissions s JOIN quizzes q ON q.quiz_id = s.quiz_id "
            f"WHERE {board.where}",
            tuple(board.params),
        )
        (
            submissions,
            users,
            subjects,
            grades,
            difficulties,
            total_score,
            average,
            max_score,
            perfect,
        ) = rows[0]

        return {
            "timeframe": timeframe.value,
            "overview": {
                "total_submissions": submissions,
                "unique_users": users,
                "subjects_available": subjects,
                "grades_available": grades,
                "difficulties_available": difficulties,
            },
            "performance": {
                "total_score": total_score,
                "average_score": round(average or 0, 2),
                "max_score": max_score or 0,
                "perfect_scores": perfect,
                "perfect_score_rate": round(perfect / submissions * 100, 1) if submissions else 0,
            },
            "activity": {
                "average_submissions_per_user": round(submissions / users, 2) if users else 0,
                "average_score_per_user": round(total_score / users, 2) if users else 0,
            },
        }
