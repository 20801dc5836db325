"""Leaderboard endpoints - public rankings computed from submissions."""

from fastapi import APIRouter, Depends, Path, Query

import app_state
from quiz.models.enums import DifficultyMode, Timeframe
from quiz.models.schemas import LeaderboardPage, LeaderboardQuery
from quiz.storage import LeaderboardStore
from utils.validators import validate_identifier

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


def get_leaderboard_store() -> LeaderboardStore:
    return app_state.get_leaderboard_store()


def board_query(
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    timeframe: Timeframe = Timeframe.ALL,
) -> LeaderboardQuery:
    """Pagination and time window shared by every board."""
    return LeaderboardQuery(limit=limit, offset=offset, timeframe=timeframe)


# =============================================================================
# BOARDS
# =============================================================================


@router.get("/global", response_model=LeaderboardPage, response_model_exclude_none=True)
async def global_leaderboard(
    query: LeaderboardQuery = Depends(board_query),
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    """Top performers across all subjects and grades."""
    return await store.global_board(query)


@router.get(
    "/subject/{subject}", response_model=LeaderboardPage, response_model_exclude_none=True
)
async def subject_leaderboard(
    subject: str = Path(min_length=1, max_length=100),
    grade: int | None = Query(default=None, ge=1, le=12),
    difficulty: DifficultyMode | None = None,
    query: LeaderboardQuery = Depends(board_query),
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    """Ranking within one subject, with each user's recent trend."""
    return await store.subject_board(
        subject, query, grade=grade, difficulty=difficulty.value if difficulty else None
    )


@router.get("/grade/{grade}", response_model=LeaderboardPage, response_model_exclude_none=True)
async def grade_leaderboard(
    grade: int = Path(ge=1, le=12),
    subject: str | None = Query(default=None, max_length=100),
    difficulty: DifficultyMode | None = None,
    query: LeaderboardQuery = Depends(board_query),
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    return await store.grade_board(
        grade, query, subject=subject, difficulty=difficulty.value if difficulty else None
    )


@router.get(
    "/difficulty/{difficulty}",
    response_model=LeaderboardPage,
    response_model_exclude_none=True,
)
async def difficulty_leaderboard(
    difficulty: DifficultyMode,
    subject: str | None = Query(default=None, max_length=100),
    grade: int | None = Query(default=None, ge=1, le=12),
    query: LeaderboardQuery = Depends(board_query),
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    return await store.difficulty_board(difficulty.value, query, subject=subject, grade=grade)


# =============================================================================
# USER RANK AND STATS
# =============================================================================


@router.get("/user/{user_id}/rank")
async def user_rank(
    user_id: str,
    timeframe: Timeframe = Timeframe.ALL,
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    """Global, per-subject and per-grade position of one user."""
    validate_identifier(user_id, "user_id")
    return await store.user_rank(user_id, timeframe)


@router.get("/stats")
async def leaderboard_stats(
    timeframe: Timeframe = Timeframe.ALL,
    store: LeaderboardStore = Depends(get_leaderboard_store),
):
    """Aggregate figures over all scored submissions."""
    return await store.stats(timeframe)
