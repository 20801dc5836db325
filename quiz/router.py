"""Quiz Router - FastAPI endpoints for quizzes."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request

import app_state
from core.auth import get_current_user
from core.rate_limiter import RATE_LIMITS, limiter
from utils.validators import validate_identifier

from .engine.quiz_engine import QuizEngine
from .models.schemas import (
    CreateQuizRequest,
    CreateQuizResponse,
    DifficultyDistribution,
    HintResponse,
    HistoryFilters,
    HistoryResponse,
    PublicQuestion,
    Quiz,
    QuizSummary,
    RetryResponse,
    SubmitQuizRequest,
    SubmitQuizResponse,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


def get_quiz_engine() -> QuizEngine:
    """Dependency returning the process-wide QuizEngine."""
    return app_state.get_quiz_engine()


def public_view(quiz: Quiz) -> dict:
    return {
        "quiz": QuizSummary.from_quiz(quiz),
        "questions": [PublicQuestion.from_question(q) for q in quiz.questions],
    }


# =============================================================================
# CREATION
# =============================================================================


@router.post("/create-quiz", response_model=CreateQuizResponse)
@limiter.limit(RATE_LIMITS["ai"])
async def create_quiz(
    request: Request,
    body: CreateQuizRequest,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Generate a quiz through the AI provider chain.

    - EASY / MEDIUM / HARD: every question at that difficulty
    - ADAPTIVE: split computed from the user's recent results on the subject

    Returns 503 when every provider fails; nothing is saved in that case.
    """
    quiz = await engine.create_quiz(user, body)
    return CreateQuizResponse(
        message=f"Quiz created successfully with {quiz.total_questions} questions",
        **public_view(quiz),
    )


@router.get("/difficulty/preview", response_model=DifficultyDistribution)
async def preview_difficulty(
    subject: str | None = Query(default=None, max_length=100),
    total_questions: int = Query(default=10, ge=1, le=50),
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Adaptive split the next quiz would use, without generating it."""
    return await engine.difficulty_engine.compute(user.user_id, subject, total_questions)


# =============================================================================
# HISTORY
# =============================================================================


@router.get("/history", response_model=HistoryResponse)
async def quiz_history(
    grade: int | None = Query(default=None, ge=1, le=12),
    subject: str | None = None,
    min_marks: int | None = Query(default=None, ge=0),
    max_marks: int | None = Query(default=None, ge=0),
    date_from: datetime | None = Query(default=None, alias="from"),
    date_to: datetime | None = Query(default=None, alias="to"),
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Submissions of the current user, newest first."""
    filters = HistoryFilters(
        grade=grade,
        subject=subject,
        min_marks=min_marks,
        max_marks=max_marks,
        date_from=date_from,
        date_to=date_to,
    )
    history = await engine.history(user, filters)
    return HistoryResponse(count=len(history), history=history)


# =============================================================================
# QUIZ OPERATIONS
# =============================================================================


@router.get("/{quiz_id}")
async def get_quiz(
    quiz_id: str,
    _user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Quiz with its questions (answers hidden)."""
    validate_identifier(quiz_id, "quiz_id")
    quiz = await engine.get_quiz(quiz_id)
    return public_view(quiz)


@router.post("/{quiz_id}/submit", response_model=SubmitQuizResponse)
@limiter.limit(RATE_LIMITS["ai"])
async def submit_quiz(
    request: Request,
    quiz_id: str,
    body: SubmitQuizRequest,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Score answers, attach AI suggestions and email the results.

    The submission is saved even when no suggestion provider answers;
    ``suggestions_available`` is false in that case.
    """
    validate_identifier(quiz_id, "quiz_id")
    return await engine.submit(user, quiz_id, body)


@router.post("/{quiz_id}/retry", response_model=RetryResponse)
async def retry_quiz(
    quiz_id: str,
    user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Start a new attempt at an existing quiz."""
    validate_identifier(quiz_id, "quiz_id")
    submission = await engine.retry(user, quiz_id)
    return RetryResponse(
        message="New attempt created. You can now take the quiz again.",
        submission=submission,
    )


@router.post("/{quiz_id}/question/{question_id}/hint", response_model=HintResponse)
@limiter.limit(RATE_LIMITS["ai"])
async def question_hint(
    request: Request,
    quiz_id: str,
    question_id: str,
    _user: User = Depends(get_current_user),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """AI hint for one question that does not reveal the answer."""
    validate_identifier(quiz_id, "quiz_id")
    validate_identifier(question_id, "question_id")
    return await engine.hint(quiz_id, question_id)
