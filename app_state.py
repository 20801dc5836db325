"""Core module - shared state and helper functions."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional

from core.config import QuizzerConfig, get_config
from core.logger import get_logger

if TYPE_CHECKING:
    import httpx

    from quiz.engine import QuizEngine
    from quiz.llm import GatewayFactory
    from quiz.storage import Database, LeaderboardStore, SubmissionStore, UserStore

logger = get_logger("app_state")

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

started_at: float = time.time()
database: Optional[Database] = None
gateways: Optional[GatewayFactory] = None
user_store: Optional[UserStore] = None
submission_store: Optional[SubmissionStore] = None
leaderboard_store: Optional[LeaderboardStore] = None
quiz_engine: Optional[QuizEngine] = None


# =============================================================================
# LIFECYCLE
# =============================================================================


def init(
    config: QuizzerConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> None:
    """Open the database and wire stores, gateways and engines.

    Args:
        config: Settings (defaults to ``get_config()``)
        http_client: Client shared by the provider chains (tests pass one
            built on ``httpx.MockTransport``)
    """
    from quiz.engine import AdaptiveDifficultyEngine, QuizEngine, SuggestionEngine
    from quiz.llm import GatewayFactory
    from quiz.notifications import EmailNotifier
    from quiz.storage import Database, LeaderboardStore, QuizStore, SubmissionStore, UserStore

    global started_at, database, gateways, user_store, submission_store, leaderboard_store, quiz_engine

    config = config or get_config()
    started_at = time.time()

    database = Database.connect(config.database_path)
    gateways = GatewayFactory(config, http_client)

    user_store = UserStore(database)
    submission_store = SubmissionStore(database)
    leaderboard_store = LeaderboardStore(database)

    quiz_engine = QuizEngine(
        quiz_store=QuizStore(database),
        submission_store=submission_store,
        question_gateway=gateways.question_gateway(),
        difficulty_engine=AdaptiveDifficultyEngine(submission_store),
        suggestion_engine=SuggestionEngine(
            gateways.suggestion_gateway(), gateways.hint_gateway()
        ),
        notifier=EmailNotifier(
            config.email,
            app_name=config.app_name,
            app_url=config.app_url,
            timeout=config.ai_timeout_seconds,
        ),
    )

    available = config.available_providers()
    logger.info(
        f"Providers available: questions={available['questions']}, "
        f"suggestions={len(available['suggestions'])}, hints={available['hints']}"
    )
    if not available["questions"]:
        logger.warning("No question provider has an API key; quiz creation will fail")


async def cleanup() -> None:
    """Close the HTTP client and the database."""
    global database, gateways, user_store, submission_store, leaderboard_store, quiz_engine

    if gateways is not None:
        await gateways.aclose()
        logger.info("HTTP client closed")
    if database is not None:
        database.close()
        logger.info("Database closed")

    database = gateways = user_store = submission_store = leaderboard_store = quiz_engine = None


# =============================================================================
# ACCESSORS (FastAPI dependencies)
# =============================================================================


def _require(instance, name: str):
    if instance is None:
        raise RuntimeError(f"{name} not initialized; call app_state.init() first")
    return instance


def get_database() -> Database:
    return _require(database, "Database")


def get_user_store() -> UserStore:
    return _require(user_store, "UserStore")


def get_submission_store() -> SubmissionStore:
    return _require(submission_store, "SubmissionStore")


def get_leaderboard_store() -> LeaderboardStore:
    return _require(leaderboard_store, "LeaderboardStore")


def get_quiz_engine() -> QuizEngine:
    return _require(quiz_engine, "QuizEngine")


def uptime_seconds() -> float:
    return round(time.time() - started_at, 1)
