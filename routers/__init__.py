"""Routers module for the AI Quizzer API."""

from .auth import router as auth_router
from .leaderboard import router as leaderboard_router

# Quiz router lives with the quiz package
from quiz.router import router as quiz_router

__all__ = [
    "auth_router",
    "leaderboard_router",
    "quiz_router",
]
