"""Quiz Storage - apsw-backed stores."""

from .database import Database
from .leaderboard_store import LeaderboardStore
from .quiz_store import QuizStore
from .submission_store import SubmissionStore
from .user_store import UserStore

__all__ = ["Database", "UserStore", "QuizStore", "SubmissionStore", "LeaderboardStore"]
