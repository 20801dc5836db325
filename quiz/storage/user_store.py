"""User Store - Registered users."""

import logging
import uuid

from core.exceptions import ConflictError

from ..models.schemas import User
from .database import Database, from_db_time, to_db_time

logger = logging.getLogger(__name__)

_COLUMNS = "user_id, username, email, password_hash, created_at"


class UserStore:
    """Creates and looks up users. Users are never updated."""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        user_id, username, email, password_hash, created_at = row
        return User(
            user_id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=from_db_time(created_at),
        )

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """Insert a new user.

        Raises:
            ConflictError: Username or email already registered
        """
        existing = await self.find_by_login(username) or await self.find_by_login(email)
        if existing is not None:
            raise ConflictError(
                message="User with this email or username already exists",
                details={"username": username, "email": email},
            )

        user = User(
            user_id=uuid.uuid4().hex,
            username=username,
            email=email.lower(),
            password_hash=password_hash,
        )
        self.db.execute(
            f"INSERT INTO users ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
            (user.user_id, user.username, user.email, user.password_hash, to_db_time(user.created_at)),
        )
        logger.info(f"User registered: {user.username}")
        return user

    async def get(self, user_id: str) -> User | None:
        rows = self.db.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id = ?", (user_id,))
        return self._row_to_user(rows[0]) if rows else None

    async def find_by_login(self, login: str) -> User | None:
        """Look a user up by username or email (case-insensitive)."""
        rows = self.db.execute(
            f"SELECT {_COLUMNS} FROM users WHERE username = ? OR email = ?",
            (login, login),
        )
        return self._row_to_user(rows[0]) if rows else None
