"""Database - apsw connection and schema for users, quizzes and submissions."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import apsw

from core.exceptions import ConflictError, PersistenceUnavailableError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    user_id TEXT PRIMARY KEY,
    username TEXT NOT NULL UNIQUE COLLATE NOCASE,
    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quizzes (
    quiz_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(user_id),
    created_by TEXT NOT NULL,
    grade INTEGER NOT NULL,
    subject TEXT NOT NULL,
    difficulty TEXT NOT NULL,
    total_questions INTEGER NOT NULL,
    max_score INTEGER NOT NULL,
    questions TEXT NOT NULL,
    distribution TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS submissions (
    submission_id TEXT PRIMARY KEY,
    quiz_id TEXT NOT NULL REFERENCES quizzes(quiz_id),
    user_id TEXT NOT NULL REFERENCES users(user_id),
    username TEXT NOT NULL,
    responses TEXT NOT NULL,
    score INTEGER NOT NULL,
    total INTEGER NOT NULL,
    suggestions TEXT NOT NULL,
    email_sent INTEGER NOT NULL DEFAULT 0,
    submitted_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_submissions_user ON submissions(user_id, submitted_at);
CREATE INDEX IF NOT EXISTS idx_submissions_quiz ON submissions(quiz_id);
CREATE INDEX IF NOT EXISTS idx_quizzes_subject ON quizzes(subject, grade);
"""


def to_db_time(value: datetime) -> str:
    """ISO-8601 UTC text; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class Database:
    """Single apsw connection shared by the stores.

    Every statement goes through ``execute``; apsw errors surface as
    ``ConflictError`` (uniqueness violations) or
    ``PersistenceUnavailableError`` (anything else).

    Example:
        >>> db = Database.connect(":memory:")
        >>> rows = db.execute("SELECT COUNT(*) FROM users")
    """

    def __init__(self, conn: apsw.Connection, path: str):
        self.conn = conn
        self.path = path

    @classmethod
    def connect(cls, path: str) -> "Database":
        """Open (or create) the database file and ensure the schema."""
        try:
            conn = apsw.Connection(path)
            conn.execute("PRAGMA foreign_keys = ON")
            if path != ":memory:":
                conn.execute("PRAGMA journal_mode = WAL")
            with conn:
                conn.execute(SCHEMA)
        except apsw.Error as e:
            raise PersistenceUnavailableError(
                message=f"Could not open database: {e}", details={"path": path}
            ) from e

        logger.info(f"Database ready: {path}")
        return cls(conn, path)

    def execute(self, sql: str, bindings: tuple | dict = ()) -> list[tuple[Any, ...]]:
        """Run one statement and return all rows."""
        try:
            return list(self.conn.execute(sql, bindings))
        except apsw.ConstraintError as e:
            raise ConflictError(message=str(e)) from e
        except apsw.Error as e:
            logger.error(f"Database error: {e}")
            raise PersistenceUnavailableError(
                message="Database operation failed", details={"error": str(e)}
            ) from e

    @contextmanager
    def transaction(self) -> Iterator["Database"]:
        """Group statements; rolled back if the block raises."""
        with self.conn:
            yield self

    def ping(self) -> bool:
        try:
            self.execute("SELECT 1")
            return True
        except PersistenceUnavailableError:
            return False

    def close(self) -> None:
        self.conn.close()
