"""Input validators for request parameters."""

import re

from core.exceptions import InvalidInputError

_IDENTIFIER = re.compile(r"^[a-zA-Z0-9\-_]+$")
_USERNAME = re.compile(r"^[a-zA-Z0-9._\-]{3,64}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_identifier(value: str, field: str = "id") -> bool:
    """Validate quiz/question ids before they reach the database.

    Returns True if valid, raises InvalidInputError if invalid.
    """
    if not value or len(value) > 64 or not _IDENTIFIER.fullmatch(value):
        raise InvalidInputError(
            message=f"Invalid {field} format",
            details={field: value[:20]},
        )
    return True


def validate_username(username: str) -> bool:
    """3-64 characters: letters, digits, dot, dash or underscore."""
    if not _USERNAME.fullmatch(username):
        raise InvalidInputError(
            message="Username must be 3-64 characters: letters, digits, '.', '-' or '_'",
            details={"username": username[:20]},
        )
    return True


def validate_email(email: str) -> bool:
    if not _EMAIL.fullmatch(email):
        raise InvalidInputError(
            message="Invalid email address",
            details={"email": email[:50]},
        )
    return True
