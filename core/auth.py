"""Authentication - Password hashing, JWT tokens and the current-user dependency."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, Request
from jose import JWTError, jwt
from passlib.context import CryptContext

from quiz.models.schemas import User

from .config import QuizzerConfig, get_config
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_COOKIE = "token"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


# =============================================================================
# PASSWORDS
# =============================================================================


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


# =============================================================================
# TOKENS
# =============================================================================


def create_access_token(user: User, config: QuizzerConfig | None = None) -> str:
    """Issue a signed token carrying the user's id, name and email.

    Args:
        user: Authenticated user
        config: Settings holding the secret, algorithm and lifetime

    Returns:
        Encoded JWT
    """
    config = config or get_config()
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user.user_id,
        "username": user.username,
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(minutes=config.jwt_expires_minutes),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: QuizzerConfig | None = None) -> dict[str, Any]:
    """Verify signature and expiry.

    Raises:
        AuthenticationError: Token invalid or expired
    """
    config = config or get_config()
    try:
        return jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(message="Invalid or expired token") from e


def token_from_request(request: Request) -> str | None:
    """Bearer header first, then the ``token`` cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(TOKEN_COOKIE)


# =============================================================================
# FASTAPI DEPENDENCIES
# =============================================================================


async def get_current_user(request: Request, config: QuizzerConfig = Depends(get_config)) -> User:
    """Resolve the authenticated user; the user must still exist."""
    import app_state

    token = token_from_request(request)
    if not token:
        raise AuthenticationError(message="Access token required")

    payload = decode_access_token(token, config)
    user_id = payload.get("userId")
    user = await app_state.get_user_store().get(user_id) if user_id else None
    if user is None:
        logger.warning("Token accepted but user no longer exists")
        raise AuthenticationError(message="Invalid token - user not found")
    return user
