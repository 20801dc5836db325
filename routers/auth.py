"""Auth endpoints."""

from fastapi import APIRouter, Depends, Request, Response

import app_state
from core.auth import (
    TOKEN_COOKIE,
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from core.config import QuizzerConfig, get_config
from core.exceptions import AuthenticationError
from core.logger import get_logger
from core.rate_limiter import RATE_LIMITS, limiter
from quiz.models.schemas import AuthResponse, LoginRequest, RegisterRequest, User, UserPublic
from utils.validators import validate_email, validate_username

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = get_logger("auth")


def _public(user: User) -> UserPublic:
    return UserPublic(user_id=user.user_id, username=user.username, email=user.email)


def _set_token_cookie(response: Response, token: str, config: QuizzerConfig) -> None:
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        httponly=True,
        secure=config.is_production,
        samesite="lax",
        max_age=config.jwt_expires_minutes * 60,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(RATE_LIMITS["auth"])
async def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    config: QuizzerConfig = Depends(get_config),
):
    """Create an account and log it in."""
    validate_username(body.username.strip())
    validate_email(body.email.strip())

    user = await app_state.get_user_store().create(
        username=body.username.strip(),
        email=body.email.strip(),
        password_hash=hash_password(body.password),
    )
    token = create_access_token(user, config)
    _set_token_cookie(response, token, config)
    return AuthResponse(message="User registered successfully", token=token, user=_public(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(RATE_LIMITS["auth"])
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    config: QuizzerConfig = Depends(get_config),
):
    """Log in with username or email."""
    user = await app_state.get_user_store().find_by_login(body.username.strip())
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info(f"Failed login for {body.username!r}")
        raise AuthenticationError(message="Invalid credentials")

    token = create_access_token(user, config)
    _set_token_cookie(response, token, config)
    return AuthResponse(message="Login successful", token=token, user=_public(user))


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(TOKEN_COOKIE)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserPublic)
async def me(user: User = Depends(get_current_user)):
    """Current user."""
    return _public(user)
