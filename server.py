"""
AI Quizzer Server

FastAPI application with:
- JWT authentication (header or cookie)
- AI quiz generation with provider fallback and adaptive difficulty
- Scoring, improvement suggestions, hints and email results
- Public leaderboards
- Rate limiting, CORS, structured error responses
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

import app_state
from core.config import QuizzerConfig, get_config
from core.exceptions import QuizzerError
from core.logger import get_logger, setup_logging
from core.rate_limiter import get_limiter
from routers import auth_router, leaderboard_router, quiz_router

logger = get_logger("server")


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and provider clients for the app lifetime."""
    config = get_config()
    setup_logging(config.log_level)
    logger.info(f"🚀 Starting {config.app_name} ({config.environment})")
    app_state.init(config)
    yield
    await app_state.cleanup()
    logger.info("👋 Shutdown complete")


app = FastAPI(
    title="AI Quizzer",
    description="AI-generated quizzes with adaptive difficulty and leaderboards",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiter
limiter = get_limiter()
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(QuizzerError)
async def quizzer_error_handler(request: Request, exc: QuizzerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/")
async def root():
    """Liveness check."""
    return {"status": "ok", "message": "AI Quizzer API is running 🚀"}


@app.get("/health")
async def health_check(config: QuizzerConfig = Depends(get_config)):
    """Detailed health check."""
    database_ok = app_state.database is not None and app_state.database.ping()

    return {
        "status": "healthy" if database_ok else "degraded",
        "environment": config.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": app_state.uptime_seconds(),
        "database": "connected" if database_ok else "unavailable",
        "providers": config.available_providers(),
    }


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(auth_router)
app.include_router(quiz_router)
app.include_router(leaderboard_router)


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
