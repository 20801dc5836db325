"""Rate Limiter - slowapi limits for the auth and AI-backed endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import get_config

RATE_LIMITS = {
    "auth": "10/minute",
    "ai": "20/minute",
}

limiter = Limiter(key_func=get_remote_address, enabled=get_config().rate_limit_enabled)


def get_limiter() -> Limiter:
    return limiter
