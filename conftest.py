# =============================================================================
# CONFTEST - Global pytest setup
# =============================================================================
# Environment is pinned before any project module reads it
# =============================================================================

import os
import sys
from pathlib import Path

import pytest

# Add project root to the path
sys.path.insert(0, str(Path(__file__).parent))

TEST_ENV = {
    "ENVIRONMENT": "test",
    "LOG_LEVEL": "ERROR",
    "DATABASE_PATH": ":memory:",
    "JWT_SECRET": "test-secret",
    "RATE_LIMIT_ENABLED": "false",
    "EMAIL_ENABLED": "false",
    "OPENROUTER_API_KEY": "",
    "GROQ_API_KEY": "",
    "HUGGINGFACE_API_KEY": "",
}

# The limiter and the cached config read these at import time
os.environ.update(TEST_ENV)


@pytest.fixture
def capture_logs(caplog):
    """Capture logs at DEBUG during a test."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog
