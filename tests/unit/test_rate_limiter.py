# =============================================================================
# TESTS - Rate Limiter Module
# =============================================================================

from unittest.mock import MagicMock


class TestRateLimits:
    """Tests for the slowapi setup."""

    def test_limits_defined(self):
        from core.rate_limiter import RATE_LIMITS

        assert RATE_LIMITS["auth"] == "10/minute"
        assert RATE_LIMITS["ai"] == "20/minute"

    def test_limiter_is_shared(self):
        from core.rate_limiter import get_limiter, limiter

        assert get_limiter() is limiter

    def test_disabled_from_environment(self):
        """RATE_LIMIT_ENABLED=false is pinned for the test run."""
        from core.rate_limiter import limiter

        assert limiter.enabled is False

    def test_keyed_by_client_address(self):
        from slowapi.util import get_remote_address

        from core.rate_limiter import limiter

        request = MagicMock()
        request.client.host = "10.0.0.7"

        assert limiter._key_func is get_remote_address
        assert limiter._key_func(request) == "10.0.0.7"
