# =============================================================================
# TESTS - Auth Module
# =============================================================================
# Password hashing, JWT tokens and request token extraction
# =============================================================================

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from jose import jwt

from core.config import QuizzerConfig
from core.exceptions import AuthenticationError
from quiz.models import User


@pytest.fixture
def config():
    return QuizzerConfig(jwt_secret="unit-secret", jwt_expires_minutes=5)


@pytest.fixture
def account():
    return User(user_id="u-123", username="alice", email="alice@example.com", password_hash="x")


def request_with(headers=None, cookies=None):
    request = MagicMock()
    request.headers = headers or {}
    request.cookies = cookies or {}
    return request


class TestPasswords:
    """Tests for passlib hashing."""

    def test_hash_and_verify(self):
        from core.auth import hash_password, verify_password

        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_hashes_are_salted(self):
        from core.auth import hash_password

        assert hash_password("same") != hash_password("same")


class TestTokens:
    """Tests for token issue and verification."""

    def test_round_trip_claims(self, config, account):
        from core.auth import create_access_token, decode_access_token

        payload = decode_access_token(create_access_token(account, config), config)

        assert payload["userId"] == "u-123"
        assert payload["username"] == "alice"
        assert payload["email"] == "alice@example.com"
        assert payload["exp"] - payload["iat"] == 5 * 60

    def test_wrong_secret_rejected(self, config, account):
        from core.auth import create_access_token, decode_access_token

        token = create_access_token(account, config)

        with pytest.raises(AuthenticationError):
            decode_access_token(token, QuizzerConfig(jwt_secret="other-secret"))

    def test_expired_token_rejected(self, config):
        from core.auth import decode_access_token

        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"userId": "u-123", "iat": past - timedelta(minutes=5), "exp": past},
            config.jwt_secret,
            algorithm=config.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError) as exc_info:
            decode_access_token(token, config)

        assert exc_info.value.status_code == 401

    def test_garbage_rejected(self, config):
        from core.auth import decode_access_token

        with pytest.raises(AuthenticationError):
            decode_access_token("not-a-token", config)


class TestTokenFromRequest:
    """Tests for bearer header and cookie lookup."""

    def test_bearer_header(self):
        from core.auth import token_from_request

        assert token_from_request(request_with({"Authorization": "Bearer abc"})) == "abc"

    def test_header_wins_over_cookie(self):
        from core.auth import token_from_request

        request = request_with({"Authorization": "Bearer header"}, {"token": "cookie"})

        assert token_from_request(request) == "header"

    def test_cookie_fallback(self):
        from core.auth import token_from_request

        assert token_from_request(request_with(cookies={"token": "cookie"})) == "cookie"

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer ", "abc"])
    def test_other_schemes_ignored(self, header):
        from core.auth import token_from_request

        assert token_from_request(request_with({"Authorization": header})) is None
