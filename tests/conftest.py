# =============================================================================
# CONFTEST - Shared fixtures for all tests
# =============================================================================
# In-memory database, stores, fake providers and a wired TestClient
# =============================================================================

import json
import re
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio

from core.config import (
    HINT_SYSTEM_PROMPT,
    SUGGESTION_SYSTEM_PROMPT,
    EmailConfig,
    ProviderConfig,
    QuizzerConfig,
)
from core.exceptions import ProviderUnavailableError

PRIMARY_URL = "https://primary.test/v1/chat/completions"
BACKUP_URL = "https://backup.test/v1/chat/completions"
SUGGEST_URL = "https://suggest.test/v1/chat/completions"
HINT_URL = "https://hint.test/v1/chat/completions"

SUGGESTIONS_TEXT = (
    "Here are some suggestions:\n"
    "1. Review the chapter on fractions and redo the worked examples at the end of it.\n"
    "2. Practice ten mixed addition problems every day and check each answer carefully.\n"
    "3. Explain each mistake out loud to a friend to make sure you understand the idea.\n"
)
HINT_TEXT = "Think about doubling the number in the question."


# =============================================================================
# TEXT HELPERS
# =============================================================================


def question_block(number: int, answer: str = "B") -> str:
    """Well-formed block whose option B is ``2 * number``."""
    return (
        f"Q{number}: What is {number} + {number}?\n"
        f"A) {2 * number - 1}\n"
        f"B) {2 * number}\n"
        f"C) {2 * number + 1}\n"
        f"D) {2 * number + 2}\n"
        f"Answer: {answer}\n"
    )


def questions_text(count: int) -> str:
    return "\n".join(question_block(i + 1) for i in range(count))


def completion_payload(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


@pytest.fixture
def make_questions_text():
    return questions_text


# =============================================================================
# FAKE PROVIDER
# =============================================================================


class FakeProvider:
    """In-process provider replaying canned replies (last one repeats)."""

    def __init__(self, name: str, replies=None, available: bool = True):
        self.name = name
        self.available = available
        self.replies = list(replies or [])
        self.calls: list[str] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def complete(self, prompt: str) -> str:
        if not self.available:
            raise ProviderUnavailableError(f"{self.name}: no API key configured")
        self.calls.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_provider():
    """Factory for ``FakeProvider`` instances."""
    return FakeProvider


# =============================================================================
# STORAGE
# =============================================================================


@pytest.fixture
def db():
    from quiz.storage import Database

    database = Database.connect(":memory:")
    yield database
    database.close()


@pytest.fixture
def user_store(db):
    from quiz.storage import UserStore

    return UserStore(db)


@pytest.fixture
def quiz_store(db):
    from quiz.storage import QuizStore

    return QuizStore(db)


@pytest.fixture
def submission_store(db):
    from quiz.storage import SubmissionStore

    return SubmissionStore(db)


@pytest.fixture
def leaderboard_store(db):
    from quiz.storage import LeaderboardStore

    return LeaderboardStore(db)


@pytest_asyncio.fixture
async def user(user_store):
    return await user_store.create("alice", "alice@example.com", "not-a-real-hash")


@pytest_asyncio.fixture
async def other_user(user_store):
    return await user_store.create("bob", "bob@example.com", "not-a-real-hash")


@pytest.fixture
def build_quiz():
    """Build (not save) a quiz whose correct answers are ``"2"``."""
    from quiz.models import DifficultyMode, Question, QuizDifficulty, Quiz

    counter = {"n": 0}

    def _build(user, subject="Mathematics", grade=5, difficulty=DifficultyMode.EASY, questions=4):
        counter["n"] += 1
        items = [
            Question(
                question_id=f"q{i + 1}",
                text=f"Question {i + 1}?",
                options=["1", "2", "3", "4"],
                correct_answer="2",
                difficulty=QuizDifficulty.EASY,
            )
            for i in range(questions)
        ]
        return Quiz(
            quiz_id=f"quiz-test{counter['n']:04d}",
            grade=grade,
            subject=subject,
            difficulty=difficulty,
            total_questions=questions,
            max_score=questions,
            questions=items,
            created_by=user.username,
            user_id=user.user_id,
        )

    return _build


@pytest.fixture
def build_submission():
    """Build (not save) a submission with ``correct`` right answers out of ``total``."""
    from quiz.models import EvaluatedResponse, Submission

    counter = {"n": 0}

    def _build(quiz_id, user, correct, total, minutes_ago=0):
        counter["n"] += 1
        responses = [
            EvaluatedResponse(
                question_id=f"q{i + 1}",
                user_response="2" if i < correct else "1",
                correct_answer="2",
                is_correct=i < correct,
            )
            for i in range(total)
        ]
        return Submission(
            submission_id=f"sub-test{counter['n']:04d}",
            quiz_id=quiz_id,
            user_id=user.user_id,
            username=user.username,
            responses=responses,
            score=correct,
            submitted_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        )

    return _build


# =============================================================================
# API
# =============================================================================


def provider_handler(request: httpx.Request) -> httpx.Response:
    """Mock transport answering like an OpenAI-compatible endpoint."""
    body = json.loads(request.content)
    system, prompt = body["messages"][0]["content"], body["messages"][1]["content"]

    if request.url.host == "primary.test":
        return httpx.Response(500, text="upstream down")
    if system == SUGGESTION_SYSTEM_PROMPT:
        return httpx.Response(200, json=completion_payload(SUGGESTIONS_TEXT))
    if system == HINT_SYSTEM_PROMPT:
        return httpx.Response(200, json=completion_payload(HINT_TEXT))

    count = int(re.search(r"Generate exactly (\d+)", prompt).group(1))
    return httpx.Response(200, json=completion_payload(questions_text(count)))


@pytest.fixture
def test_config():
    return QuizzerConfig(
        environment="test",
        log_level="ERROR",
        database_path=":memory:",
        jwt_secret="test-secret",
        rate_limit_enabled=False,
        question_providers=[
            ProviderConfig(name="primary", url=PRIMARY_URL, model="test-model", api_key="key-1"),
            ProviderConfig(name="backup", url=BACKUP_URL, model="test-model", api_key="key-2"),
        ],
        suggestion_providers=[
            ProviderConfig(
                name="suggest",
                url=SUGGEST_URL,
                model="test-model",
                api_key="key-3",
                system_prompt=SUGGESTION_SYSTEM_PROMPT,
            )
        ],
        hint_providers=[
            ProviderConfig(
                name="hint",
                url=HINT_URL,
                model="test-model",
                api_key="key-4",
                system_prompt=HINT_SYSTEM_PROMPT,
            )
        ],
        email=EmailConfig(enabled=False),
    )


@pytest.fixture
def client(test_config):
    """TestClient over a freshly wired app (in-memory database, mocked providers)."""
    import asyncio

    from fastapi.testclient import TestClient

    import app_state
    from core.config import get_config
    from server import app

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider_handler))
    app_state.init(test_config, http_client)
    app.dependency_overrides[get_config] = lambda: test_config

    yield TestClient(app)

    app.dependency_overrides.clear()
    asyncio.run(app_state.cleanup())


@pytest.fixture
def auth_headers(client):
    """Register a user and return its bearer header."""
    response = client.post(
        "/auth/register",
        json={"username": "student1", "email": "student1@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}
