# =============================================================================
# INTEGRATION TESTS - Endpoints
# =============================================================================
# FastAPI TestClient over an in-memory database and mocked AI providers.
# The first question provider always answers HTTP 500, so every quiz here
# also exercises the fallback to the second one.
# =============================================================================

import dataclasses

import pytest

QUIZ_BODY = {"grade": 5, "subject": "Mathematics", "difficulty": "EASY", "total_questions": 3}


@pytest.fixture
def quiz(client, auth_headers):
    response = client.post("/quiz/create-quiz", json=QUIZ_BODY, headers=auth_headers)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def submitted(client, auth_headers, quiz):
    quiz_id = quiz["quiz"]["quiz_id"]
    response = client.post(
        f"/quiz/{quiz_id}/submit",
        json={"responses": {"q1": "2", "q2": "4", "q3": "5"}},
        headers=auth_headers,
    )
    assert response.status_code == 200
    return response.json()


class TestHealthEndpoints:
    """Tests for liveness and health."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "AI Quizzer API is running 🚀"

    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert set(data["providers"]) == {"questions", "suggestions", "hints"}
        assert data["uptime_seconds"] >= 0


class TestAuthEndpoints:
    """Tests for register, login, me and logout."""

    def test_register_returns_token_and_cookie(self, client):
        response = client.post(
            "/auth/register",
            json={"username": "newbie", "email": "Newbie@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "newbie@example.com"
        assert "password_hash" not in data["user"]
        assert "token" in response.cookies

    def test_duplicate_registration(self, client, auth_headers):
        response = client.post(
            "/auth/register",
            json={"username": "student1", "email": "other@example.com", "password": "secret123"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "ConflictError"

    @pytest.mark.parametrize(
        "username,email",
        [("a b", "ok@example.com"), ("okname", "not-an-email")],
    )
    def test_register_rejects_bad_identity(self, client, username, email):
        response = client.post(
            "/auth/register", json={"username": username, "email": email, "password": "secret123"}
        )

        assert response.status_code == 400

    def test_short_password_is_unprocessable(self, client):
        response = client.post(
            "/auth/register", json={"username": "shorty", "email": "s@example.com", "password": "123"}
        )

        assert response.status_code == 422

    @pytest.mark.parametrize("login", ["student1", "student1@example.com"])
    def test_login_by_username_or_email(self, client, auth_headers, login):
        response = client.post("/auth/login", json={"username": login, "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "student1"

    def test_login_wrong_password(self, client, auth_headers):
        response = client.post("/auth/login", json={"username": "student1", "password": "nope123"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_me_with_bearer(self, client, auth_headers):
        client.cookies.clear()

        response = client.get("/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["username"] == "student1"

    def test_me_with_cookie(self, client, auth_headers):
        response = client.get("/auth/me")

        assert response.status_code == 200

    def test_me_without_token(self, client):
        client.cookies.clear()

        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"

    def test_bad_token(self, client):
        client.cookies.clear()

        response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401

    def test_logout_clears_cookie(self, client, auth_headers):
        response = client.post("/auth/logout")

        assert response.status_code == 200
        assert 'token=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]


class TestQuizEndpoints:
    """Tests for the quiz lifecycle."""

    def test_create_quiz_falls_back_and_hides_answers(self, quiz):
        assert quiz["quiz"]["total_questions"] == 3
        assert quiz["quiz"]["difficulty"] == "EASY"
        assert [q["question_id"] for q in quiz["questions"]] == ["q1", "q2", "q3"]
        assert all("correct_answer" not in q for q in quiz["questions"])
        assert quiz["questions"][0]["options"] == ["1", "2", "3", "4"]

    def test_create_quiz_requires_auth(self, client):
        client.cookies.clear()

        response = client.post("/quiz/create-quiz", json=QUIZ_BODY)

        assert response.status_code == 401

    def test_create_quiz_validation(self, client, auth_headers):
        response = client.post(
            "/quiz/create-quiz", json={**QUIZ_BODY, "grade": 13}, headers=auth_headers
        )

        assert response.status_code == 422

    def test_adaptive_preview(self, client, auth_headers):
        response = client.get(
            "/quiz/difficulty/preview", params={"total_questions": 10}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["easy"], data["medium"], data["hard"]) == (4, 4, 2)

    def test_get_quiz(self, client, auth_headers, quiz):
        quiz_id = quiz["quiz"]["quiz_id"]

        response = client.get(f"/quiz/{quiz_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["quiz"]["quiz_id"] == quiz_id
        assert all("correct_answer" not in q for q in response.json()["questions"])

    def test_get_unknown_quiz(self, client, auth_headers):
        response = client.get("/quiz/quiz-000000000000", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_malformed_quiz_id(self, client, auth_headers):
        response = client.get("/quiz/quiz.1", headers=auth_headers)

        assert response.status_code == 400

    def test_submit(self, submitted):
        assert submitted["score"] == 2
        assert submitted["total"] == 3
        assert submitted["percentage"] == 66.7
        assert submitted["performance_level"] == "good"
        assert len(submitted["suggestions"]) == 3
        assert submitted["suggestions_available"] is True
        assert submitted["email_sent"] is False
        assert [r["is_correct"] for r in submitted["responses"]] == [True, True, False]

    def test_submit_empty(self, client, auth_headers, quiz):
        response = client.post(
            f"/quiz/{quiz['quiz']['quiz_id']}/submit", json={"responses": {}}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_history(self, client, auth_headers, submitted):
        response = client.get("/quiz/history", params={"subject": "mathematics"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["history"][0]["submission_id"] == submitted["submission_id"]

    def test_history_filters_by_marks(self, client, auth_headers, submitted):
        response = client.get("/quiz/history", params={"min_marks": 3}, headers=auth_headers)

        assert response.json()["count"] == 0

    def test_retry(self, client, auth_headers, quiz):
        response = client.post(f"/quiz/{quiz['quiz']['quiz_id']}/retry", headers=auth_headers)

        assert response.status_code == 200
        submission = response.json()["submission"]
        assert submission["responses"] == []
        assert submission["score"] == 0

    def test_hint(self, client, auth_headers, quiz):
        response = client.post(
            f"/quiz/{quiz['quiz']['quiz_id']}/question/q1/hint", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["hint"] == "Think about doubling the number in the question."

    def test_hint_unknown_question(self, client, auth_headers, quiz):
        response = client.post(
            f"/quiz/{quiz['quiz']['quiz_id']}/question/q9/hint", headers=auth_headers
        )

        assert response.status_code == 404


class TestQuestionProviderOutage:
    """Every question provider failing is a visible 503."""

    @pytest.fixture
    def test_config(self, test_config):
        test_config.question_providers = test_config.question_providers[:1]
        return test_config

    def test_create_quiz_returns_503(self, client, auth_headers):
        response = client.post("/quiz/create-quiz", json=QUIZ_BODY, headers=auth_headers)

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "AllProvidersExhaustedError"
        assert data["details"]["attempts"] == [{"provider": "primary", "outcome": "HTTP 500"}]


class TestSuggestionProviderOutage:
    """Submission survives when no suggestion provider answers."""

    @pytest.fixture
    def test_config(self, test_config):
        broken = dataclasses.replace(test_config.question_providers[0], name="suggest-down")
        test_config.suggestion_providers = [broken]
        return test_config

    def test_submit_saved_without_suggestions(self, client, auth_headers, submitted):
        assert submitted["suggestions"] == []
        assert submitted["suggestions_available"] is False
        assert "temporarily unavailable" in submitted["suggestions_message"]

        history = client.get("/quiz/history", headers=auth_headers).json()
        assert history["count"] == 1


class TestLeaderboardEndpoints:
    """Tests for public rankings."""

    def test_global(self, client, submitted):
        response = client.get("/leaderboard/global")

        assert response.status_code == 200
        data = response.json()
        (entry,) = data["leaderboard"]
        assert entry["username"] == "student1"
        assert entry["total_score"] == 2
        assert entry["rank"] == 1
        assert "trend" not in entry
        assert data["filters"] == {"timeframe": "all", "limit": 10, "offset": 0}

    def test_subject_board(self, client, submitted):
        data = client.get("/leaderboard/subject/Mathematics", params={"timeframe": "week"}).json()

        assert data["leaderboard"][0]["trend"] == "stable"
        assert data["filters"]["timeframe"] == "week"

    def test_grade_and_difficulty_boards(self, client, submitted):
        grade = client.get("/leaderboard/grade/5").json()
        difficulty = client.get("/leaderboard/difficulty/EASY").json()

        assert grade["leaderboard"][0]["subjects_attempted"] == ["Mathematics"]
        assert difficulty["leaderboard"][0]["perfect_scores"] == 0

    def test_invalid_parameters(self, client):
        assert client.get("/leaderboard/difficulty/IMPOSSIBLE").status_code == 422
        assert client.get("/leaderboard/grade/13").status_code == 422
        assert client.get("/leaderboard/global", params={"limit": 0}).status_code == 422
        assert client.get("/leaderboard/global", params={"timeframe": "decade"}).status_code == 422

    def test_user_rank(self, client, auth_headers, submitted):
        user_id = client.get("/auth/me", headers=auth_headers).json()["user_id"]

        data = client.get(f"/leaderboard/user/{user_id}/rank").json()

        assert data["global_rank"] == {"rank": 1, "total_users": 1}
        assert data["user_stats"]["total_quizzes"] == 1

    def test_stats(self, client, submitted):
        data = client.get("/leaderboard/stats").json()

        assert data["overview"]["total_submissions"] == 1
        assert data["performance"]["total_score"] == 2
