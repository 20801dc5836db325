"""Quiz Schemas - Pydantic records and request/response models."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .enums import DifficultyMode, PerformanceLevel, QuizDifficulty, Timeframe


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# RECORDS
# =============================================================================


class User(BaseModel):
    """Registered user. Never mutated after creation."""

    user_id: str = Field(..., description="Opaque user identifier")
    username: str = Field(..., description="Unique login name")
    email: str = Field(..., description="Unique email address")
    password_hash: str = Field(..., description="passlib hash of the password")
    created_at: datetime = Field(default_factory=utcnow)


class UserPublic(BaseModel):
    """User without credentials."""

    user_id: str
    username: str
    email: str


class Question(BaseModel):
    """Multiple-choice question stored with its quiz."""

    question_id: str = Field(..., description="Question id inside the quiz (q1, q2, ...)")
    text: str = Field(..., description="Question text")
    options: list[str] = Field(..., min_length=2, description="Answer options")
    correct_answer: str = Field(..., description="Text of the correct option")
    difficulty: QuizDifficulty = Field(..., description="Difficulty of this question")


class PublicQuestion(BaseModel):
    """Question as served to the quiz taker (no answer)."""

    question_id: str
    text: str
    options: list[str]
    difficulty: QuizDifficulty

    @classmethod
    def from_question(cls, question: Question) -> "PublicQuestion":
        return cls(
            question_id=question.question_id,
            text=question.text,
            options=question.options,
            difficulty=question.difficulty,
        )


class DifficultyDistribution(BaseModel):
    """Target easy/medium/hard split for one quiz-creation request."""

    easy: int = Field(..., ge=0)
    medium: int = Field(..., ge=0)
    hard: int = Field(..., ge=0)
    reasoning: str = Field(..., description="Human-readable explanation")

    @property
    def total(self) -> int:
        return self.easy + self.medium + self.hard

    def counts(self) -> dict[QuizDifficulty, int]:
        return {
            QuizDifficulty.EASY: self.easy,
            QuizDifficulty.MEDIUM: self.medium,
            QuizDifficulty.HARD: self.hard,
        }


class Quiz(BaseModel):
    """Generated quiz. Immutable after creation."""

    quiz_id: str
    grade: int
    subject: str
    difficulty: DifficultyMode
    total_questions: int
    max_score: int
    questions: list[Question]
    created_by: str = Field(..., description="Username of the owner")
    user_id: str
    distribution: DifficultyDistribution | None = Field(
        default=None, description="Split used when the quiz was generated"
    )
    created_at: datetime = Field(default_factory=utcnow)

    def get_question(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.question_id == question_id:
                return question
        return None


class EvaluatedResponse(BaseModel):
    """One answered question inside a submission."""

    question_id: str
    user_response: str
    correct_answer: str
    is_correct: bool


class Submission(BaseModel):
    """One attempt at a quiz."""

    submission_id: str
    quiz_id: str
    user_id: str
    username: str
    responses: list[EvaluatedResponse] = Field(default_factory=list)
    score: int = 0
    suggestions: list[str] = Field(default_factory=list)
    email_sent: bool = False
    submitted_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _score_matches_responses(self) -> "Submission":
        correct = sum(1 for r in self.responses if r.is_correct)
        if self.score != correct:
            raise ValueError(
                f"score ({self.score}) must equal the number of correct responses ({correct})"
            )
        return self

    @property
    def total(self) -> int:
        return len(self.responses)

    @property
    def percentage(self) -> float:
        return (self.score / self.total * 100) if self.total > 0 else 0.0


# =============================================================================
# AUTH
# =============================================================================


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, description="At least 6 characters")


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


# =============================================================================
# QUIZ
# =============================================================================


class CreateQuizRequest(BaseModel):
    """Request to generate a new quiz."""

    grade: int = Field(..., ge=1, le=12, description="School grade (1-12)")
    subject: str = Field(..., min_length=1, max_length=100)
    difficulty: DifficultyMode = Field(
        default=DifficultyMode.ADAPTIVE,
        description="EASY, MEDIUM, HARD or ADAPTIVE (split from past performance)",
    )
    total_questions: int = Field(default=10, ge=1, le=50)


class QuizSummary(BaseModel):
    quiz_id: str
    grade: int
    subject: str
    difficulty: DifficultyMode
    total_questions: int
    max_score: int
    created_by: str
    user_id: str
    created_at: datetime
    distribution: DifficultyDistribution | None = None

    @classmethod
    def from_quiz(cls, quiz: Quiz) -> "QuizSummary":
        return cls(**quiz.model_dump(exclude={"questions"}))


class CreateQuizResponse(BaseModel):
    message: str
    quiz: QuizSummary
    questions: list[PublicQuestion]


class SubmitQuizRequest(BaseModel):
    """Answers keyed by question id."""

    responses: dict[str, str] = Field(default_factory=dict)
    send_email: bool = Field(default=True, description="Email the results to the user")


class SubmitQuizResponse(BaseModel):
    submission_id: str
    quiz_id: str
    score: int
    total: int
    percentage: float
    performance_level: PerformanceLevel
    responses: list[EvaluatedResponse]
    suggestions: list[str]
    suggestions_available: bool = True
    suggestions_message: str | None = None
    email_sent: bool = False


class HintResponse(BaseModel):
    quiz_id: str
    question_id: str
    hint: str


class HistoryFilters(BaseModel):
    grade: int | None = None
    subject: str | None = None
    min_marks: int | None = None
    max_marks: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


class HistoryResponse(BaseModel):
    count: int
    history: list[Submission]


class RetryResponse(BaseModel):
    message: str
    submission: Submission


# =============================================================================
# LEADERBOARD
# =============================================================================


class LeaderboardEntry(BaseModel):
    """One ranked user. Optional fields depend on the board."""

    rank: int
    user_id: str
    username: str
    total_score: int
    total_quizzes: int
    max_score: int
    average_score: float
    last_activity: datetime | None = None
    # global board
    consistency: float | None = None
    # subject board
    subject: str | None = None
    trend: str | None = None
    trend_value: float | None = None
    # grade / difficulty boards
    grade: int | None = None
    difficulty: str | None = None
    perfect_scores: int | None = None
    perfect_score_rate: float | None = None
    subjects_attempted: list[str] | None = None
    grades_attempted: list[int] | None = None
    difficulties_attempted: list[str] | None = None


class LeaderboardPage(BaseModel):
    leaderboard: list[LeaderboardEntry]
    filters: dict[str, Any]
    metadata: dict[str, Any]


class LeaderboardQuery(BaseModel):
    """Pagination and time window shared by every board."""

    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    timeframe: Timeframe = Timeframe.ALL
