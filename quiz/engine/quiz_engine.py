"""Quiz Engine - Orchestrates quiz creation, submission and retries."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from core.exceptions import (
    AllProvidersExhaustedError,
    InvalidInputError,
    NotFoundError,
    NotificationError,
)

from ..models.enums import DifficultyMode, QuizDifficulty
from ..models.schemas import (
    CreateQuizRequest,
    DifficultyDistribution,
    HintResponse,
    HistoryFilters,
    Question,
    Quiz,
    Submission,
    SubmitQuizRequest,
    SubmitQuizResponse,
    User,
)
from ..prompts import build_question_prompt
from .difficulty_engine import AdaptiveDifficultyEngine
from .parser import ParsedQuestion
from .scoring_engine import QuizScoringEngine
from .suggestion_engine import SuggestionEngine

if TYPE_CHECKING:
    from ..llm.gateway import CompletionGateway
    from ..notifications.email_service import EmailNotifier
    from ..storage.quiz_store import QuizStore
    from ..storage.submission_store import SubmissionStore

logger = logging.getLogger(__name__)

SUGGESTIONS_UNAVAILABLE = (
    "AI suggestions are temporarily unavailable. Your submission has been saved."
)


class QuizEngine:
    """Business flow behind the quiz endpoints.

    Flow:
        1. ``create_quiz``: split (adaptive or fixed) -> one gateway call per
           non-empty difficulty bucket -> persisted quiz
        2. ``submit``: score -> suggestions -> persisted submission -> email
        3. ``retry``: empty attempt record for an existing quiz

    Example:
        >>> engine = QuizEngine(quiz_store, submission_store, gateway, difficulty, suggestions)
        >>> quiz = await engine.create_quiz(user, CreateQuizRequest(grade=5, subject="Science"))
    """

    def __init__(
        self,
        quiz_store: QuizStore,
        submission_store: SubmissionStore,
        question_gateway: CompletionGateway,
        difficulty_engine: AdaptiveDifficultyEngine,
        suggestion_engine: SuggestionEngine,
        notifier: EmailNotifier | None = None,
        scoring_engine: QuizScoringEngine | None = None,
    ):
        self.quiz_store = quiz_store
        self.submission_store = submission_store
        self.question_gateway = question_gateway
        self.difficulty_engine = difficulty_engine
        self.suggestion_engine = suggestion_engine
        self.notifier = notifier
        self.scoring = scoring_engine or QuizScoringEngine()

    # =========================================================================
    # CREATION
    # =========================================================================

    async def distribution_for(
        self, user: User, mode: DifficultyMode, subject: str | None, total_questions: int
    ) -> DifficultyDistribution:
        if mode == DifficultyMode.ADAPTIVE:
            return await self.difficulty_engine.compute(user.user_id, subject, total_questions)
        return self.difficulty_engine.fixed(mode, total_questions)

    async def create_quiz(self, user: User, request: CreateQuizRequest) -> Quiz:
        """Generate and persist a quiz.

        Args:
            user: Owner of the quiz
            request: Grade, subject, difficulty mode and length

        Returns:
            Saved quiz (may hold fewer questions than requested when a
            provider returned a partial batch)

        Raises:
            AllProvidersExhaustedError: No provider produced questions for a bucket
        """
        distribution = await self.distribution_for(
            user, request.difficulty, request.subject, request.total_questions
        )
        logger.info(
            f"Creating quiz for {user.username}: grade {request.grade}, {request.subject}, "
            f"{request.difficulty.value} ({distribution.easy}/{distribution.medium}/{distribution.hard})"
        )

        questions: list[Question] = []
        for level, count in distribution.counts().items():
            if count == 0:
                continue
            prompt = build_question_prompt(request.grade, request.subject, level, count)
            for parsed in await self.question_gateway.generate(prompt, count):
                questions.append(self._to_question(parsed, level, len(questions) + 1))

        quiz = Quiz(
            quiz_id=f"quiz-{uuid.uuid4().hex[:12]}",
            grade=request.grade,
            subject=request.subject,
            difficulty=request.difficulty,
            total_questions=len(questions),
            max_score=len(questions),
            questions=questions,
            created_by=user.username,
            user_id=user.user_id,
            distribution=distribution,
        )
        await self.quiz_store.save(quiz)
        logger.info(f"Quiz {quiz.quiz_id} created with {len(questions)} questions")
        return quiz

    @staticmethod
    def _to_question(parsed: ParsedQuestion, level: QuizDifficulty, number: int) -> Question:
        return Question(
            question_id=f"q{number}",
            text=parsed.text,
            options=parsed.options,
            correct_answer=parsed.correct_answer,
            difficulty=level,
        )

    async def get_quiz(self, quiz_id: str) -> Quiz:
        quiz = await self.quiz_store.get(quiz_id)
        if quiz is None:
            raise NotFoundError(message="Quiz not found", details={"quiz_id": quiz_id})
        return quiz

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    async def submit(self, user: User, quiz_id: str, request: SubmitQuizRequest) -> SubmitQuizResponse:
        """Score answers, attach suggestions, persist and notify.

        Suggestion exhaustion does not fail the submission; the response
        reports it through ``suggestions_available``. Email failures are
        logged only.
        """
        if not request.responses:
            raise InvalidInputError(message="No responses submitted", details={"quiz_id": quiz_id})

        quiz = await self.get_quiz(quiz_id)
        evaluated, score = self.scoring.evaluate(quiz, request.responses)

        suggestions: list[str] = []
        suggestions_message = None
        try:
            suggestions = await self.suggestion_engine.suggestions_for(evaluated, score)
        except AllProvidersExhaustedError as e:
            logger.warning(f"No suggestions for {quiz_id}: {len(e.attempts)} provider(s) failed")
            suggestions_message = SUGGESTIONS_UNAVAILABLE

        submission = Submission(
            submission_id=self.submission_store.new_id(),
            quiz_id=quiz.quiz_id,
            user_id=user.user_id,
            username=user.username,
            responses=evaluated,
            score=score,
            suggestions=suggestions,
        )
        await self.submission_store.save(submission)
        logger.info(f"{user.username} scored {score}/{submission.total} on {quiz_id}")

        if request.send_email and user.email:
            submission.email_sent = await self._notify(user, quiz, submission)

        percentage = self.scoring.percentage(score, submission.total)
        level, _, _ = self.scoring.performance_level(percentage)
        return SubmitQuizResponse(
            submission_id=submission.submission_id,
            quiz_id=quiz.quiz_id,
            score=score,
            total=submission.total,
            percentage=percentage,
            performance_level=level,
            responses=evaluated,
            suggestions=suggestions,
            suggestions_available=suggestions_message is None,
            suggestions_message=suggestions_message,
            email_sent=submission.email_sent,
        )

    async def _notify(self, user: User, quiz: Quiz, submission: Submission) -> bool:
        """Send the results email. Returns whether it was delivered."""
        if self.notifier is None or not self.notifier.is_configured:
            logger.info("Email not configured, skipping results email")
            return False

        try:
            await self.notifier.send_quiz_results(
                user.email,
                user.username,
                quiz,
                submission.responses,
                submission.score,
                submission.suggestions,
            )
        except NotificationError as e:
            logger.error(f"Results email for {submission.submission_id} failed: {e.message}")
            return False

        await self.submission_store.mark_email_sent(submission.submission_id)
        return True

    # =========================================================================
    # HISTORY, RETRY, HINTS
    # =========================================================================

    async def history(self, user: User, filters: HistoryFilters) -> list[Submission]:
        return await self.submission_store.history(user.user_id, filters)

    async def retry(self, user: User, quiz_id: str) -> Submission:
        quiz = await self.get_quiz(quiz_id)
        return await self.submission_store.create_retry(quiz, user)

    async def hint(self, quiz_id: str, question_id: str) -> HintResponse:
        """AI hint for one question. Exhaustion propagates (503)."""
        quiz = await self.get_quiz(quiz_id)
        question = quiz.get_question(question_id)
        if question is None:
            raise NotFoundError(
                message="Question not found",
                details={"quiz_id": quiz_id, "question_id": question_id},
            )
        hint = await self.suggestion_engine.hint_for(question)
        return HintResponse(quiz_id=quiz_id, question_id=question_id, hint=hint)
