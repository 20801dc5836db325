"""Email Notifier - Quiz result emails over SMTP."""

import asyncio
import logging
import smtplib
from collections.abc import Callable
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from html import escape

from core.config import EmailConfig
from core.exceptions import NotificationError

from ..engine.scoring_engine import QuizScoringEngine
from ..models.schemas import EvaluatedResponse, Quiz

logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    success: bool
    message_id: str | None = None
    message: str = ""


@dataclass
class QuizResultsEmail:
    """Everything rendered into one results email."""

    recipient_email: str
    display_name: str
    subject: str
    grade: int
    difficulty: str
    score: int
    total: int
    responses: list[EvaluatedResponse]
    suggestions: list[str]

    @classmethod
    def build(
        cls,
        recipient_email: str,
        display_name: str,
        quiz: Quiz,
        responses: list[EvaluatedResponse],
        score: int,
        suggestions: list[str],
    ) -> "QuizResultsEmail":
        return cls(
            recipient_email=recipient_email,
            display_name=display_name,
            subject=quiz.subject,
            grade=quiz.grade,
            difficulty=quiz.difficulty.value,
            score=score,
            total=len(responses),
            responses=responses,
            suggestions=suggestions,
        )

    @property
    def percentage(self) -> int:
        return round(self.score / self.total * 100) if self.total else 0


# =============================================================================
# RENDERING
# =============================================================================

_HTML = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Quiz Results</title></head>
<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="text-align: center;">🎯 Quiz Results</h1>
  <h2>Hello {name}! 👋</h2>
  <p>Thank you for completing the quiz. Here are your detailed results:</p>
  <div style="background: #f8f9fa; padding: 20px; border-left: 4px solid #007bff;">
    <strong>Subject:</strong> {subject} &nbsp; <strong>Grade:</strong> {grade} &nbsp;
    <strong>Difficulty:</strong> {difficulty} &nbsp; <strong>Total Questions:</strong> {total}
  </div>
  <div style="border: 2px solid {color}; padding: 25px; text-align: center; margin: 25px 0;">
    <h3 style="color: {color};">{level}</h3>
    <div style="font-size: 48px; font-weight: bold; color: {color};">{score}/{total}</div>
    <div style="font-size: 24px; color: {color};">{percentage}%</div>
  </div>
  <h3>📊 Detailed Results</h3>
  <table style="width: 100%; border-collapse: collapse;">
    <thead><tr><th>#</th><th>Question</th><th>Your Answer</th><th>Correct Answer</th><th>Result</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>
  <div style="background: #e8f5e8; padding: 20px; margin: 25px 0; border-left: 4px solid #4CAF50;">
    <h3>🤖 AI-Powered Learning Suggestions</h3>
    <ul>{suggestions}</ul>
  </div>
  <p style="text-align: center;"><a href="{app_url}">Take Another Quiz 🚀</a></p>
  <p style="text-align: center; color: #666; font-size: 12px;">Generated by {app_name} 🎓<br>
  This email was sent automatically. Please do not reply to this email.</p>
</body>
</html>"""

_ROW = (
    "<tr><td>{index}</td><td>{question_id}</td><td>{answer}</td>"
    '<td>{correct}</td><td style="color: {color};">{mark}</td></tr>'
)


class EmailNotifier:
    """Sends quiz result emails through the configured SMTP preset.

    ``smtplib`` blocks, so delivery runs in a worker thread. Failures raise
    ``NotificationError``; callers log them without failing the request.

    Example:
        >>> notifier = EmailNotifier(config.email, app_name="Quizzer")
        >>> result = await notifier.send_quiz_results(
        ...     "ana@example.com", "ana", quiz, responses, score=7, suggestions=tips
        ... )
    """

    def __init__(
        self,
        config: EmailConfig,
        app_name: str = "AI Quiz Generator",
        app_url: str = "http://localhost:8080",
        smtp_factory: Callable[[str, int], smtplib.SMTP] | None = None,
        timeout: float = 30.0,
    ):
        self.config = config
        self.app_name = app_name
        self.app_url = app_url
        self.smtp_factory = smtp_factory or (
            lambda host, port: smtplib.SMTP(host, port, timeout=timeout)
        )
        self.scoring = QuizScoringEngine()

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def render_html(self, email: QuizResultsEmail) -> str:
        _, level, color = self.scoring.performance_level(email.percentage)
        rows = "".join(
            _ROW.format(
                index=i + 1,
                question_id=escape(r.question_id),
                answer=escape(r.user_response or "No answer"),
                correct=escape(r.correct_answer),
                color="#4CAF50" if r.is_correct else "#F44336",
                mark="✅" if r.is_correct else "❌",
            )
            for i, r in enumerate(email.responses)
        )
        suggestions = "".join(f"<li>{escape(s)}</li>" for s in email.suggestions)
        return _HTML.format(
            name=escape(email.display_name),
            subject=escape(email.subject),
            grade=email.grade,
            difficulty=escape(email.difficulty),
            total=email.total,
            score=email.score,
            percentage=email.percentage,
            level=level,
            color=color,
            rows=rows,
            suggestions=suggestions,
            app_url=escape(self.app_url),
            app_name=escape(self.app_name),
        )

    def render_text(self, email: QuizResultsEmail) -> str:
        suggestions = "\n".join(f"{i + 1}. {s}" for i, s in enumerate(email.suggestions))
        return (
            "🎯 QUIZ RESULTS\n\n"
            f"Hello {email.display_name}!\n\n"
            "📋 QUIZ INFORMATION\n"
            f"Subject: {email.subject}\n"
            f"Grade: {email.grade}\n"
            f"Difficulty: {email.difficulty}\n"
            f"Total Questions: {email.total}\n\n"
            "📊 YOUR SCORE\n"
            f"Score: {email.score}/{email.total} ({email.percentage}%)\n\n"
            "🤖 AI LEARNING SUGGESTIONS\n"
            f"{suggestions or 'No suggestions available.'}\n\n"
            "Keep learning, keep growing! 📚\n"
            "---\n"
            f"Generated by {self.app_name}\n"
            "This is an automated email. Please do not reply."
        )

    def build_message(self, email: QuizResultsEmail) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"🎯 Quiz Results: {email.subject} (Grade {email.grade})"
        address = self.config.sender or self.config.user or ""
        if "@" not in address:
            address = "no-reply@localhost"
        message["From"] = formataddr((self.config.sender_name, address))
        message["To"] = email.recipient_email
        message["Message-ID"] = make_msgid()
        message.set_content(self.render_text(email))
        message.add_alternative(self.render_html(email), subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with self.smtp_factory(self.config.host, self.config.port) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            smtp.login(self.config.user, self.config.password)
            smtp.send_message(message)

    async def send_quiz_results(
        self,
        recipient_email: str,
        display_name: str,
        quiz: Quiz,
        responses: list[EvaluatedResponse],
        score: int,
        suggestions: list[str],
    ) -> NotificationResult:
        """Render and send one results email.

        Args:
            recipient_email: Address of the quiz taker
            display_name: Name used in the greeting
            quiz: Quiz that was taken
            responses: Evaluated responses of the submission
            score: Number of correct responses
            suggestions: Study suggestions (may be empty)

        Raises:
            NotificationError: Email disabled or misconfigured, or SMTP failure
        """
        email = QuizResultsEmail.build(
            recipient_email, display_name, quiz, responses, score, suggestions
        )
        if not self.is_configured:
            raise NotificationError(
                message="Email is not configured",
                details={"service": self.config.service.value},
            )

        message = self.build_message(email)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(
                message=f"Failed to send email: {e}",
                details={"recipient": email.recipient_email},
            ) from e

        logger.info(f"Results email sent to {email.recipient_email}")
        return NotificationResult(
            success=True,
            message_id=message["Message-ID"],
            message="Quiz results sent via email successfully",
        )
