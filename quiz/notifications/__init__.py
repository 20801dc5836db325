"""Quiz Notifications - Result emails."""

from .email_service import EmailNotifier, NotificationResult, QuizResultsEmail

__all__ = ["EmailNotifier", "NotificationResult", "QuizResultsEmail"]
