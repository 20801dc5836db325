"""Exceptions - Error taxonomy shared by the quiz backend.

Only the completion fallback chain recovers locally (provider failures
advance to the next provider). Everything else propagates to the request
boundary, where ``server.py`` maps it to a JSON error response.
"""

from typing import Any


class QuizzerError(Exception):
    """Base error carrying a human-readable message and structured details."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# COMPLETION PROVIDERS
# =============================================================================


class ProviderUnavailableError(QuizzerError):
    """Provider has no credential configured. The chain skips it."""


class ProviderFailureError(QuizzerError):
    """Transport error, timeout, non-2xx status or malformed payload."""

    def __init__(self, provider: str, reason: str, details: dict[str, Any] | None = None):
        super().__init__(f"{provider}: {reason}", {"provider": provider, **(details or {})})
        self.provider = provider
        self.reason = reason


class ParseYieldTooLowError(ProviderFailureError):
    """Provider answered but too few structured items could be parsed."""

    def __init__(self, provider: str, found: int, required: int):
        super().__init__(
            provider,
            f"parsed {found} item(s), need at least {required}",
            {"found": found, "required": required},
        )
        self.found = found
        self.required = required


class InsufficientSuggestionsError(ParseYieldTooLowError):
    """Fewer suggestion lines than required passed the length threshold."""

    def __init__(self, found: int, required: int, provider: str = "parser"):
        super().__init__(provider, found, required)


class AllProvidersExhaustedError(QuizzerError):
    """Every ranked provider failed or was unavailable."""

    status_code = 503

    def __init__(self, attempts: list[dict[str, str]]):
        super().__init__(
            "All AI services failed. Please check your API keys or try again later.",
            {"attempts": attempts},
        )
        self.attempts = attempts


# =============================================================================
# COLLABORATORS
# =============================================================================


class PersistenceUnavailableError(QuizzerError):
    """Database read or write failed."""

    status_code = 503


class NotificationError(QuizzerError):
    """Email could not be delivered. Never fails the enclosing request."""


# =============================================================================
# REQUEST ERRORS
# =============================================================================


class AuthenticationError(QuizzerError):
    status_code = 401


class InvalidInputError(QuizzerError):
    status_code = 400


class NotFoundError(QuizzerError):
    status_code = 404


class ConflictError(QuizzerError):
    status_code = 409
