"""Core - Configuration, logging, errors and authentication."""

from .config import QuizzerConfig, get_config, reload_config
from .exceptions import (
    AllProvidersExhaustedError,
    AuthenticationError,
    ConflictError,
    InsufficientSuggestionsError,
    InvalidInputError,
    NotFoundError,
    NotificationError,
    ParseYieldTooLowError,
    PersistenceUnavailableError,
    ProviderFailureError,
    ProviderUnavailableError,
    QuizzerError,
)
from .logger import get_logger, setup_logging

__all__ = [
    "QuizzerConfig",
    "get_config",
    "reload_config",
    "get_logger",
    "setup_logging",
    "QuizzerError",
    "ProviderUnavailableError",
    "ProviderFailureError",
    "ParseYieldTooLowError",
    "InsufficientSuggestionsError",
    "AllProvidersExhaustedError",
    "PersistenceUnavailableError",
    "NotificationError",
    "AuthenticationError",
    "InvalidInputError",
    "NotFoundError",
    "ConflictError",
]
