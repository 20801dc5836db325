"""Configuration - Settings loaded from the process environment.

Provider credentials are read once here and handed to the gateway as
explicit objects, so tests build a ``QuizzerConfig`` directly instead of
mutating ``os.environ``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

# =============================================================================
# PROVIDER ENDPOINTS
# =============================================================================

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
HUGGINGFACE_URL = "https://router.huggingface.co/v1/chat/completions"

QUESTION_SYSTEM_PROMPT = (
    "You are an expert educator. Generate high-quality quiz questions in the "
    "exact format requested. Be precise and educational."
)
SUGGESTION_SYSTEM_PROMPT = (
    "You are a helpful tutor. Provide exactly 3 specific study suggestions as a "
    "numbered list. Be encouraging and actionable."
)
HINT_SYSTEM_PROMPT = (
    "You are a helpful quiz assistant. Provide hints that guide users toward the "
    "answer without revealing it directly. Keep hints concise and educational."
)

# Ranked free models tried in order for study suggestions
SUGGESTION_MODELS = [
    "google/gemma-2-9b-it:free",
    "microsoft/phi-3-medium-128k-instruct:free",
    "microsoft/phi-3-mini-128k-instruct:free",
    "meta-llama/llama-3.2-11b-vision-instruct:free",
    "meta-llama/llama-3.2-3b-instruct:free",
    "meta-llama/llama-3.2-1b-instruct:free",
    "qwen/qwen-2-7b-instruct:free",
    "huggingfaceh4/zephyr-7b-beta:free",
]


class EmailService(str, Enum):
    """SMTP presets supported by the notifier."""

    GMAIL = "gmail"
    SMTP = "smtp"
    SENDGRID = "sendgrid"


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class ProviderConfig:
    """One ranked entry of a completion fallback chain."""

    name: str
    url: str
    model: str
    api_key: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    system_prompt: str = QUESTION_SYSTEM_PROMPT
    extra_headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_available(self) -> bool:
        """A provider without a credential is skipped, not failed."""
        return bool(self.api_key)


@dataclass
class EmailConfig:
    """SMTP settings for result notifications."""

    enabled: bool = True
    service: EmailService = EmailService.GMAIL
    user: str | None = None
    sender: str | None = None
    password: str | None = None
    host: str = "smtp.gmail.com"
    port: int = 587
    use_tls: bool = True
    sender_name: str = "AI Quiz Generator"

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.user) and bool(self.password)

    @classmethod
    def from_env(cls, app_name: str) -> EmailConfig:
        service_name = os.getenv("EMAIL_SERVICE", EmailService.GMAIL.value).lower()
        try:
            service = EmailService(service_name)
        except ValueError:
            service = EmailService.GMAIL

        user = os.getenv("EMAIL_USER")
        if service == EmailService.SMTP:
            host = os.getenv("SMTP_HOST", "localhost")
            password = os.getenv("EMAIL_PASSWORD")
        elif service == EmailService.SENDGRID:
            host = "smtp.sendgrid.net"
            password = os.getenv("SENDGRID_API_KEY")
        else:
            host = "smtp.gmail.com"
            password = os.getenv("EMAIL_APP_PASSWORD")

        # SendGrid authenticates with the literal user "apikey"
        login = "apikey" if service == EmailService.SENDGRID else user

        return cls(
            enabled=_env_bool("EMAIL_ENABLED", True),
            service=service,
            user=login,
            sender=user,
            password=password,
            host=host,
            port=int(os.getenv("SMTP_PORT", "587")),
            sender_name=app_name,
        )


@dataclass
class QuizzerConfig:
    """Process-wide settings for the quiz backend."""

    environment: str = "development"
    log_level: str = "INFO"
    database_path: str = "quizzer.db"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60
    ai_timeout_seconds: float = 30.0
    rate_limit_enabled: bool = True
    app_name: str = "AI Quiz Generator"
    app_url: str = "http://localhost:8080"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    question_providers: list[ProviderConfig] = field(default_factory=list)
    suggestion_providers: list[ProviderConfig] = field(default_factory=list)
    hint_providers: list[ProviderConfig] = field(default_factory=list)
    email: EmailConfig = field(default_factory=EmailConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> QuizzerConfig:
        """Build the configuration from environment variables."""
        app_name = os.getenv("APP_NAME", "AI Quiz Generator")
        app_url = os.getenv("APP_URL", "http://localhost:8080")

        openrouter_key = os.getenv("OPENROUTER_API_KEY")
        groq_key = os.getenv("GROQ_API_KEY")
        hf_key = os.getenv("HUGGINGFACE_API_KEY")
        openrouter_headers = {"HTTP-Referer": app_url, "X-Title": app_name}

        question_providers = [
            ProviderConfig(
                name="openrouter",
                url=OPENROUTER_URL,
                model="meta-llama/llama-3.2-3b-instruct:free",
                api_key=openrouter_key,
                extra_headers=openrouter_headers,
            ),
            ProviderConfig(
                name="groq",
                url=GROQ_URL,
                model="llama3-8b-8192",
                api_key=groq_key,
            ),
            ProviderConfig(
                name="huggingface",
                url=HUGGINGFACE_URL,
                model="meta-llama/Llama-3.1-8B-Instruct",
                api_key=hf_key,
                temperature=0.8,
                max_tokens=1500,
            ),
        ]

        suggestion_providers = [
            ProviderConfig(
                name=f"openrouter:{model}",
                url=OPENROUTER_URL,
                model=model,
                api_key=openrouter_key,
                max_tokens=700,
                system_prompt=SUGGESTION_SYSTEM_PROMPT,
                extra_headers=openrouter_headers,
            )
            for model in SUGGESTION_MODELS
        ]

        hint_providers = [
            ProviderConfig(
                name="openrouter:hint",
                url=OPENROUTER_URL,
                model="openai/gpt-3.5-turbo",
                api_key=openrouter_key,
                max_tokens=100,
                system_prompt=HINT_SYSTEM_PROMPT,
                extra_headers=openrouter_headers,
            )
        ]

        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            database_path=os.getenv("DATABASE_PATH", "quizzer.db"),
            jwt_secret=os.getenv("JWT_SECRET", "change-me"),
            jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "60")),
            ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "30")),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            app_name=app_name,
            app_url=app_url,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            question_providers=question_providers,
            suggestion_providers=suggestion_providers,
            hint_providers=hint_providers,
            email=EmailConfig.from_env(app_name),
        )

    def available_providers(self) -> dict[str, list[str]]:
        """Names of the providers holding a credential, per chain."""
        return {
            "questions": [p.name for p in self.question_providers if p.is_available],
            "suggestions": [p.name for p in self.suggestion_providers if p.is_available],
            "hints": [p.name for p in self.hint_providers if p.is_available],
        }


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# SINGLETON
# =============================================================================

_config: QuizzerConfig | None = None


def get_config() -> QuizzerConfig:
    """Return the process configuration, loading it on first use."""
    global _config
    if _config is None:
        env_file = Path.cwd() / ".env"
        if env_file.exists():
            load_dotenv(env_file)
        _config = QuizzerConfig.from_env()
    return _config


def reload_config() -> QuizzerConfig:
    """Discard the cached configuration and read the environment again."""
    global _config
    _config = None
    return get_config()
