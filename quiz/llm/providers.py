"""Completion Providers - Chat-completion endpoints behind one interface."""

import logging
from typing import Protocol

import httpx

from core.config import ProviderConfig
from core.exceptions import ProviderFailureError, ProviderUnavailableError

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    """Anything that turns a prompt into completion text."""

    name: str

    @property
    def is_available(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


class ChatCompletionProvider:
    """OpenAI-compatible ``/chat/completions`` endpoint.

    OpenRouter, Groq and the Hugging Face router all accept the same body
    (``model``, ``messages``, ``temperature``, ``max_tokens``) with a bearer
    token and answer with ``choices[0].message.content``.

    Example:
        >>> provider = ChatCompletionProvider(config, client)
        >>> text = await provider.complete("Generate 3 questions about fractions")
    """

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        timeout: float = 30.0,
    ):
        self.config = config
        self.client = client
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def is_available(self) -> bool:
        return self.config.is_available

    def build_request(self, prompt: str) -> tuple[dict[str, str], dict]:
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            **self.config.extra_headers,
        }
        body = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": self.config.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        return headers, body

    async def complete(self, prompt: str) -> str:
        """Send one request and return the completion text.

        Raises:
            ProviderUnavailableError: No credential configured
            ProviderFailureError: Transport error, timeout, non-2xx status or
                a payload without completion text
        """
        if not self.is_available:
            raise ProviderUnavailableError(
                f"{self.name}: no API key configured", {"provider": self.name}
            )

        headers, body = self.build_request(prompt)
        try:
            response = await self.client.post(
                self.config.url, json=body, headers=headers, timeout=self.timeout
            )
        except httpx.TimeoutException as e:
            raise ProviderFailureError(self.name, f"timeout after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ProviderFailureError(self.name, f"transport error: {e}") from e

        if not response.is_success:
            raise ProviderFailureError(
                self.name,
                f"HTTP {response.status_code}",
                {"status_code": response.status_code, "body": response.text[:200]},
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderFailureError(self.name, "malformed response payload") from e

        if not isinstance(content, str) or not content.strip():
            raise ProviderFailureError(self.name, "empty completion")

        logger.debug(f"{self.name} returned {len(content)} chars")
        return content
