"""Completion Gateway - Ranked provider fallback chain."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from core.exceptions import (
    AllProvidersExhaustedError,
    ParseYieldTooLowError,
    ProviderFailureError,
    ProviderUnavailableError,
)

from ..engine.parser import parse_questions
from .providers import CompletionProvider

logger = logging.getLogger(__name__)

Parser = Callable[[str, int], list[Any]]


class CompletionGateway:
    """Walks an ordered list of providers until one yields usable output.

    Providers are tried one at a time; each attempt is awaited to
    completion before the next starts. Unavailable providers are skipped,
    failing ones are logged and the chain advances. Only exhaustion of the
    whole list is fatal.

    Example:
        >>> gateway = CompletionGateway([openrouter, groq, huggingface])
        >>> questions = await gateway.generate(prompt, expected_count=5)
    """

    def __init__(self, providers: Sequence[CompletionProvider]):
        self.providers = list(providers)

    async def generate(
        self,
        prompt: str,
        expected_count: int,
        parser: Parser = parse_questions,
        min_count: int = 1,
    ) -> list[Any]:
        """Return the first provider's parsed items.

        Args:
            prompt: Rendered prompt
            expected_count: Number of items requested from the parser
            parser: ``(text, expected_count) -> items``. May raise
                ``ProviderFailureError`` subclasses to reject the output.
            min_count: Fewest items accepted before trying the next provider

        Returns:
            Up to ``expected_count`` items from a single provider

        Raises:
            AllProvidersExhaustedError: No provider produced ``min_count`` items
        """
        attempts: list[dict[str, str]] = []

        for provider in self.providers:
            try:
                text = await provider.complete(prompt)
                items = parser(text, expected_count)
                if len(items) < min_count:
                    raise ParseYieldTooLowError(provider.name, len(items), min_count)
            except ProviderUnavailableError:
                logger.debug(f"Skipping {provider.name}: no credential")
                attempts.append({"provider": provider.name, "outcome": "unavailable"})
                continue
            except ProviderFailureError as e:
                logger.warning(f"Provider {provider.name} failed: {e.reason}")
                attempts.append({"provider": provider.name, "outcome": e.reason})
                continue

            logger.info(f"{provider.name} produced {len(items)}/{expected_count} item(s)")
            return items

        logger.error(f"All providers exhausted after {len(attempts)} attempt(s)")
        raise AllProvidersExhaustedError(attempts)

    async def complete(self, prompt: str) -> str:
        """Return the first non-empty completion text (no parsing)."""
        items = await self.generate(prompt, 1, parser=_as_single_text)
        return items[0]


def _as_single_text(text: str, expected_count: int) -> list[str]:
    stripped = text.strip()
    return [stripped] if stripped else []
