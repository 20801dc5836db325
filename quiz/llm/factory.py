"""Gateway Factory - Builds the provider chains from configuration."""

import httpx

from core.config import ProviderConfig, QuizzerConfig

from .gateway import CompletionGateway
from .providers import ChatCompletionProvider


class GatewayFactory:
    """Creates one ``CompletionGateway`` per use case from a config object.

    All gateways share a single ``httpx.AsyncClient`` owned by the factory.
    Tests pass a client built on ``httpx.MockTransport``.

    Example:
        >>> factory = GatewayFactory(get_config())
        >>> questions = factory.question_gateway()
        >>> await factory.aclose()
    """

    def __init__(self, config: QuizzerConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self.client = client or httpx.AsyncClient()

    def _chain(self, providers: list[ProviderConfig]) -> CompletionGateway:
        return CompletionGateway(
            [
                ChatCompletionProvider(p, self.client, timeout=self.config.ai_timeout_seconds)
                for p in providers
            ]
        )

    def question_gateway(self) -> CompletionGateway:
        return self._chain(self.config.question_providers)

    def suggestion_gateway(self) -> CompletionGateway:
        return self._chain(self.config.suggestion_providers)

    def hint_gateway(self) -> CompletionGateway:
        return self._chain(self.config.hint_providers)

    async def aclose(self) -> None:
        await self.client.aclose()
