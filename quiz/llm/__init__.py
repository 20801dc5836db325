"""Quiz LLM - Completion providers and the fallback gateway."""

from .factory import GatewayFactory
from .gateway import CompletionGateway
from .providers import ChatCompletionProvider, CompletionProvider

__all__ = ["CompletionGateway", "CompletionProvider", "ChatCompletionProvider", "GatewayFactory"]
