"""
Local Ollama backend through casual-llm.
"""

import logging
from typing import Callable, Dict, List, Optional

from casual_llm import (
    AssistantMessage,
    ChatMessage,
    LLMProvider,
    ModelConfig,
    Provider,
    SystemMessage,
    UserMessage,
    create_provider,
)

from business_dna.errors import ProviderError
from business_dna.models import Message
from business_dna.providers.base import CompletionRequest, CompletionResult

logger = logging.getLogger(__name__)


def to_chat_messages(system_prompt: str, messages: List[Message]) -> List[ChatMessage]:
    chat: List[ChatMessage] = [SystemMessage(content=system_prompt)]
    for message in messages:
        if message.role == "assistant":
            chat.append(AssistantMessage(content=message.content))
        else:
            chat.append(UserMessage(content=message.content))
    return chat


class OllamaBackend:
    """
    Backend for a local Ollama server. Needs no credential.

    One casual-llm provider is created and reused per model.
    """

    name = "ollama"
    requires_credential = False

    def __init__(
        self,
        base_url: Optional[str] = None,
        provider_factory: Callable[[ModelConfig], LLMProvider] = create_provider,
    ):
        self.base_url = base_url
        self.provider_factory = provider_factory
        self._providers: Dict[str, LLMProvider] = {}

    def _provider(self, model: str) -> LLMProvider:
        if model not in self._providers:
            self._providers[model] = self.provider_factory(
                ModelConfig(name=model, provider=Provider.OLLAMA, base_url=self.base_url)
            )
            logger.info(f"Created Ollama provider for model {model}")
        return self._providers[model]

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        provider = self._provider(request.config.model)
        try:
            response = await provider.chat(
                messages=to_chat_messages(request.system_prompt, request.messages),
                response_format="text",
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        except Exception as e:
            raise ProviderError(self.name, e) from e

        if not isinstance(response.content, str):
            raise ProviderError(self.name, message="response has no text content")

        tokens = self._tokens_used(provider)
        logger.debug(f"ollama completion: model={request.config.model}, tokens={tokens}")
        return CompletionResult(content=response.content, tokens_used=tokens)

    @staticmethod
    def _tokens_used(provider: LLMProvider) -> Optional[int]:
        """Total tokens of the last call, if the provider tracks usage."""
        usage = provider.get_usage()
        return usage.total_tokens if usage is not None else None
