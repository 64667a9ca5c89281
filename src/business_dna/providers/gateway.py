"""
Provider gateway: one uniform completion call over every registered backend.
"""

import logging
from typing import Dict, List, Optional

import httpx

from business_dna.config import Settings, get_settings
from business_dna.errors import ConfigurationError
from business_dna.models import Message, ProviderConfig
from business_dna.providers.anthropic import AnthropicBackend
from business_dna.providers.base import ChatBackend, CompletionRequest, CompletionResult
from business_dna.providers.gemini import GeminiBackend
from business_dna.providers.ollama import OllamaBackend
from business_dna.providers.openai_compat import (
    DEEPSEEK_URL,
    GROQ_URL,
    OPENAI_URL,
    OPENROUTER_URL,
    OpenAICompatibleBackend,
)

logger = logging.getLogger(__name__)


def default_backends(client: httpx.AsyncClient, settings: Settings) -> Dict[str, ChatBackend]:
    """The built-in backend registry, keyed by provider name."""
    return {
        "openai": OpenAICompatibleBackend("openai", OPENAI_URL, client),
        "groq": OpenAICompatibleBackend("groq", GROQ_URL, client),
        "deepseek": OpenAICompatibleBackend("deepseek", DEEPSEEK_URL, client),
        "openrouter": OpenAICompatibleBackend(
            "openrouter",
            OPENROUTER_URL,
            client,
            extra_headers={"HTTP-Referer": settings.OPENROUTER_REFERER},
        ),
        "anthropic": AnthropicBackend(client),
        "gemini": GeminiBackend(client),
        "ollama": OllamaBackend(base_url=settings.OLLAMA_BASE_URL),
    }


class ProviderGateway:
    """
    Uniform interface over the registered chat-completion backends.

    The gateway validates configuration before any network call and performs
    no retries. Fallback between providers is the caller's decision.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        backends: Optional[Dict[str, ChatBackend]] = None,
    ):
        """
        Initialize the gateway.

        Args:
            client: Shared HTTP client for the HTTP backends (default: a new AsyncClient)
            settings: Temperature and token limits (default: get_settings())
            backends: Backend registry (default: default_backends())
        """
        self.settings = settings or get_settings()
        self._owns_client = False
        self.client = client
        if backends is None:
            if self.client is None:
                # Provider timeouts are enforced by the caller
                self.client = httpx.AsyncClient(timeout=None)
                self._owns_client = True
            backends = default_backends(self.client, self.settings)
        self.backends = backends

        logger.info(f"ProviderGateway initialized with backends: {', '.join(self.backends)}")

    @property
    def providers(self) -> List[str]:
        return list(self.backends)

    def register(self, name: str, backend: ChatBackend) -> None:
        self.backends[name] = backend

    def validate(self, config: ProviderConfig) -> ChatBackend:
        """
        Check a provider config without touching the network.

        Raises:
            ConfigurationError: Unknown provider, missing model or missing credential
        """
        backend = self.backends.get(config.provider)
        if backend is None:
            raise ConfigurationError(f"Unknown provider: {config.provider}")
        if not config.model:
            raise ConfigurationError(f"No model configured for provider {config.provider}")
        if backend.requires_credential and (
            config.credential is None or not config.credential.get_secret_value()
        ):
            raise ConfigurationError(f"No credential configured for provider {config.provider}")
        return backend

    async def complete(
        self, config: ProviderConfig, system_prompt: str, messages: List[Message]
    ) -> CompletionResult:
        """
        Run one completion on the configured provider.

        Args:
            config: Provider, model and credential
            system_prompt: System instructions
            messages: Conversation turns, oldest first

        Returns:
            Normalized content and token usage

        Raises:
            ConfigurationError: Before any network call, if the config is invalid
            ProviderError: If the backend call failed
        """
        backend = self.validate(config)
        request = CompletionRequest(
            config=config,
            system_prompt=system_prompt,
            messages=list(messages),
            temperature=self.settings.PROVIDER_TEMPERATURE,
            max_tokens=self.settings.PROVIDER_MAX_TOKENS,
        )

        logger.debug(
            f"Completion via {config.provider} (model={config.model}, messages={len(messages)})"
        )
        return await backend.complete(request)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
