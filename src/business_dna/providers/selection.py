"""
Provider selection: which provider and model an operator's turn runs on.
"""

import logging
from typing import Dict, List, Optional

from business_dna.config import Settings, get_settings
from business_dna.errors import ConfigurationError
from business_dna.models import ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-sonnet-latest",
    "gemini": "gemini-1.5-pro",
    "groq": "llama-3.3-70b-versatile",
    "deepseek": "deepseek-chat",
    "openrouter": "anthropic/claude-3.5-sonnet",
    "ollama": "qwen2.5:7b-instruct",
}


class ProviderSelector:
    """
    Resolves a ProviderConfig per operator.

    Resolution order: the per-call preference, the operator's stored
    preference, DEFAULT_PROVIDER, then the first provider in
    PROVIDER_PRIORITY that has a credential.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        operator_preferences: Optional[Dict[str, str]] = None,
        models: Optional[Dict[str, str]] = None,
    ):
        self.settings = settings or get_settings()
        self.operator_preferences = dict(operator_preferences or {})
        self.models = {**DEFAULT_MODELS, **(models or {})}

    def set_preference(self, operator_id: str, provider: str) -> None:
        self.operator_preferences[operator_id] = provider

    def config_for(self, provider: str) -> ProviderConfig:
        model = self.models.get(provider)
        if model is None:
            raise ConfigurationError(f"Unknown provider: {provider}")
        return ProviderConfig(
            provider=provider, model=model, credential=self.settings.credential_for(provider)
        )

    def _has_credential(self, provider: str) -> bool:
        credential = self.settings.credential_for(provider)
        return credential is not None and bool(credential.get_secret_value())

    def resolve(self, operator_id: str, preference: Optional[str] = None) -> ProviderConfig:
        """
        Pick the provider config for an operator.

        Raises:
            ConfigurationError: If no provider can be resolved
        """
        provider = (
            preference
            or self.operator_preferences.get(operator_id)
            or self.settings.DEFAULT_PROVIDER
        )
        if provider is None:
            provider = next(
                (p for p in self.settings.PROVIDER_PRIORITY if self._has_credential(p)), None
            )
        if provider is None:
            raise ConfigurationError("No AI provider configured: set a provider API key")

        config = self.config_for(provider)
        logger.debug(f"Resolved provider {config.provider} ({config.model}) for {operator_id}")
        return config

    def fallbacks(self, primary: ProviderConfig) -> List[ProviderConfig]:
        """Other credentialed providers in priority order, excluding the primary."""
        return [
            self.config_for(p)
            for p in self.settings.PROVIDER_PRIORITY
            if p != primary.provider and p in self.models and self._has_credential(p)
        ]
