"""
Provider gateway over chat-completion backends.
"""

from business_dna.providers.anthropic import AnthropicBackend
from business_dna.providers.base import ChatBackend, CompletionRequest, CompletionResult
from business_dna.providers.gateway import ProviderGateway, default_backends
from business_dna.providers.gemini import GeminiBackend
from business_dna.providers.ollama import OllamaBackend
from business_dna.providers.openai_compat import OpenAICompatibleBackend
from business_dna.providers.selection import DEFAULT_MODELS, ProviderSelector

__all__ = [
    "ChatBackend",
    "CompletionRequest",
    "CompletionResult",
    "ProviderGateway",
    "ProviderSelector",
    "DEFAULT_MODELS",
    "default_backends",
    "OpenAICompatibleBackend",
    "AnthropicBackend",
    "GeminiBackend",
    "OllamaBackend",
]
