"""
Provider backend protocol and the uniform request/response shapes.

Every chat-completion backend receives the same CompletionRequest and
returns the same CompletionResult. Only backends know their wire shapes.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from business_dna.models import Message, ProviderConfig


@dataclass
class CompletionRequest:
    """One uniform completion request."""

    config: ProviderConfig
    system_prompt: str
    messages: List[Message] = field(default_factory=list)
    temperature: float = 0.7
    max_tokens: int = 2000

    @property
    def credential(self) -> str:
        """Plain credential for the wire; empty if the backend needs none."""
        if self.config.credential is None:
            return ""
        return self.config.credential.get_secret_value()


@dataclass
class CompletionResult:
    """Normalized backend response."""

    content: str
    tokens_used: Optional[int] = None


class ChatBackend(Protocol):
    """
    Protocol for chat-completion backends.

    Implementations translate the request into their wire shape, normalize
    the response and raise ProviderError for every transport, HTTP or
    envelope failure. They never retry.
    """

    name: str
    requires_credential: bool

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        """
        Execute one completion.

        Args:
            request: The uniform request

        Returns:
            The normalized result

        Raises:
            ProviderError: If the call failed or the response was malformed
        """
        ...
