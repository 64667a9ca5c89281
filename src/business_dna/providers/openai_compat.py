"""
OpenAI-compatible chat-completions backend.

Used for OpenAI itself and for Groq, DeepSeek and OpenRouter, which accept
the same request shape with the system prompt inline as the first message.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from business_dna.errors import ProviderError
from business_dna.providers.base import CompletionRequest, CompletionResult

logger = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
DEEPSEEK_URL = "https://api.deepseek.com/chat/completions"
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


class OpenAICompatibleBackend:
    """Backend for any endpoint speaking the OpenAI chat-completions protocol."""

    requires_credential = True

    def __init__(
        self,
        name: str,
        url: str,
        client: httpx.AsyncClient,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        self.name = name
        self.url = url
        self.client = client
        self.extra_headers = extra_headers or {}

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [{"role": "system", "content": request.system_prompt}]
        messages.extend({"role": m.role, "content": m.content} for m in request.messages)
        return {
            "model": request.config.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        headers = {
            "Authorization": f"Bearer {request.credential}",
            "Content-Type": "application/json",
            **self.extra_headers,
        }

        try:
            response = await self.client.post(
                self.url, json=self.build_payload(request), headers=headers
            )
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except httpx.HTTPError as e:
            raise ProviderError(self.name, e) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(self.name, e, "malformed response envelope") from e

        if not isinstance(content, str):
            raise ProviderError(self.name, message="response has no text content")

        usage = data.get("usage") or {}
        tokens = usage.get("total_tokens")
        logger.debug(f"{self.name} completion: model={request.config.model}, tokens={tokens}")
        return CompletionResult(content=content, tokens_used=tokens)
