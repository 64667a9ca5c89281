"""
Anthropic Messages API backend.

The system prompt goes in a separate top-level field, not in the messages.
"""

import logging
from typing import Any, Dict

import httpx

from business_dna.errors import ProviderError
from business_dna.providers.base import CompletionRequest, CompletionResult

logger = logging.getLogger(__name__)

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicBackend:
    name = "anthropic"
    requires_credential = True

    def __init__(self, client: httpx.AsyncClient, url: str = ANTHROPIC_URL):
        self.client = client
        self.url = url

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": request.config.model,
            "system": request.system_prompt,
            "messages": [{"role": m.role, "content": m.content} for m in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        headers = {
            "x-api-key": request.credential,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }

        try:
            response = await self.client.post(
                self.url, json=self.build_payload(request), headers=headers
            )
            response.raise_for_status()
            data = response.json()
            blocks = data["content"]
            content = "".join(
                block["text"] for block in blocks if block.get("type", "text") == "text"
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.name, e) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(self.name, e, "malformed response envelope") from e

        usage = data.get("usage") or {}
        tokens = None
        if "input_tokens" in usage or "output_tokens" in usage:
            tokens = usage.get("input_tokens", 0) + usage.get("output_tokens", 0)

        logger.debug(f"anthropic completion: model={request.config.model}, tokens={tokens}")
        return CompletionResult(content=content, tokens_used=tokens)
