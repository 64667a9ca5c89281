"""
Google Gemini generateContent backend.

Gemini takes the system prompt as `systemInstruction` and calls the
assistant role "model".
"""

import logging
from typing import Any, Dict

import httpx

from business_dna.errors import ProviderError
from business_dna.providers.base import CompletionRequest, CompletionResult

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiBackend:
    name = "gemini"
    requires_credential = True

    def __init__(self, client: httpx.AsyncClient, base_url: str = GEMINI_BASE_URL):
        self.client = client
        self.base_url = base_url

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": request.system_prompt}]},
            "contents": [
                {"role": ROLE_MAP[m.role], "parts": [{"text": m.content}]}
                for m in request.messages
            ],
            "generationConfig": {
                "temperature": request.temperature,
                "maxOutputTokens": request.max_tokens,
            },
        }

    async def complete(self, request: CompletionRequest) -> CompletionResult:
        url = f"{self.base_url}/{request.config.model}:generateContent"
        # Key in a header so it never ends up in a logged URL
        headers = {"x-goog-api-key": request.credential, "Content-Type": "application/json"}

        try:
            response = await self.client.post(url, json=self.build_payload(request), headers=headers)
            response.raise_for_status()
            data = response.json()
            parts = data["candidates"][0]["content"]["parts"]
            content = "".join(part.get("text", "") for part in parts)
        except httpx.HTTPError as e:
            raise ProviderError(self.name, e) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(self.name, e, "malformed response envelope") from e

        tokens = (data.get("usageMetadata") or {}).get("totalTokenCount")
        logger.debug(f"gemini completion: model={request.config.model}, tokens={tokens}")
        return CompletionResult(content=content, tokens_used=tokens)
