"""
Tests for the chat-completion backends.

HTTP backends run against httpx.MockTransport; the Ollama backend gets a
mocked casual-llm provider.
"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from casual_llm import AssistantMessage, SystemMessage, UserMessage
from pydantic import SecretStr

from business_dna.errors import ProviderError
from business_dna.models import Message, ProviderConfig
from business_dna.providers import (
    AnthropicBackend,
    CompletionRequest,
    GeminiBackend,
    OllamaBackend,
    OpenAICompatibleBackend,
)
from business_dna.providers.ollama import to_chat_messages


def make_request(provider="openai", model="test-model", credential="secret-key"):
    return CompletionRequest(
        config=ProviderConfig(
            provider=provider,
            model=model,
            credential=SecretStr(credential) if credential else None,
        ),
        system_prompt="You are a business assistant.",
        messages=[
            Message(conversation_id="c1", role="user", content="How are my reviews?"),
            Message(conversation_id="c1", role="assistant", content="Mostly positive."),
            Message(conversation_id="c1", role="user", content="And this week?"),
        ],
        temperature=0.5,
        max_tokens=300,
    )


def mock_client(handler, captured=None):
    def wrapped(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(wrapped))


@pytest.mark.asyncio
async def test_openai_compatible_request_and_response():
    """Test the system message goes first and usage is normalized."""
    captured = []
    client = mock_client(
        lambda request: httpx.Response(
            200,
            json={
                "choices": [{"message": {"role": "assistant", "content": "Reviews are up."}}],
                "usage": {"total_tokens": 57},
            },
        ),
        captured,
    )
    backend = OpenAICompatibleBackend("groq", "https://groq.test/v1/chat/completions", client)

    result = await backend.complete(make_request("groq"))

    assert result.content == "Reviews are up."
    assert result.tokens_used == 57

    request = captured[0]
    body = json.loads(request.content)
    assert str(request.url) == "https://groq.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer secret-key"
    assert body["model"] == "test-model"
    assert body["messages"][0] == {"role": "system", "content": "You are a business assistant."}
    assert [m["role"] for m in body["messages"][1:]] == ["user", "assistant", "user"]
    assert body["temperature"] == 0.5
    assert body["max_tokens"] == 300


@pytest.mark.asyncio
async def test_openai_compatible_extra_headers():
    captured = []
    client = mock_client(
        lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}),
        captured,
    )
    backend = OpenAICompatibleBackend(
        "openrouter", "https://router.test", client, extra_headers={"HTTP-Referer": "https://app.test"}
    )

    result = await backend.complete(make_request("openrouter"))

    assert result.tokens_used is None
    assert captured[0].headers["HTTP-Referer"] == "https://app.test"


@pytest.mark.asyncio
async def test_http_error_becomes_provider_error():
    client = mock_client(lambda request: httpx.Response(500, json={"error": "overloaded"}))
    backend = OpenAICompatibleBackend("openai", "https://openai.test", client)

    with pytest.raises(ProviderError) as exc_info:
        await backend.complete(make_request())

    assert exc_info.value.provider == "openai"
    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_transport_error_becomes_provider_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    backend = OpenAICompatibleBackend("openai", "https://openai.test", mock_client(refuse))

    with pytest.raises(ProviderError):
        await backend.complete(make_request())


@pytest.mark.asyncio
async def test_malformed_envelope_becomes_provider_error():
    client = mock_client(lambda request: httpx.Response(200, json={"choices": []}))
    backend = OpenAICompatibleBackend("deepseek", "https://deepseek.test", client)

    with pytest.raises(ProviderError, match="malformed response envelope"):
        await backend.complete(make_request("deepseek"))


@pytest.mark.asyncio
async def test_anthropic_request_and_response():
    """Test the separate system field and summed token usage."""
    captured = []
    client = mock_client(
        lambda request: httpx.Response(
            200,
            json={
                "content": [{"type": "text", "text": "Your rating "}, {"type": "text", "text": "is 4.0."}],
                "usage": {"input_tokens": 40, "output_tokens": 12},
            },
        ),
        captured,
    )
    backend = AnthropicBackend(client, url="https://anthropic.test/v1/messages")

    result = await backend.complete(make_request("anthropic"))

    assert result.content == "Your rating is 4.0."
    assert result.tokens_used == 52

    request = captured[0]
    body = json.loads(request.content)
    assert request.headers["x-api-key"] == "secret-key"
    assert request.headers["anthropic-version"] == "2023-06-01"
    assert body["system"] == "You are a business assistant."
    assert all(m["role"] != "system" for m in body["messages"])
    assert len(body["messages"]) == 3


@pytest.mark.asyncio
async def test_anthropic_malformed_envelope():
    client = mock_client(lambda request: httpx.Response(200, json={"id": "msg_1"}))

    with pytest.raises(ProviderError):
        await AnthropicBackend(client).complete(make_request("anthropic"))


@pytest.mark.asyncio
async def test_gemini_request_and_response():
    """Test systemInstruction, the model role and the key header."""
    captured = []
    client = mock_client(
        lambda request: httpx.Response(
            200,
            json={
                "candidates": [{"content": {"parts": [{"text": "Post on Friday."}]}}],
                "usageMetadata": {"totalTokenCount": 33},
            },
        ),
        captured,
    )
    backend = GeminiBackend(client, base_url="https://gemini.test/models")

    result = await backend.complete(make_request("gemini", model="gemini-1.5-pro"))

    assert result.content == "Post on Friday."
    assert result.tokens_used == 33

    request = captured[0]
    body = json.loads(request.content)
    assert str(request.url) == "https://gemini.test/models/gemini-1.5-pro:generateContent"
    assert "key=" not in str(request.url)
    assert request.headers["x-goog-api-key"] == "secret-key"
    assert body["systemInstruction"]["parts"][0]["text"] == "You are a business assistant."
    assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
    assert body["generationConfig"]["maxOutputTokens"] == 300


@pytest.mark.asyncio
async def test_gemini_without_candidates():
    client = mock_client(lambda request: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(ProviderError):
        await GeminiBackend(client).complete(make_request("gemini"))


def test_to_chat_messages():
    request = make_request("ollama")

    chat = to_chat_messages(request.system_prompt, request.messages)

    assert isinstance(chat[0], SystemMessage)
    assert isinstance(chat[1], UserMessage)
    assert isinstance(chat[2], AssistantMessage)
    assert chat[3].content == "And this week?"


@pytest.mark.asyncio
async def test_ollama_backend_uses_casual_llm_provider():
    """Test that one provider is created per model and reused."""
    provider = Mock()
    provider.chat = AsyncMock(return_value=Mock(content="Local answer"))
    provider.get_usage = Mock(return_value=None)
    factory = Mock(return_value=provider)
    backend = OllamaBackend(base_url="http://ollama.test:11434", provider_factory=factory)

    first = await backend.complete(make_request("ollama", credential=None))
    await backend.complete(make_request("ollama", credential=None))

    assert first.content == "Local answer"
    assert first.tokens_used is None
    assert factory.call_count == 1
    config = factory.call_args[0][0]
    assert config.name == "test-model"
    assert config.base_url == "http://ollama.test:11434"

    kwargs = provider.chat.call_args.kwargs
    assert kwargs["response_format"] == "text"
    assert kwargs["temperature"] == 0.5
    assert kwargs["max_tokens"] == 300
    assert isinstance(kwargs["messages"][0], SystemMessage)


@pytest.mark.asyncio
async def test_ollama_failure_becomes_provider_error():
    provider = Mock()
    provider.chat = AsyncMock(side_effect=ConnectionError("ollama not running"))
    backend = OllamaBackend(provider_factory=Mock(return_value=provider))

    with pytest.raises(ProviderError) as exc_info:
        await backend.complete(make_request("ollama", credential=None))

    assert exc_info.value.provider == "ollama"
    assert isinstance(exc_info.value.cause, ConnectionError)


@pytest.mark.asyncio
async def test_ollama_reports_provider_usage():
    provider = Mock()
    provider.chat = AsyncMock(return_value=Mock(content="Local answer"))
    provider.get_usage = Mock(return_value=Mock(total_tokens=21))
    backend = OllamaBackend(provider_factory=Mock(return_value=provider))

    result = await backend.complete(make_request("ollama", credential=None))

    assert result.tokens_used == 21

