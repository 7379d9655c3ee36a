"""Unit tests for the reasoning service clients."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from plan_review.core.anthropic_client import ANTHROPIC_VERSION, AnthropicClient, to_message_content
from plan_review.core.base_llm_client import BaseLLMClient
from plan_review.core.exceptions import APIClientError, ConfigurationError
from plan_review.core.openrouter_client import OpenRouterClient
from plan_review.core.unified_llm import LLMProvider, UnifiedLLMClient, create_llm_client_from_settings


class TestToMessageContent:

    def test_string(self):
        assert to_message_content("hello") == [{"type": "text", "text": "hello"}]

    def test_mixed_parts(self):
        blocks = to_message_content([
            {"text": "Extract this"},
            {"document_base64": "JVBERi0=", "media_type": "application/pdf"},
            "trailing",
        ])

        assert blocks[0] == {"type": "text", "text": "Extract this"}
        assert blocks[1] == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": "JVBERi0="},
        }
        assert blocks[2] == {"type": "text", "text": "trailing"}


class TestAnthropicClient:

    @pytest.mark.asyncio
    async def test_generate_content_joins_text_blocks(self):
        client = AnthropicClient(api_key="test-key", model="claude-test")
        response = {
            "content": [{"type": "text", "text": '{"summary":'}, {"type": "text", "text": ' "ok"}'}],
            "stop_reason": "end_turn",
        }

        with patch.object(client.client, "call_api", new=AsyncMock(return_value=response)) as call_api:
            text = await client.generate_content(
                "review", system_instruction="system", generation_config={"temperature": 0.0}
            )

        assert text == '{"summary": "ok"}'
        kwargs = call_api.await_args.kwargs
        assert kwargs["headers"] == {"anthropic-version": ANTHROPIC_VERSION}
        assert kwargs["payload"]["system"] == "system"
        assert kwargs["payload"]["model"] == "claude-test"
        assert kwargs["payload"]["temperature"] == 0.0

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        client = AnthropicClient(api_key="test-key")

        with patch.object(client.client, "call_api", new=AsyncMock(return_value={"content": []})):
            with pytest.raises(APIClientError):
                await client.generate_content("review")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[{"type": "text", "text": "{}"}], {"content": "plain text"}, "text"])
    async def test_malformed_envelope_raises_client_error(self, body):
        client = AnthropicClient(api_key="test-key")

        with patch.object(client.client, "call_api", new=AsyncMock(return_value=body)):
            with pytest.raises(APIClientError, match="Invalid response format"):
                await client.generate_content("review")

    def test_authenticates_with_api_key_header(self):
        client = AnthropicClient(api_key="test-key")

        headers = client.client._default_headers()

        assert headers["x-api-key"] == "test-key"
        assert "Authorization" not in headers


class TestOpenRouterClient:

    @pytest.mark.asyncio
    async def test_document_parts_are_dropped(self):
        client = OpenRouterClient(api_key="test-key")
        response = {"choices": [{"message": {"content": "{}"}}]}

        with patch.object(client.client, "call_api", new=AsyncMock(return_value=response)) as call_api:
            await client.generate_content(
                [{"text": "Extract this"}, {"document_base64": "JVBERi0="}],
                system_instruction="system",
            )

        messages = call_api.await_args.kwargs["payload"]["messages"]
        assert messages == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "Extract this"},
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            [{"message": {"content": "{}"}}],
            {"choices": ["{}"]},
            {"choices": [{"message": "{}"}]},
            {"choices": [{"message": {"content": ["{}"]}}]},
        ],
    )
    async def test_malformed_envelope_raises_client_error(self, body):
        client = OpenRouterClient(api_key="test-key")

        with patch.object(client.client, "call_api", new=AsyncMock(return_value=body)):
            with pytest.raises(APIClientError, match="Invalid response format"):
                await client.generate_content("review")

    @pytest.mark.asyncio
    async def test_missing_choices_raises(self):
        client = OpenRouterClient(api_key="test-key")

        with patch.object(client.client, "call_api", new=AsyncMock(return_value={"error": "quota"})):
            with pytest.raises(APIClientError):
                await client.generate_content("review")


class TestUnifiedLLMClient:

    def test_anthropic_supports_documents(self):
        client = UnifiedLLMClient(provider="anthropic", api_key="key", model="claude-test")

        assert client.provider == LLMProvider.ANTHROPIC
        assert client.supports_documents is True

    def test_openrouter_does_not_support_documents(self):
        client = UnifiedLLMClient(provider="openrouter", api_key="key", model="any/model")

        assert client.supports_documents is False

    def test_factory_requires_provider_key(self):
        with pytest.raises(ConfigurationError):
            create_llm_client_from_settings(provider="anthropic", anthropic_api_key="")

    def test_factory_rejects_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            create_llm_client_from_settings(provider="gemini", anthropic_api_key="key")

    def test_factory_selects_provider_settings(self):
        client = create_llm_client_from_settings(
            provider="OpenRouter",
            openrouter_api_key=" key ",
            openrouter_model="anthropic/claude-test",
        )

        assert client.provider == LLMProvider.OPENROUTER
        assert client.model == "anthropic/claude-test"


class TestBaseLLMClient:

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        request = httpx.Request("POST", "https://api.example.com")
        response = httpx.Response(400, request=request, text="bad request")
        client = BaseLLMClient(api_key="key", base_url="https://api.example.com", max_retries=3)

        with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=response)) as post:
            with pytest.raises(APIClientError):
                await client.call_api(payload={})

        assert post.await_count == 1

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self):
        request = httpx.Request("POST", "https://api.example.com")
        failure = httpx.Response(503, request=request, text="unavailable")
        success = httpx.Response(200, request=request, json={"ok": True})
        client = BaseLLMClient(api_key="key", base_url="https://api.example.com", max_retries=2, retry_delay=0)

        with patch("httpx.AsyncClient.post", new=AsyncMock(side_effect=[failure, success])) as post:
            result = await client.call_api(payload={})

        assert result == {"ok": True}
        assert post.await_count == 2
