"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from ai_edit.clients.llm_client import DEFAULT_TIMEOUT, LLMClient, LLMResponse
from ai_edit.errors import BackendError, MissingCredentialError, TransportError

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


def _client_with(create: AsyncMock):
    """Patch AsyncAnthropic so messages.create is ``create``."""
    patcher = patch("ai_edit.clients.llm_client.anthropic.AsyncAnthropic")
    mock_cls = patcher.start()
    mock_client = MagicMock()
    mock_client.messages.create = create
    mock_cls.return_value = mock_client
    return patcher, mock_cls


class TestLLMClientInit:
    def test_init_disables_sdk_retries(self):
        with patch("ai_edit.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key")
            mock_cls.assert_called_once_with(
                api_key="test-key", timeout=DEFAULT_TIMEOUT, max_retries=0
            )

    def test_init_with_timeout_passes_timeout(self):
        with patch("ai_edit.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=12.0)
            assert mock_cls.call_args.kwargs["timeout"] == 12.0

    def test_init_reads_env_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
        with patch("ai_edit.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            assert mock_cls.call_args.kwargs["api_key"] == "env-key"

    def test_missing_key_raises(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(MissingCredentialError, match="API key not configured"):
            LLMClient()


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        create = AsyncMock(return_value=_make_api_message("hello world", 100, 50))
        patcher, _ = _client_with(create)
        try:
            llm = LLMClient(api_key="k")
            result = await llm.generate("say hello", system="sys", temperature=0.2)
        finally:
            patcher.stop()

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50
        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [{"role": "user", "content": "say hello"}]

    async def test_system_omitted_when_empty(self):
        create = AsyncMock(return_value=_make_api_message("x"))
        patcher, _ = _client_with(create)
        try:
            await LLMClient(api_key="k").generate("p")
        finally:
            patcher.stop()
        assert "system" not in create.call_args.kwargs

    async def test_default_model_used(self):
        create = AsyncMock(return_value=_make_api_message("x"))
        patcher, _ = _client_with(create)
        try:
            await LLMClient(api_key="k", model="claude-haiku-4-5-20251001").generate("p")
        finally:
            patcher.stop()
        assert create.call_args.kwargs["model"] == "claude-haiku-4-5-20251001"

    async def test_empty_content_returns_empty_text(self):
        message = _make_api_message("")
        message.content = []
        patcher, _ = _client_with(AsyncMock(return_value=message))
        try:
            result = await LLMClient(api_key="k").generate("p")
        finally:
            patcher.stop()
        assert result.text == ""

    async def test_connection_error_maps_to_transport_error(self):
        create = AsyncMock(side_effect=anthropic.APIConnectionError(request=_REQUEST))
        patcher, _ = _client_with(create)
        try:
            with pytest.raises(TransportError, match="Network error reaching AI"):
                await LLMClient(api_key="k").generate("p")
        finally:
            patcher.stop()
        assert create.call_count == 1

    async def test_timeout_maps_to_transport_error(self):
        create = AsyncMock(side_effect=anthropic.APITimeoutError(request=_REQUEST))
        patcher, _ = _client_with(create)
        try:
            with pytest.raises(TransportError):
                await LLMClient(api_key="k").generate("p")
        finally:
            patcher.stop()

    async def test_status_error_maps_to_backend_error(self):
        response = httpx.Response(529, request=_REQUEST, json={"error": "overloaded"})
        error = anthropic.APIStatusError("overloaded", response=response, body=None)
        patcher, _ = _client_with(AsyncMock(side_effect=error))
        try:
            with pytest.raises(BackendError) as exc_info:
                await LLMClient(api_key="k").generate("p")
        finally:
            patcher.stop()
        assert exc_info.value.upstream_status == 529
        assert exc_info.value.message == "AI API error: 529"


class TestLLMClientState:
    async def test_calls_do_not_accumulate_state(self):
        create = AsyncMock(return_value=_make_api_message("r", input_tokens=10, output_tokens=5))
        patcher, _ = _client_with(create)
        try:
            llm = LLMClient(api_key="k")
            state = dict(vars(llm))
            first = await llm.generate("one")
            second = await llm.generate("two")
        finally:
            patcher.stop()

        assert vars(llm) == state
        assert (first.input_tokens, first.output_tokens) == (10, 5)
        assert (second.input_tokens, second.output_tokens) == (10, 5)
