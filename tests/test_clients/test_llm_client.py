"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest
from tenacity import wait_none

from resume_studio.clients.llm_client import LLMClient, LLMResponse
from resume_studio.exceptions import BackendError, CredentialMissingError

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(type="text", text=text)]
    return message


def _status_error(cls: type[anthropic.APIStatusError], status: int) -> anthropic.APIStatusError:
    response = httpx.Response(status, request=_REQUEST)
    return cls("error", response=response, body=None)


@pytest.fixture
def api():
    """Patch AsyncAnthropic and hand back the mocked client instance."""
    with patch("resume_studio.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
        mock_client = MagicMock()
        mock_client.api_key = "test-key"
        mock_client.messages.create = AsyncMock(return_value=_make_api_message("hello world"))
        mock_cls.return_value = mock_client
        yield mock_client


@pytest.fixture
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(LLMClient._call_api.retry, "wait", wait_none())


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        """Creates AsyncAnthropic with no extra kwargs when no args supplied."""
        with patch("resume_studio.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_and_timeout(self):
        """Passes api_key and timeout when both are supplied."""
        with patch("resume_studio.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientComplete:
    async def test_complete_returns_llm_response(self, api):
        """complete() wraps API response fields into an LLMResponse dataclass."""
        llm = LLMClient()
        result = await llm.complete("say hello")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_complete_passes_options(self, api):
        llm = LLMClient(model="claude-haiku-4-5-20251001")
        await llm.complete("prompt", system="be brief", temperature=0.7, max_tokens=123)

        kwargs = api.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-haiku-4-5-20251001"
        assert kwargs["system"] == "be brief"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 123
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_empty_system_not_sent(self, api):
        await LLMClient().complete("prompt")
        assert "system" not in api.messages.create.call_args.kwargs

    async def test_joins_text_blocks_only(self, api):
        message = _make_api_message("first ")
        message.content.append(MagicMock(type="tool_use", text="ignored"))
        message.content.append(MagicMock(type="text", text="second"))
        api.messages.create.return_value = message

        result = await LLMClient().complete("prompt")
        assert result.text == "first second"

    async def test_token_log_stores_model_and_counts(self, api):
        """_token_log entries are (model, input_tokens, output_tokens) tuples."""
        api.messages.create.return_value = _make_api_message("resp", input_tokens=20, output_tokens=8)
        llm = LLMClient()
        await llm.complete("prompt", model="claude-haiku-4-5-20251001")

        model, inp, out = llm._token_log[0]
        assert model == "claude-haiku-4-5-20251001"
        assert inp == 20
        assert out == 8


class TestLLMClientErrors:
    async def test_missing_api_key(self, api):
        api.api_key = None
        api.auth_token = None
        llm = LLMClient()

        with pytest.raises(CredentialMissingError) as exc_info:
            await llm.complete("prompt")

        assert "ANTHROPIC_API_KEY" in exc_info.value.user_message
        api.messages.create.assert_not_called()

    async def test_authentication_error(self, api):
        api.messages.create.side_effect = _status_error(anthropic.AuthenticationError, 401)
        with pytest.raises(CredentialMissingError):
            await LLMClient().complete("prompt")

    async def test_bad_request_is_backend_error(self, api):
        api.messages.create.side_effect = _status_error(anthropic.BadRequestError, 400)
        with pytest.raises(BackendError):
            await LLMClient().complete("prompt")
        assert api.messages.create.call_count == 1

    async def test_connection_error_retried_then_backend_error(self, api, no_retry_wait):
        api.messages.create.side_effect = anthropic.APIConnectionError(request=_REQUEST)
        with pytest.raises(BackendError):
            await LLMClient().complete("prompt")
        assert api.messages.create.call_count == 3

    async def test_transient_error_recovers(self, api, no_retry_wait):
        api.messages.create.side_effect = [
            _status_error(anthropic.InternalServerError, 500),
            _make_api_message("recovered"),
        ]
        result = await LLMClient().complete("prompt")
        assert result.text == "recovered"

    async def test_failure_not_logged_as_usage(self, api):
        api.messages.create.side_effect = _status_error(anthropic.BadRequestError, 400)
        llm = LLMClient()
        with pytest.raises(BackendError):
            await llm.complete("prompt")
        assert llm._token_log == []


class TestLLMClientTokenSummary:
    def test_get_token_summary_returns_correct_totals(self):
        """get_token_summary() sums input and output tokens across all log entries."""
        with patch("resume_studio.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
            llm._token_log = [
                ("claude-sonnet-4-5-20250929", 100, 50),
                ("claude-sonnet-4-5-20250929", 200, 80),
            ]

        summary = llm.get_token_summary()

        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2

    def test_get_token_summary_clears_log_after_return(self):
        """get_token_summary() empties _token_log so subsequent calls return zeros."""
        with patch("resume_studio.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
            llm._token_log = [("claude-sonnet-4-5-20250929", 50, 25)]

        llm.get_token_summary()
        second_summary = llm.get_token_summary()

        assert second_summary["input"] == 0
        assert second_summary["calls"] == []
