"""Tests for the Anthropic provider's reply handling and error mapping."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from anthropic import APIStatusError

from llm import AnthropicService, LLMError, ServiceUnavailableError


def status_error(status_code: int) -> APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(status_code, request=request)
    return APIStatusError(f"status {status_code}", response=response, body=None)


class TestAnthropicService:
    """Tests for AnthropicService.generate."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = AnthropicService(model="claude-test")

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self):
        """Test text blocks are concatenated and other blocks ignored."""
        reply = SimpleNamespace(
            stop_reason="end_turn",
            content=[
                SimpleNamespace(type="text", text='{"items": '),
                SimpleNamespace(type="tool_use", text="ignored"),
                SimpleNamespace(type="text", text="[]}"),
            ],
        )
        create = AsyncMock(return_value=reply)

        with patch.object(self.service._client.messages, "create", create):
            result = await self.service.generate("prompt", "system", max_tokens=100)

        assert result == '{"items": []}'
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 100
        assert kwargs["system"] == "system"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [503, 529])
    async def test_transient_status_is_unavailable(self, status_code):
        """Test 503 and 529 map to ServiceUnavailableError."""
        create = AsyncMock(side_effect=status_error(status_code))

        with patch.object(self.service._client.messages, "create", create):
            with pytest.raises(ServiceUnavailableError):
                await self.service.generate("prompt", "system")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 500])
    async def test_other_status_is_llm_error(self, status_code):
        """Test other status codes are plain, non-retryable LLMError."""
        create = AsyncMock(side_effect=status_error(status_code))

        with patch.object(self.service._client.messages, "create", create):
            with pytest.raises(LLMError) as exc_info:
                await self.service.generate("prompt", "system")

        assert not isinstance(exc_info.value, ServiceUnavailableError)
