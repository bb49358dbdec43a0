"""Tests for the extraction client retry policy."""

import asyncio

import pytest
from conftest import FakeLLMService

from llm import LLMError, ServiceUnavailableError
from llm.prompts import MENU_EXTRACTION_SYSTEM_PROMPT
from menu_parser.extraction import ExtractionClient, PipelineCancelledError, RetryPolicy


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_delays_grow_exponentially(self):
        """Test delays follow base * multiplier ** attempt."""
        policy = RetryPolicy(attempts=3, base_delay=2.0, multiplier=2.0)
        assert [policy.delay_for(i) for i in range(3)] == [2.0, 4.0, 8.0]


class TestExtractionClient:
    """Tests for ExtractionClient."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self, settings, no_sleep):
        """Test a successful call is returned without retry."""
        llm = FakeLLMService(['{"items": []}'])
        client = ExtractionClient(llm, settings)

        result = await client.extract("Soup - £6", "Lunch")

        assert result == '{"items": []}'
        assert len(llm.calls) == 1
        assert llm.calls[0]["system"] == MENU_EXTRACTION_SYSTEM_PROMPT
        assert "Lunch" in llm.calls[0]["prompt"]
        assert "Soup - £6" in llm.calls[0]["prompt"]
        assert llm.calls[0]["max_tokens"] == settings.llm_max_tokens
        assert llm.calls[0]["temperature"] == settings.llm_temperature
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_persistent_unavailable_exhausts_attempts(self, settings, no_sleep):
        """Test three attempts with strictly increasing delays, then failure."""
        llm = FakeLLMService([ServiceUnavailableError("overloaded")] * 5)
        client = ExtractionClient(llm, settings)

        with pytest.raises(ServiceUnavailableError):
            await client.extract("Soup - £6", "Lunch")

        assert len(llm.calls) == 3
        delays = [call.args[0] for call in no_sleep.await_args_list]
        assert len(delays) == 2
        assert delays[0] < delays[1]

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failure(self, settings, no_sleep):
        """Test a transient outage followed by success returns the reply."""
        llm = FakeLLMService([ServiceUnavailableError("503"), '{"items": []}'])
        client = ExtractionClient(llm, settings)

        assert await client.extract("Soup - £6", "Lunch") == '{"items": []}'
        assert len(llm.calls) == 2
        no_sleep.assert_awaited_once_with(settings.retry_base_delay)

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self, settings, no_sleep):
        """Test non-transient failures propagate immediately."""
        llm = FakeLLMService([LLMError("invalid request"), '{"items": []}'])
        client = ExtractionClient(llm, settings)

        with pytest.raises(LLMError) as exc_info:
            await client.extract("Soup - £6", "Lunch")

        assert not isinstance(exc_info.value, ServiceUnavailableError)
        assert len(llm.calls) == 1
        no_sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_chunked_calls_use_chunk_policy(self, settings, no_sleep):
        """Test chunk calls make two attempts with the chunk output limit."""
        llm = FakeLLMService([ServiceUnavailableError("529")] * 3)
        client = ExtractionClient(llm, settings)

        with pytest.raises(ServiceUnavailableError):
            await client.extract("Soup - £6", "Lunch (part 1 of 3)", chunked=True)

        assert len(llm.calls) == settings.chunk_retry_attempts == 2
        assert llm.calls[0]["max_tokens"] == settings.llm_chunk_max_tokens
        no_sleep.assert_awaited_once_with(settings.chunk_retry_base_delay)

    @pytest.mark.asyncio
    async def test_cancelled_before_call(self, settings, no_sleep):
        """Test a set cancel event stops before any external call."""
        llm = FakeLLMService(['{"items": []}'])
        cancel = asyncio.Event()
        cancel.set()
        client = ExtractionClient(llm, settings, cancel_event=cancel)

        with pytest.raises(PipelineCancelledError):
            await client.extract("Soup - £6", "Lunch")

        assert llm.calls == []
