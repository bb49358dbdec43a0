"""Anthropic Claude LLM implementation."""

import logging

import httpx
from anthropic import APIError, APIStatusError, AsyncAnthropic, RateLimitError

from config import Settings, get_settings

from .base import BaseLLMService, LLMError, ServiceUnavailableError

logger = logging.getLogger(__name__)

# 503 Service Unavailable and Anthropic's 529 Overloaded
TRANSIENT_STATUS_CODES = frozenset({503, 529})


class AnthropicService(BaseLLMService):
    """Claude LLM service via Anthropic API."""

    def __init__(
        self,
        model: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.model = model or settings.llm_model
        self.settings = settings

        self._client = AsyncAnthropic(
            api_key=settings.anthropic_api_key,
            timeout=httpx.Timeout(
                timeout=settings.llm_timeout, connect=settings.llm_connect_timeout
            ),
            # Retries are owned by the extraction client
            max_retries=0,
        )

    async def generate(
        self,
        prompt: str,
        system: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a response using Claude."""
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.settings.llm_max_tokens,
                temperature=temperature
                if temperature is not None
                else self.settings.llm_temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
            if response.stop_reason == "max_tokens":
                logger.warning(
                    "Response hit max_tokens (%s); output may be truncated",
                    max_tokens or self.settings.llm_max_tokens,
                )
            return "".join(
                block.text for block in response.content if block.type == "text"
            )

        except RateLimitError as e:
            logger.warning("Rate limit: %s", e)
            raise LLMError("Rate limit exceeded. Please try again.") from e
        except APIStatusError as e:
            if e.status_code in TRANSIENT_STATUS_CODES:
                logger.warning("Service unavailable (%d): %s", e.status_code, e)
                raise ServiceUnavailableError(
                    f"LLM service unavailable ({e.status_code})"
                ) from e
            logger.error("API error: %s", e)
            raise LLMError(f"LLM error: {e}") from e
        except APIError as e:
            logger.error("API error: %s", e)
            raise LLMError(f"LLM error: {e}") from e
