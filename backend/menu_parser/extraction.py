"""Extraction client: one structured-extraction call with bounded retry.

Wraps BaseLLMService.generate with the fixed menu extraction instructions.
Only ServiceUnavailableError (provider 503/529) is retried, with
exponential backoff via asyncio.sleep(); every other LLMError propagates
immediately.
"""

import asyncio
import logging
from dataclasses import dataclass

from config import Settings, get_settings
from llm import BaseLLMService, ServiceUnavailableError
from llm.prompts import MENU_EXTRACTION_PROMPT, MENU_EXTRACTION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class PipelineCancelledError(Exception):
    """Raised when a parse is cancelled before an external call."""

    pass


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt cap and exponential backoff schedule."""

    attempts: int
    base_delay: float
    multiplier: float

    def delay_for(self, attempt: int) -> float:
        """Backoff before retrying after the given zero-based attempt."""
        return self.base_delay * (self.multiplier**attempt)


class ExtractionClient:
    """Sends menu text to the extraction service and returns its raw reply."""

    def __init__(
        self,
        llm_service: BaseLLMService,
        settings: Settings | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.llm = llm_service
        self.settings = settings or get_settings()
        self.cancel_event = cancel_event

        self.single_pass_policy = RetryPolicy(
            attempts=self.settings.retry_attempts,
            base_delay=self.settings.retry_base_delay,
            multiplier=self.settings.retry_multiplier,
        )
        self.chunk_policy = RetryPolicy(
            attempts=self.settings.chunk_retry_attempts,
            base_delay=self.settings.chunk_retry_base_delay,
            multiplier=self.settings.chunk_retry_multiplier,
        )

    def check_cancelled(self) -> None:
        """Raise PipelineCancelledError if the cancel event is set."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise PipelineCancelledError("Menu parsing was cancelled")

    async def extract(
        self,
        text: str,
        context_label: str,
        *,
        chunked: bool = False,
    ) -> str:
        """Run one extraction call over text.

        Args:
            text: Menu text (a chunk or the whole document).
            context_label: Label shown to the model, e.g. the menu name or
                "chunk 2 of 5".
            chunked: Use the chunk retry policy and output token limit.

        Returns:
            The raw response text.

        Raises:
            ServiceUnavailableError: If every attempt hit a transient outage.
            LLMError: On any non-transient provider failure (not retried).
            PipelineCancelledError: If cancelled before an attempt.
        """
        policy = self.chunk_policy if chunked else self.single_pass_policy
        max_tokens = (
            self.settings.llm_chunk_max_tokens
            if chunked
            else self.settings.llm_max_tokens
        )
        prompt = MENU_EXTRACTION_PROMPT.format(menu_label=context_label, text=text)

        logger.info(
            "Sending %d characters to extraction service (%s)",
            len(text),
            context_label,
        )

        last_error: ServiceUnavailableError | None = None
        for attempt in range(policy.attempts):
            self.check_cancelled()
            try:
                return await self.llm.generate(
                    prompt,
                    MENU_EXTRACTION_SYSTEM_PROMPT,
                    temperature=self.settings.llm_temperature,
                    max_tokens=max_tokens,
                )
            except ServiceUnavailableError as e:
                last_error = e
                if attempt < policy.attempts - 1:
                    wait_time = policy.delay_for(attempt)
                    logger.warning(
                        "Extraction service unavailable, retrying in %.1fs (attempt %d/%d)",
                        wait_time,
                        attempt + 1,
                        policy.attempts,
                    )
                    await asyncio.sleep(wait_time)
                else:
                    logger.error(
                        "Extraction failed after %d attempts: %s", policy.attempts, e
                    )

        raise ServiceUnavailableError(
            f"Extraction service unavailable after {policy.attempts} attempts: {last_error}"
        ) from last_error
