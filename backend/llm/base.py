"""Base LLM service interface.

Defines the contract that all LLM providers must implement. The menu parser
only depends on this interface, so extraction, retry and repair logic can be
exercised with a fake provider.
"""

from abc import ABC, abstractmethod


class LLMError(Exception):
    """Raised when LLM generation fails."""


class ServiceUnavailableError(LLMError):
    """Raised when the provider reports a transient outage (503/529).

    This is the only failure the extraction client retries.
    """


class BaseLLMService(ABC):
    """Abstract base class for LLM services.

    All LLM providers (Anthropic, OpenAI, etc.) must implement these methods.
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Generate a single response.

        Args:
            prompt: User message.
            system: System instructions.
            temperature: Sampling temperature (0-1).
            max_tokens: Maximum tokens to generate.

        Returns:
            Generated text.

        Raises:
            ServiceUnavailableError: If the provider is temporarily unavailable.
            LLMError: For any other generation failure.
        """
