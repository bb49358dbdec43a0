"""LLM module - unified interface for language model interactions.

Usage:
    from llm import LLMService, LLMError

    llm = LLMService()
    response = await llm.generate(prompt, system)

Structure:
    - base.py: Abstract interface (BaseLLMService) and errors
    - anthropic.py: Claude implementation (AnthropicService)
    - prompts/: extraction and enrichment prompts
"""

from llm.anthropic import AnthropicService
from llm.base import BaseLLMService, LLMError, ServiceUnavailableError

# Default provider - can be swapped by changing this alias
LLMService = AnthropicService

__all__ = [
    "BaseLLMService",
    "LLMService",
    "LLMError",
    "ServiceUnavailableError",
    "AnthropicService",
]
