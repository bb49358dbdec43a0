"""Cached service construction for entry points.

Services are cached with @lru_cache() so the Anthropic client and
settings are created once per process.
"""

from functools import lru_cache

from config import get_settings
from llm import BaseLLMService, LLMService
from menu_parser import DocumentParser, MenuParserPipeline


@lru_cache
def get_llm_service() -> BaseLLMService:
    """Get cached LLM service (expensive - has API client)."""
    return LLMService(settings=get_settings())


@lru_cache
def get_document_parser() -> DocumentParser:
    """Get document parser (stateless, cheap to create)."""
    return DocumentParser(get_settings())


@lru_cache
def get_menu_parser() -> MenuParserPipeline:
    """Get menu parser pipeline with injected dependencies."""
    return MenuParserPipeline(
        llm_service=get_llm_service(),
        settings=get_settings(),
        document_parser=get_document_parser(),
    )
