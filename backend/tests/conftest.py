"""Pytest configuration and fixtures for menu parser tests."""

import json
import os
import sys

# Set required env vars BEFORE any imports that might trigger Settings
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")

from unittest.mock import AsyncMock, patch

import pytest

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import Settings  # noqa: E402
from llm import BaseLLMService, LLMError  # noqa: E402


class FakeLLMService(BaseLLMService):
    """Scripted LLM provider.

    Replies are taken in order from `responses`; an Exception instance is
    raised instead of returned. When `handler` is given it is called with
    (prompt, system) for every call instead.
    """

    def __init__(self, responses=None, handler=None):
        self.responses = list(responses or [])
        self.handler = handler
        self.calls = []

    async def generate(self, prompt, system, *, temperature=None, max_tokens=None):
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.handler is not None:
            response = self.handler(prompt, system)
        elif self.responses:
            response = self.responses.pop(0)
        else:
            raise LLMError("No scripted response left")

        if isinstance(response, Exception):
            raise response
        return response


def extraction_reply(items, menu_name="Test Menu", notes=None):
    """Build an extraction service reply as the model would send it."""
    return json.dumps(
        {
            "menuName": menu_name,
            "items": items,
            "totalItemsFound": len(items),
            "processingNotes": notes or [],
        }
    )


def raw_item(name, item_type="food", category="Mains", confidence=90, **extra):
    """Raw extraction item in the service's camelCase shape."""
    item = {
        "name": name,
        "category": category,
        "itemType": item_type,
        "confidence": confidence,
        "originalText": name,
    }
    item.update(extra)
    return item


@pytest.fixture
def settings():
    """Real settings with enrichment off and no env file."""
    return Settings(
        _env_file=None,
        anthropic_api_key="test-anthropic-key",
        enable_wine_enrichment=False,
        enable_food_enrichment=False,
        enable_beverage_enrichment=False,
    )


@pytest.fixture
def enrichment_settings():
    """Real settings with every enrichment pass enabled."""
    return Settings(_env_file=None, anthropic_api_key="test-anthropic-key")


@pytest.fixture
def no_sleep():
    """Patch asyncio.sleep so retry and rate-limit delays are instant."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


@pytest.fixture
def sample_menu_text():
    """Small mixed menu that stays below every chunking threshold."""
    return """
    The Harbour Kitchen

    Starters
    Caesar Salad - Romaine, parmesan, croutons - $9.50
    Soup of the Day - £6

    Mains
    Fish and Chips - Beer battered haddock, peas - £16

    Wine
    2022 MiP Classic Rosé, Côtes de Provence - £38
    """
