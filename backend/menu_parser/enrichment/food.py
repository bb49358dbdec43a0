"""Culinary analysis of food items: ingredients, methods, allergens, diet."""

import asyncio
import json
import logging

from pydantic import ValidationError

from config import Settings, get_settings
from llm import BaseLLMService, LLMError
from llm.prompts import FOOD_ENHANCEMENT_PROMPT, FOOD_ENHANCEMENT_SYSTEM_PROMPT
from menu_parser.enrichment.models import FoodEnhancement
from menu_parser.extraction import PipelineCancelledError
from menu_parser.repair import load_json_object
from menu_parser.types import CleanMenuItem

logger = logging.getLogger(__name__)

# Output limit for a single item's analysis
FOOD_MAX_TOKENS = 1024


class FoodEnhancer:
    """Analyzes food items one service call at a time."""

    def __init__(
        self,
        llm_service: BaseLLMService,
        settings: Settings | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.llm = llm_service
        self.settings = settings or get_settings()
        self.cancel_event = cancel_event

    async def enhance_item(self, item: CleanMenuItem) -> FoodEnhancement | None:
        """Analyze one food item.

        Returns:
            The analysis, or None if the call failed or the reply was invalid.
        """
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise PipelineCancelledError("Menu parsing was cancelled")

        prompt = FOOD_ENHANCEMENT_PROMPT.format(
            name=item.name,
            description=item.description or "No description available",
            category=item.category,
        )

        try:
            response = await self.llm.generate(
                prompt,
                FOOD_ENHANCEMENT_SYSTEM_PROMPT,
                temperature=self.settings.llm_temperature,
                max_tokens=FOOD_MAX_TOKENS,
            )
        except LLMError as e:
            logger.warning("Food enhancement failed for %s: %s", item.name, e)
            return None

        try:
            return FoodEnhancement.model_validate(load_json_object(response))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Invalid food enhancement for %s: %s", item.name, e)
            return None

    async def enhance_batch(self, items: list[CleanMenuItem]) -> list[FoodEnhancement | None]:
        """Analyze items sequentially with a fixed delay between calls.

        Returns:
            One result (or None) per item, in input order.
        """
        results: list[FoodEnhancement | None] = []

        for i, item in enumerate(items):
            logger.debug("Processing food item %d/%d: %s", i + 1, len(items), item.name)
            results.append(await self.enhance_item(item))

            if i < len(items) - 1:
                await asyncio.sleep(self.settings.food_enhancement_delay)

        logger.info(
            "Food enhancement complete: %d/%d items enhanced",
            sum(1 for r in results if r is not None),
            len(items),
        )
        return results
