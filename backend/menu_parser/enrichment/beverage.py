"""Batch analysis of beverage items.

Beverages are sent in numbered batches; the service answers with one
analysis per index. Cocktail ingredients are normalized to canonical names
and stripped of preparation words before they are applied.
"""

import asyncio
import logging
import math
from typing import Any

from pydantic import ValidationError

from config import Settings, get_settings
from llm import BaseLLMService
from llm.prompts import BEVERAGE_ENHANCEMENT_PROMPT, BEVERAGE_ENHANCEMENT_SYSTEM_PROMPT
from menu_parser.enrichment.models import BeverageAnalysis
from menu_parser.extraction import PipelineCancelledError
from menu_parser.repair import load_json_object
from menu_parser.types import CleanMenuItem, ServingOption

logger = logging.getLogger(__name__)

PREPARATION_WORDS = (
    "shaken",
    "stirred",
    "muddled",
    "built",
    "strained",
    "blended",
    "chilled",
    "frozen",
    "neat",
    "on the rocks",
    "straight up",
    "garnished",
    "served",
    "topped",
    "finished",
    "mixed",
    "combined",
)

# Entries longer than this are descriptive and kept even if they mention a
# preparation word ("lime juice, shaken hard with mint")
PREPARATION_MAX_WORDS = 3

INGREDIENT_SYNONYMS = {
    "fresh lime juice": "lime juice",
    "fresh lemon juice": "lemon juice",
    "fresh-squeezed lime juice": "lime juice",
    "fresh-squeezed lemon juice": "lemon juice",
    "freshly squeezed lime juice": "lime juice",
    "freshly squeezed lemon juice": "lemon juice",
    "house-made simple syrup": "simple syrup",
    "homemade simple syrup": "simple syrup",
    "house simple syrup": "simple syrup",
    "homemade grenadine": "grenadine",
    "house-made grenadine": "grenadine",
    "muddled mint": "mint",
    "muddled mint leaves": "mint",
    "fresh mint": "mint",
    "fresh mint leaves": "mint",
    "muddled cucumber": "cucumber",
    "fresh cucumber": "cucumber",
    "lemon twist": "lemon peel",
    "orange twist": "orange peel",
    "lime twist": "lime peel",
    "maraschino cherry": "cherry",
    "cocktail cherry": "cherry",
    "club soda": "soda water",
    "sparkling water": "soda water",
    "tonic water": "tonic",
    "dry vermouth": "vermouth",
    "sweet vermouth": "vermouth",
}


def normalize_cocktail_ingredients(ingredients: list[str]) -> list[str]:
    """Canonicalize ingredient names, drop preparation steps and duplicates.

    Synonyms are applied first, so "muddled mint" survives as "mint".
    """
    normalized: list[str] = []
    seen: set[str] = set()

    for ingredient in ingredients:
        ingredient = ingredient.strip()
        if not ingredient:
            continue
        ingredient = INGREDIENT_SYNONYMS.get(ingredient.lower(), ingredient)

        lower = ingredient.lower()
        if len(lower.split()) <= PREPARATION_MAX_WORDS and any(
            word in lower for word in PREPARATION_WORDS
        ):
            continue

        if lower in seen:
            continue
        seen.add(lower)
        normalized.append(ingredient)

    return normalized


def _serving_option(option: dict[str, Any]) -> ServingOption | None:
    """A ServingOption with a non-blank size and a finite positive price."""
    size = option.get("size")
    price = option.get("price")
    if not isinstance(size, str) or not size.strip():
        return None
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return ServingOption(size=size.strip(), price=float(price))


def apply_analysis(item: CleanMenuItem, analysis: BeverageAnalysis) -> CleanMenuItem:
    """Return item updated with the non-empty fields of analysis."""
    changes: dict[str, Any] = {}

    for field_name in ("spirit_type", "beer_style", "alcohol_content", "serving_style", "temperature"):
        value = getattr(analysis, field_name)
        if value:
            changes[field_name] = value

    if analysis.cocktail_ingredients:
        ingredients = normalize_cocktail_ingredients(analysis.cocktail_ingredients)
        if ingredients:
            changes["cocktail_ingredients"] = ingredients

    if analysis.is_non_alcoholic is not None:
        changes["is_non_alcoholic"] = analysis.is_non_alcoholic

    if analysis.price is not None:
        changes["price"] = analysis.price

    options = [
        option
        for option in (_serving_option(o) for o in analysis.serving_options)
        if option is not None
    ]
    if options:
        changes["serving_options"] = options
        # Several sizes replace the single price
        if len(options) > 1:
            changes["price"] = None

    if analysis.confidence is not None and analysis.confidence > item.confidence:
        changes["confidence"] = min(analysis.confidence, 100)

    return item.with_updates(**changes) if changes else item


class BeverageEnhancer:
    """Analyzes beverages in fixed-size batches, one call per batch."""

    def __init__(
        self,
        llm_service: BaseLLMService,
        settings: Settings | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.llm = llm_service
        self.settings = settings or get_settings()
        self.cancel_event = cancel_event

    async def enhance_batch(
        self, items: list[CleanMenuItem]
    ) -> tuple[list[CleanMenuItem], list[str]]:
        """Analyze beverages batch by batch.

        A failed batch leaves its items unchanged and adds a note; the
        remaining batches still run.

        Returns:
            Tuple of (items in input order, processing notes).
        """
        size = max(1, self.settings.beverage_batch_size)
        batches = [items[i : i + size] for i in range(0, len(items), size)]
        enhanced: list[CleanMenuItem] = []
        notes: list[str] = []

        for i, batch in enumerate(batches, start=1):
            logger.info(
                "Processing beverage batch %d/%d (%d items)", i, len(batches), len(batch)
            )
            try:
                enhanced.extend(await self._enhance_batch(batch))
            except PipelineCancelledError:
                raise
            except Exception as e:
                logger.error("Beverage batch %d failed: %s", i, e)
                enhanced.extend(batch)
                notes.append(f"Batch {i} enhancement failed: {e}")

            if i < len(batches):
                await asyncio.sleep(self.settings.beverage_batch_delay)

        return enhanced, notes

    async def _enhance_batch(self, batch: list[CleanMenuItem]) -> list[CleanMenuItem]:
        """Analyze one batch and apply results by index."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise PipelineCancelledError("Menu parsing was cancelled")

        beverage_list = "\n".join(
            f"{index}. {item.name}" + (f" - {item.description}" if item.description else "")
            for index, item in enumerate(batch)
        )
        response = await self.llm.generate(
            BEVERAGE_ENHANCEMENT_PROMPT.format(beverage_list=beverage_list),
            BEVERAGE_ENHANCEMENT_SYSTEM_PROMPT,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.enrichment_max_tokens,
        )

        payload = load_json_object(response)
        if not isinstance(payload, dict) or not isinstance(payload.get("beverages"), list):
            raise ValueError("No beverages array found in analysis result")

        updated = list(batch)
        for entry in payload["beverages"]:
            try:
                analysis = BeverageAnalysis.model_validate(entry)
            except ValidationError as e:
                logger.warning("Skipping invalid beverage analysis: %s", e)
                continue

            if not 0 <= analysis.index < len(updated):
                logger.warning("Invalid beverage index %d in analysis", analysis.index)
                continue
            updated[analysis.index] = apply_analysis(updated[analysis.index], analysis)

        return updated
