"""Runs the wine, food and beverage enrichment passes over validated items.

Passes run in a fixed order and are isolated from each other: a pass that
raises is recorded as a processing note and leaves the items untouched.
Each result is written back to the position its item was taken from, so
items sharing a name and source text (a glass and a bottle of the same
wine) are enriched independently.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from config import Settings, get_settings
from llm import BaseLLMService
from menu_parser.enrichment.beverage import BeverageEnhancer
from menu_parser.enrichment.food import FoodEnhancer
from menu_parser.enrichment.grapes import GrapeVarietyIdentifier
from menu_parser.extraction import PipelineCancelledError
from menu_parser.types import CleanMenuItem, PipelineState

logger = logging.getLogger(__name__)

BEVERAGE_FIELDS = (
    "spirit_type",
    "beer_style",
    "cocktail_ingredients",
    "alcohol_content",
    "serving_style",
    "is_non_alcoholic",
    "temperature",
    "price",
    "serving_options",
    "confidence",
)


def select_targets(
    items: tuple[CleanMenuItem, ...], predicate: Callable[[CleanMenuItem], bool]
) -> list[tuple[int, CleanMenuItem]]:
    """(position, item) for every item the predicate accepts."""
    return [(i, item) for i, item in enumerate(items) if predicate(item)]


def apply_updates(
    items: tuple[CleanMenuItem, ...], updates: dict[int, CleanMenuItem]
) -> list[CleanMenuItem]:
    """Replace items at the given positions."""
    return [updates.get(i, item) for i, item in enumerate(items)]


class EnrichmentOrchestrator:
    """Sequences the three enrichment passes with per-pass failure isolation."""

    def __init__(
        self,
        llm_service: BaseLLMService,
        settings: Settings | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.grape_identifier = GrapeVarietyIdentifier(llm_service, self.settings, cancel_event)
        self.food_enhancer = FoodEnhancer(llm_service, self.settings, cancel_event)
        self.beverage_enhancer = BeverageEnhancer(llm_service, self.settings, cancel_event)

    async def enrich(self, state: PipelineState) -> PipelineState:
        """Run wine, food and beverage passes in order.

        Args:
            state: Pipeline state holding validated, deduplicated items.

        Returns:
            New state with enriched items and one note per pass that ran.

        Raises:
            PipelineCancelledError: If cancelled before an enrichment call.
        """
        passes: list[tuple[str, bool, Callable[[PipelineState], Awaitable[PipelineState]]]] = [
            ("Grape variety identification", self.settings.enable_wine_enrichment, self.enrich_wines),
            ("Food", self.settings.enable_food_enrichment, self.enrich_food),
            ("Beverage", self.settings.enable_beverage_enrichment, self.enrich_beverages),
        ]

        for label, enabled, run_pass in passes:
            if not enabled:
                logger.debug("%s pass disabled", label)
                continue
            try:
                state = await run_pass(state)
            except PipelineCancelledError:
                raise
            except Exception as e:
                logger.error("%s enhancement failed: %s", label, e)
                state = state.with_notes(f"{label} enhancement failed: {e}")

        return state

    async def enrich_wines(self, state: PipelineState) -> PipelineState:
        """Add grape varieties to wines that have none."""
        targets = select_targets(
            state.items, lambda item: item.item_type == "wine" and not item.grape_variety
        )
        if not targets:
            return state

        results = await self.grape_identifier.identify_batch([wine for _, wine in targets])

        updates: dict[int, CleanMenuItem] = {}
        for (position, wine), result in zip(targets, results):
            if not result.grape_varieties:
                continue
            updates[position] = wine.with_updates(grape_variety=list(result.grape_varieties))
            logger.debug(
                "Enhanced %s with varieties: %s (%.0f%% confidence)",
                wine.name,
                ", ".join(result.grape_varieties),
                result.confidence,
            )

        return state.with_items(apply_updates(state.items, updates)).with_notes(
            f"Grape variety identification: Enhanced {len(updates)}/{len(targets)} wine items"
        )

    async def enrich_food(self, state: PipelineState) -> PipelineState:
        """Add ingredients, cooking methods, allergens and dietary flags."""
        targets = select_targets(
            state.items,
            lambda item: item.item_type == "food"
            and (not item.ingredients or not item.cooking_methods),
        )
        if not targets:
            return state

        results = await self.food_enhancer.enhance_batch([food for _, food in targets])

        updates: dict[int, CleanMenuItem] = {}
        for (position, food), result in zip(targets, results):
            if result is None:
                continue
            tags = result.dietary_tags
            updates[position] = food.with_updates(
                ingredients=result.ingredients or food.ingredients,
                cooking_methods=result.cooking_methods or food.cooking_methods,
                allergens=result.allergens or food.allergens,
                is_vegetarian=_keep_or(food.is_vegetarian, tags.is_vegetarian),
                is_vegan=_keep_or(food.is_vegan, tags.is_vegan),
                is_gluten_free=_keep_or(food.is_gluten_free, tags.is_gluten_free),
                is_dairy_free=_keep_or(food.is_dairy_free, tags.is_dairy_free),
                is_spicy=_keep_or(food.is_spicy, tags.is_spicy),
            )

        return state.with_items(apply_updates(state.items, updates)).with_notes(
            f"Food enhancement: Enhanced {len(updates)}/{len(targets)} food items"
        )

    async def enrich_beverages(self, state: PipelineState) -> PipelineState:
        """Classify beverages lacking spirit type, beer style or cocktail ingredients."""
        targets = select_targets(
            state.items,
            lambda item: item.item_type == "beverage"
            and not (item.spirit_type or item.beer_style or item.cocktail_ingredients),
        )
        if not targets:
            return state

        enhanced, notes = await self.beverage_enhancer.enhance_batch(
            [beverage for _, beverage in targets]
        )

        updates: dict[int, CleanMenuItem] = {}
        for (position, original), updated in zip(targets, enhanced):
            if updated == original:
                continue
            updates[position] = original.with_updates(
                **{name: getattr(updated, name) for name in BEVERAGE_FIELDS}
            )

        return (
            state.with_items(apply_updates(state.items, updates))
            .with_notes(*notes)
            .with_notes(
                f"Beverage enhancement: Enhanced {len(updates)}/{len(targets)} beverage items"
            )
        )


def _keep_or(existing: bool | None, inferred: bool) -> bool:
    """Dietary flags read from the menu win over inferred ones."""
    return existing if existing is not None else inferred
