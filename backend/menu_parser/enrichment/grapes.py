"""Grape variety identification for wine items.

Pattern matching against a table of known varieties and regional styles
runs first. The enrichment service is consulted only when the pattern
result is weak, and only for a bounded number of wines per batch; any
service failure falls back to the pattern result.
"""

import asyncio
import json
import logging

from pydantic import ValidationError

from config import Settings, get_settings
from llm import BaseLLMService, LLMError
from llm.prompts import GRAPE_IDENTIFICATION_PROMPT, GRAPE_IDENTIFICATION_SYSTEM_PROMPT
from menu_parser.enrichment.models import GrapeIdentification
from menu_parser.extraction import PipelineCancelledError
from menu_parser.repair import load_json_object
from menu_parser.types import CleanMenuItem
from utils import unique_in_order

logger = logging.getLogger(__name__)

RED_VARIETIES = (
    "Cabernet Sauvignon",
    "Merlot",
    "Pinot Noir",
    "Syrah",
    "Shiraz",
    "Tempranillo",
    "Sangiovese",
    "Grenache",
    "Malbec",
    "Zinfandel",
    "Barbera",
    "Nebbiolo",
    "Primitivo",
    "Montepulciano",
    "Nero d'Avola",
    "Corvina",
    "Dolcetto",
    "Aglianico",
    "Carmenère",
    "Petite Sirah",
    "Mourvèdre",
    "Cinsault",
    "Carignan",
    "Gamay",
)

WHITE_VARIETIES = (
    "Chardonnay",
    "Sauvignon Blanc",
    "Riesling",
    "Pinot Grigio",
    "Pinot Gris",
    "Gewürztraminer",
    "Albariño",
    "Verdejo",
    "Moscato",
    "Glera",
    "Trebbiano",
    "Vermentino",
    "Fiano",
    "Falanghina",
    "Arneis",
    "Cortese",
    "Viognier",
    "Roussanne",
    "Marsanne",
    "Chenin Blanc",
    "Sémillon",
    "Melon de Bourgogne",
    "Grüner Veltliner",
)

BLEND_VARIETIES = (
    "Champagne Blend",
    "Cava Blend",
    "Bordeaux Blend",
    "Rhône Blend",
    "GSM Blend",
    "Rosé Blend",
    "Lambrusco",
)

KNOWN_VARIETIES = RED_VARIETIES + WHITE_VARIETIES + BLEND_VARIETIES

# Regional names that imply a variety: (keywords, variety)
REGIONAL_VARIETIES = (
    (("chianti",), "Sangiovese"),
    (("prosecco",), "Glera"),
    (("champagne",), "Champagne Blend"),
    (("cava",), "Cava Blend"),
    (("lambrusco",), "Lambrusco"),
    (("barolo", "barbaresco"), "Nebbiolo"),
)

BLEND_KEYWORDS = (
    "blend",
    "cuvée",
    "assemblage",
    "gsm",
    "bordeaux",
    "rhône",
    "super tuscan",
    "rosé",
)

GENERIC_GRAPE_WORDS = frozenset({"grape", "grapes", "variety", "varietal"})

PATTERN_CONFIDENCE = 60
NO_MATCH_CONFIDENCE = 10
SERVICE_THRESHOLD = 70
NO_VARIETY_CONFIDENCE_CAP = 20
ADJUSTED_CONFIDENCE_CAP = 70


def find_grapes_by_pattern(name: str, description: str | None = None) -> list[str]:
    """Known varieties and regional styles mentioned in name/description."""
    text = f"{name} {description or ''}".lower()
    found = [grape for grape in KNOWN_VARIETIES if grape.lower() in text]
    for keywords, variety in REGIONAL_VARIETIES:
        if any(keyword in text for keyword in keywords):
            found.append(variety)
    return unique_in_order(found)


def is_known_blend_style(name: str) -> bool:
    name = name.lower()
    return any(keyword in name for keyword in BLEND_KEYWORDS)


def normalize_grape_name(grape: str) -> str:
    """Map a variety name onto the known table's spelling.

    Generic words ("grapes", "variety") are ignored when matching. Names that
    only share part of a known variety ("Grenache Blanc", "Pinot") are kept
    as given.
    """
    normalized = " ".join(grape.split())
    if not normalized:
        return ""

    lower = " ".join(w for w in normalized.lower().split() if w not in GENERIC_GRAPE_WORDS)
    for known in KNOWN_VARIETIES:
        if known.lower() == lower:
            return known
    return normalized


def pattern_identification(name: str, description: str | None = None) -> GrapeIdentification:
    """Identify varieties by pattern matching alone."""
    varieties = find_grapes_by_pattern(name, description)
    return GrapeIdentification(
        grape_varieties=varieties,
        confidence=PATTERN_CONFIDENCE if varieties else NO_MATCH_CONFIDENCE,
        reasoning="Pattern matching",
        is_blend=len(varieties) > 1 or is_known_blend_style(name),
        primary_grape=varieties[0] if varieties else None,
    )


class GrapeVarietyIdentifier:
    """Identifies grape varieties, pattern first and service second."""

    def __init__(
        self,
        llm_service: BaseLLMService,
        settings: Settings | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        self.llm = llm_service
        self.settings = settings or get_settings()
        self.cancel_event = cancel_event

    async def identify(self, wine: CleanMenuItem) -> GrapeIdentification:
        """Identify one wine via the service, validated against known varieties.

        Raises:
            LLMError: If the service call fails.
        """
        context_lines = [f"Wine Name: {wine.name}"]
        if wine.description:
            context_lines.append(f"Description: {wine.description}")
        if wine.producer:
            context_lines.append(f"Producer: {wine.producer}")
        if wine.region:
            context_lines.append(f"Region: {wine.region}")

        response = await self.llm.generate(
            GRAPE_IDENTIFICATION_PROMPT.format(context="\n".join(context_lines)),
            GRAPE_IDENTIFICATION_SYSTEM_PROMPT,
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.enrichment_max_tokens,
        )

        try:
            identification = GrapeIdentification.model_validate(load_json_object(response))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to parse grape identification for %s: %s", wine.name, e)
            identification = GrapeIdentification(
                confidence=0, reasoning="Failed to parse AI response"
            )

        return self._validate_and_enhance(identification, wine)

    async def identify_batch(self, wines: list[CleanMenuItem]) -> list[GrapeIdentification]:
        """Identify varieties for each wine, bounding service calls.

        Returns:
            One result per wine, in input order.
        """
        results: list[GrapeIdentification] = []
        calls_used = 0
        max_calls = self.settings.grape_max_ai_calls

        logger.info("Starting grape identification for %d wines", len(wines))

        for i, wine in enumerate(wines, start=1):
            pattern = pattern_identification(wine.name, wine.description)

            if pattern.confidence >= SERVICE_THRESHOLD or calls_used >= max_calls:
                logger.debug("Pattern matching for wine %d/%d: %s", i, len(wines), wine.name)
                results.append(pattern)
                continue

            if self.cancel_event is not None and self.cancel_event.is_set():
                raise PipelineCancelledError("Menu parsing was cancelled")

            try:
                results.append(await self.identify(wine))
            except LLMError as e:
                logger.warning("Grape identification failed for %s: %s", wine.name, e)
                results.append(pattern)
            calls_used += 1

            await asyncio.sleep(min(2.0, 0.5 + 0.2 * calls_used))

        logger.info(
            "Grape identification complete: %d wines, %d/%d service calls",
            len(wines),
            calls_used,
            max_calls,
        )
        return results

    def _validate_and_enhance(
        self, identification: GrapeIdentification, wine: CleanMenuItem
    ) -> GrapeIdentification:
        """Normalize varieties and adjust confidence for what survived."""
        varieties = [
            v for v in (normalize_grape_name(g) for g in identification.grape_varieties) if v
        ]
        varieties = unique_in_order(varieties)

        confidence = identification.confidence
        if not varieties:
            varieties = find_grapes_by_pattern(wine.name, wine.description)
            confidence = min(NO_VARIETY_CONFIDENCE_CAP, confidence)
        elif len(varieties) != len(identification.grape_varieties):
            confidence = min(ADJUSTED_CONFIDENCE_CAP, confidence)

        is_blend = (
            len(varieties) > 1 or identification.is_blend or is_known_blend_style(wine.name)
        )
        primary = identification.primary_grape
        if is_blend and not primary and varieties:
            primary = varieties[0]

        return GrapeIdentification(
            grape_varieties=varieties,
            confidence=confidence,
            reasoning=identification.reasoning,
            is_blend=is_blend,
            primary_grape=primary,
        )
