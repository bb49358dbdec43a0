"""Validation and cleanup of raw extracted items.

Raw items are plain dicts straight from the extraction service. Items with
no usable name, category, item type or confidence are dropped; the rest are
coerced into CleanMenuItem with prices and vintages as numbers and wine
style/colour mapped to closed vocabularies.
"""

import logging
import math
import re
from typing import Any

from menu_parser.types import ITEM_TYPES, CleanMenuItem, ServingOption

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 30
MIN_NAME_LENGTH = 2
MIN_VINTAGE = 1800
MAX_VINTAGE = 2100

# First match wins; order matters ("sweet vermouth" is dessert, not fortified)
WINE_STYLE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "sparkling",
        ("sparkling", "prosecco", "cava", "cremant", "franciacorta", "petillant", "pétillant"),
    ),
    ("champagne", ("champagne",)),
    (
        "dessert",
        (
            "dessert",
            "sweet",
            "ice wine",
            "icewine",
            "late harvest",
            "noble rot",
            "botrytis",
            "aszú",
            "aszu",
            "moscato",
            "moscatel",
            "sauternes",
            "beerenauslese",
            "trockenbeerenauslese",
            "eiswein",
            "vin doux",
            "passito",
            "vendange tardive",
        ),
    ),
    (
        "fortified",
        (
            "fortified",
            "port",
            "porto",
            "sherry",
            "madeira",
            "marsala",
            "vermouth",
            "commandaria",
            "mistelle",
            "lbv",
            "late bottled vintage",
            "fino",
            "manzanilla",
            "amontillado",
            "oloroso",
            "palo cortado",
            "pedro ximenez",
            "bual",
            "verdelho",
            "sercial",
            "malmsey",
        ),
    ),
)

WINE_COLOR_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("red", ("red", "rouge", "tinto", "rosso")),
    ("white", ("white", "blanc", "blanco", "bianco", "weiss", "branco")),
    (
        "rosé",
        ("rosé", "rose", "rosado", "rosato", "chiaretto", "pink", "blush", "provence"),
    ),
    (
        "sparkling",
        (
            "sparkling",
            "champagne",
            "prosecco",
            "cava",
            "cremant",
            "crémant",
            "franciacorta",
            "spumante",
            "pétillant",
            "petillant",
        ),
    ),
    ("orange", ("orange", "amber", "skin contact", "skin-contact")),
)

ROSE_NAME_CUES = ("rosé", "rose", "rosado", "rosato", "chiaretto", "pink")
ROSE_REGION_CUES = ("provence",)
ROSE_CATEGORY_CUES = ("rosé", "rose")

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_YEAR = re.compile(r"\b\d{4}\b")


def map_wine_style(value: str | None) -> str:
    """Map free-text wine style to still/sparkling/champagne/dessert/fortified."""
    if not value:
        return "still"
    style = value.lower().strip()
    for mapped, keywords in WINE_STYLE_KEYWORDS:
        if any(keyword in style for keyword in keywords):
            return mapped
    return "still"


def map_wine_color(value: str | None) -> str:
    """Map free-text wine colour to red/white/rosé/sparkling/orange/other."""
    if not value:
        return "other"
    color = value.lower().strip()
    for mapped, keywords in WINE_COLOR_KEYWORDS:
        if any(keyword in color for keyword in keywords):
            return mapped
    return "other"


def infer_rose(name: str, region: str | None, category: str | None) -> bool:
    """Whether name, region or category mark a wine as rosé."""
    name = name.lower()
    region = (region or "").lower()
    category = (category or "").lower()
    return (
        any(cue in name for cue in ROSE_NAME_CUES)
        or any(cue in region for cue in ROSE_REGION_CUES)
        or any(cue in category for cue in ROSE_CATEGORY_CUES)
    )


def coerce_number(value: Any) -> float | None:
    """Coerce a price-like value to a finite, non-negative float.

    Strings are parsed after stripping currency symbols and thousands
    separators ("£1,250.00" -> 1250.0).
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER.search(value.replace(",", ""))
        if match is None:
            return None
        number = float(match.group())
    else:
        return None

    if not math.isfinite(number) or number < 0:
        return None
    return number


def coerce_confidence(value: Any) -> float | None:
    """Coerce confidence to a number clamped to [0, 100], or None."""
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        match = _NUMBER.search(value)
        if match is None:
            return None
        number = float(match.group())
    else:
        return None

    if not math.isfinite(number):
        return None
    return max(0, min(100, number))


def coerce_vintage(value: Any) -> int | None:
    """Coerce a vintage to a plausible four-digit year, or None."""
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        year = int(value)
    elif isinstance(value, int):
        year = value
    elif isinstance(value, str):
        match = _YEAR.search(value)
        if match is None:
            return None
        year = int(match.group())
    else:
        return None

    return year if MIN_VINTAGE <= year <= MAX_VINTAGE else None


def _clean_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _clean_list(value: Any) -> list[str] | None:
    """Trim entries and drop blanks; a bare string becomes a one-item list."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None
    cleaned = [entry.strip() for entry in value if isinstance(entry, str) and entry.strip()]
    return cleaned or None


def _clean_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _clean_serving_options(value: Any) -> list[ServingOption] | None:
    if not isinstance(value, list):
        return None
    options = []
    for option in value:
        if not isinstance(option, dict):
            continue
        size = _clean_str(option.get("size"))
        price = coerce_number(option.get("price"))
        if size and price is not None:
            options.append(ServingOption(size=size, price=price))
    return options or None


def is_valid_item(raw: dict[str, Any], min_confidence: float = DEFAULT_MIN_CONFIDENCE) -> bool:
    """Check the drop rules: name, category, item type and confidence."""
    name = raw.get("name")
    if not isinstance(name, str) or len(name.strip()) < MIN_NAME_LENGTH:
        return False

    category = raw.get("category")
    if not isinstance(category, str) or not category.strip():
        return False

    if raw.get("itemType") not in ITEM_TYPES:
        return False

    confidence = coerce_confidence(raw.get("confidence"))
    return confidence is not None and confidence >= min_confidence


def clean_item(raw: dict[str, Any]) -> CleanMenuItem:
    """Normalize a raw item that already passed is_valid_item."""
    name = raw["name"].strip()
    category = raw["category"].strip()
    item_type = raw["itemType"]
    region = _clean_str(raw.get("region"))

    wine_style = None
    wine_color = None
    if item_type == "wine":
        wine_style = map_wine_style(_clean_str(raw.get("wineStyle")))
        wine_color = map_wine_color(_clean_str(raw.get("wineColor")))
        if wine_color == "other" and infer_rose(name, region, category):
            logger.debug("Inferred rosé for %s from name/region/category", name)
            wine_color = "rosé"

    return CleanMenuItem(
        name=name,
        category=category,
        item_type=item_type,
        confidence=coerce_confidence(raw.get("confidence")),
        original_text=_clean_str(raw.get("originalText")) or "",
        description=_clean_str(raw.get("description")),
        price=coerce_number(raw.get("price")),
        ingredients=_clean_list(raw.get("ingredients")),
        vintage=coerce_vintage(raw.get("vintage")),
        producer=_clean_str(raw.get("producer")),
        region=region,
        grape_variety=_clean_list(raw.get("grapeVariety")),
        wine_style=wine_style,
        wine_color=wine_color,
        serving_options=_clean_serving_options(raw.get("servingOptions")),
        cooking_methods=_clean_list(raw.get("cookingMethods")),
        allergens=_clean_list(raw.get("allergens")),
        is_dairy_free=_clean_bool(raw.get("isDairyFree")),
        is_spicy=_clean_bool(raw.get("isSpicy")),
        spirit_type=_clean_str(raw.get("spiritType")),
        beer_style=_clean_str(raw.get("beerStyle")),
        cocktail_ingredients=_clean_list(raw.get("cocktailIngredients")),
        alcohol_content=_clean_str(raw.get("alcoholContent")),
        serving_style=_clean_str(raw.get("servingStyle")),
        is_non_alcoholic=_clean_bool(raw.get("isNonAlcoholic")),
        temperature=_clean_str(raw.get("temperature")),
        is_vegetarian=_clean_bool(raw.get("isVegetarian")),
        is_vegan=_clean_bool(raw.get("isVegan")),
        is_gluten_free=_clean_bool(raw.get("isGlutenFree")),
    )


def validate_item(
    raw: dict[str, Any], min_confidence: float = DEFAULT_MIN_CONFIDENCE
) -> CleanMenuItem | None:
    """Return the cleaned item, or None if it fails the drop rules."""
    if not isinstance(raw, dict) or not is_valid_item(raw, min_confidence):
        return None
    return clean_item(raw)


def validate_items(
    raw_items: list[dict[str, Any]],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> tuple[list[CleanMenuItem], str]:
    """Validate a batch of raw items.

    Returns:
        Tuple of (valid items in input order, summary processing note).
    """
    items = [
        item
        for item in (validate_item(raw, min_confidence) for raw in raw_items)
        if item is not None
    ]
    logger.info("Validation: %d raw items -> %d valid items", len(raw_items), len(items))
    return items, f"Validation: {len(raw_items)} raw items → {len(items)} valid items"
