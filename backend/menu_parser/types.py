"""Shared types and dataclasses for the menu parser.

Provides typed alternatives to dict[str, Any] for values passed between
pipeline stages. Stage outputs are frozen; stages build new values with
dataclasses.replace instead of mutating their inputs.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from responses import ResponseCode, error_dict, success_dict

ITEM_TYPES = ("food", "beverage", "wine")
WINE_STYLES = ("still", "sparkling", "champagne", "dessert", "fortified")
WINE_COLORS = ("red", "white", "rosé", "sparkling", "orange", "other")


@dataclass(frozen=True)
class RawDocument:
    """An uploaded file: raw bytes plus its declared filename."""

    content: bytes
    filename: str

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()


@dataclass(frozen=True)
class ExtractedText:
    """Text pulled out of a RawDocument by the format extractor."""

    text: str
    document_type: str
    page_count: int | None = None


@dataclass(frozen=True)
class TextChunk:
    """A chunk of text with position metadata."""

    text: str
    chunk_index: int
    start_char: int
    end_char: int


@dataclass(frozen=True)
class ServingOption:
    """A serving size with its own price (e.g. Glass / Bottle)."""

    size: str
    price: float

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size, "price": self.price}


@dataclass(frozen=True)
class RawExtractionData:
    """Parsed (possibly salvaged) extraction service response.

    Items are left as the service produced them; validation happens later.
    """

    menu_name: str | None
    items: list[dict[str, Any]]
    total_items_found: int = 0
    processing_notes: list[str] = field(default_factory=list)
    truncated: bool = False
    recovered_items: int = 0
    discarded_items: int = 0


# snake_case attribute -> camelCase wire key, where they differ
_WIRE_KEYS = {
    "item_type": "itemType",
    "grape_variety": "grapeVariety",
    "wine_style": "wineStyle",
    "wine_color": "wineColor",
    "serving_options": "servingOptions",
    "cooking_methods": "cookingMethods",
    "is_dairy_free": "isDairyFree",
    "is_spicy": "isSpicy",
    "spirit_type": "spiritType",
    "beer_style": "beerStyle",
    "cocktail_ingredients": "cocktailIngredients",
    "alcohol_content": "alcoholContent",
    "serving_style": "servingStyle",
    "is_non_alcoholic": "isNonAlcoholic",
    "is_vegetarian": "isVegetarian",
    "is_vegan": "isVegan",
    "is_gluten_free": "isGlutenFree",
    "original_text": "originalText",
}


@dataclass(frozen=True)
class CleanMenuItem:
    """A validated, canonical menu item."""

    name: str
    category: str
    item_type: str
    confidence: float
    original_text: str = ""
    description: str | None = None
    price: float | None = None
    ingredients: list[str] | None = None

    # Wine-specific
    vintage: int | None = None
    producer: str | None = None
    region: str | None = None
    grape_variety: list[str] | None = None
    wine_style: str | None = None
    wine_color: str | None = None
    serving_options: list[ServingOption] | None = None

    # Food enrichment
    cooking_methods: list[str] | None = None
    allergens: list[str] | None = None
    is_dairy_free: bool | None = None
    is_spicy: bool | None = None

    # Beverage enrichment
    spirit_type: str | None = None
    beer_style: str | None = None
    cocktail_ingredients: list[str] | None = None
    alcohol_content: str | None = None
    serving_style: str | None = None
    is_non_alcoholic: bool | None = None
    temperature: str | None = None

    # Dietary info
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_gluten_free: bool | None = None

    def with_updates(self, **changes: Any) -> "CleanMenuItem":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape, omitting absent fields."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "serving_options":
                value = [option.to_dict() for option in value]
            result[_WIRE_KEYS.get(f.name, f.name)] = value
        return result


@dataclass(frozen=True)
class ParsedMenuData:
    """Terminal output of the pipeline."""

    menu_name: str
    items: list[CleanMenuItem]
    total_items_found: int
    processing_notes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "menuName": self.menu_name,
            "items": [item.to_dict() for item in self.items],
            "totalItemsFound": self.total_items_found,
            "processingNotes": list(self.processing_notes),
        }


@dataclass(frozen=True)
class PipelineState:
    """Accumulator threaded through the pipeline stages.

    Every stage returns a new state; nothing is mutated in place.
    """

    items: tuple[CleanMenuItem, ...] = ()
    notes: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    menu_name: str | None = None

    def with_items(
        self, items: list[CleanMenuItem] | tuple[CleanMenuItem, ...]
    ) -> "PipelineState":
        return replace(self, items=tuple(items))

    def with_notes(self, *notes: str) -> "PipelineState":
        return replace(self, notes=self.notes + tuple(n for n in notes if n))

    def with_errors(self, *errors: str) -> "PipelineState":
        return replace(self, errors=self.errors + tuple(e for e in errors if e))

    def merge(self, other: "PipelineState") -> "PipelineState":
        """Append another state's items, notes and errors to this one."""
        return PipelineState(
            items=self.items + other.items,
            notes=self.notes + other.notes,
            errors=self.errors + other.errors,
            menu_name=self.menu_name or other.menu_name,
        )

    def count(self, item_type: str) -> int:
        return sum(1 for item in self.items if item.item_type == item_type)


@dataclass(frozen=True)
class ParseOutcome:
    """Result handed back to callers of the pipeline."""

    success: bool
    code: ResponseCode
    data: ParsedMenuData | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Build the {success, data, errors} envelope."""
        if self.success and self.data is not None:
            return success_dict(self.code, self.data.to_dict(), errors=self.errors)
        return error_dict(self.code, errors=self.errors)
