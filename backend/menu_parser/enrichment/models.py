"""Pydantic models validating enrichment service replies.

The service replies in camelCase JSON; models accept either the alias or
the field name. Lenient "before" validators coerce sloppy values (string
numbers, missing lists) the way the extraction validator does.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_FOOD_INGREDIENTS = 8
MAX_COOKING_METHODS = 4
MAX_ALLERGENS = 6


def _clamp_confidence(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return max(0, min(100, value))


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise ValueError("expected a list")
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


class GrapeIdentification(BaseModel):
    """Grape varieties identified for one wine."""

    model_config = ConfigDict(populate_by_name=True)

    grape_varieties: list[str] = Field(default_factory=list, alias="grapeVarieties")
    confidence: float = Field(default=50, description="0-100")
    reasoning: str = Field(default="AI identification")
    is_blend: bool = Field(default=False, alias="isBlend")
    primary_grape: str | None = Field(default=None, alias="primaryGrape")

    @field_validator("grape_varieties", mode="before")
    @classmethod
    def coerce_varieties(cls, v: Any) -> list[str]:
        return _string_list(v) if isinstance(v, list) else []

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return _clamp_confidence(v, 50)

    @field_validator("reasoning", mode="before")
    @classmethod
    def default_reasoning(cls, v: Any) -> str:
        return _optional_str(v) or "AI identification"

    @field_validator("is_blend", mode="before")
    @classmethod
    def truthy_blend(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("primary_grape", mode="before")
    @classmethod
    def clean_primary(cls, v: Any) -> str | None:
        return _optional_str(v)


class DietaryTags(BaseModel):
    """Dietary flags inferred for a food item."""

    model_config = ConfigDict(populate_by_name=True)

    is_vegetarian: bool = Field(default=False, alias="isVegetarian")
    is_vegan: bool = Field(default=False, alias="isVegan")
    is_gluten_free: bool = Field(default=False, alias="isGlutenFree")
    is_dairy_free: bool = Field(default=False, alias="isDairyFree")
    is_spicy: bool = Field(default=False, alias="isSpicy")

    @field_validator("*", mode="before")
    @classmethod
    def truthy(cls, v: Any) -> bool:
        return bool(v)


class FoodEnhancement(BaseModel):
    """Culinary analysis of one food item.

    ingredients, cookingMethods and dietaryTags are required; a reply
    missing any of them fails validation.
    """

    model_config = ConfigDict(populate_by_name=True)

    ingredients: list[str]
    cooking_methods: list[str] = Field(alias="cookingMethods")
    dietary_tags: DietaryTags = Field(alias="dietaryTags")
    allergens: list[str] = Field(default_factory=list)
    confidence: float = Field(default=50)

    @field_validator("ingredients", mode="before")
    @classmethod
    def cap_ingredients(cls, v: Any) -> list[str]:
        return _string_list(v)[:MAX_FOOD_INGREDIENTS]

    @field_validator("cooking_methods", mode="before")
    @classmethod
    def cap_methods(cls, v: Any) -> list[str]:
        return _string_list(v)[:MAX_COOKING_METHODS]

    @field_validator("allergens", mode="before")
    @classmethod
    def cap_allergens(cls, v: Any) -> list[str]:
        return _string_list(v)[:MAX_ALLERGENS] if isinstance(v, list) else []

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        return _clamp_confidence(v, 50)


class BeverageAnalysis(BaseModel):
    """Analysis of one beverage, addressed by its index in the batch."""

    model_config = ConfigDict(populate_by_name=True)

    index: int
    spirit_type: str | None = Field(default=None, alias="spiritType")
    beer_style: str | None = Field(default=None, alias="beerStyle")
    cocktail_ingredients: list[str] | None = Field(
        default=None, alias="cocktailIngredients"
    )
    alcohol_content: str | None = Field(default=None, alias="alcoholContent")
    serving_style: str | None = Field(default=None, alias="servingStyle")
    is_non_alcoholic: bool | None = Field(default=None, alias="isNonAlcoholic")
    temperature: str | None = None
    price: float | None = None
    serving_options: list[dict[str, Any]] = Field(
        default_factory=list, alias="servingOptions"
    )
    confidence: float | None = None

    @field_validator(
        "spirit_type",
        "beer_style",
        "alcohol_content",
        "serving_style",
        "temperature",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v: Any) -> str | None:
        return _optional_str(v)

    @field_validator("cocktail_ingredients", mode="before")
    @classmethod
    def clean_ingredients(cls, v: Any) -> list[str] | None:
        return _string_list(v) if isinstance(v, list) else None

    @field_validator("is_non_alcoholic", mode="before")
    @classmethod
    def strict_bool(cls, v: Any) -> bool | None:
        return v if isinstance(v, bool) else None

    @field_validator("price", "confidence", mode="before")
    @classmethod
    def positive_number(cls, v: Any) -> float | None:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return None
        if not math.isfinite(v) or v <= 0:
            return None
        return v

    @field_validator("serving_options", mode="before")
    @classmethod
    def option_dicts(cls, v: Any) -> list[dict[str, Any]]:
        return [o for o in v if isinstance(o, dict)] if isinstance(v, list) else []
