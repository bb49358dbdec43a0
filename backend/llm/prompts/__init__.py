"""LLM prompts for menu extraction and enrichment."""

from llm.prompts.beverage_enhancement import (
    BEVERAGE_ENHANCEMENT_PROMPT,
    BEVERAGE_ENHANCEMENT_SYSTEM_PROMPT,
)
from llm.prompts.food_enhancement import (
    FOOD_ENHANCEMENT_PROMPT,
    FOOD_ENHANCEMENT_SYSTEM_PROMPT,
)
from llm.prompts.grape_identification import (
    GRAPE_IDENTIFICATION_PROMPT,
    GRAPE_IDENTIFICATION_SYSTEM_PROMPT,
)
from llm.prompts.menu_extraction import (
    MENU_EXTRACTION_PROMPT,
    MENU_EXTRACTION_SYSTEM_PROMPT,
)

__all__ = [
    "MENU_EXTRACTION_SYSTEM_PROMPT",
    "MENU_EXTRACTION_PROMPT",
    "GRAPE_IDENTIFICATION_SYSTEM_PROMPT",
    "GRAPE_IDENTIFICATION_PROMPT",
    "FOOD_ENHANCEMENT_SYSTEM_PROMPT",
    "FOOD_ENHANCEMENT_PROMPT",
    "BEVERAGE_ENHANCEMENT_SYSTEM_PROMPT",
    "BEVERAGE_ENHANCEMENT_PROMPT",
]
