"""Enrichment passes run over validated menu items.

- grapes.py: grape variety identification for wines
- food.py: ingredients, cooking methods, allergens and dietary flags
- beverage.py: spirit/beer/cocktail classification in batches
- orchestrator.py: runs the passes in order and merges results
"""

from menu_parser.enrichment.beverage import BeverageEnhancer
from menu_parser.enrichment.food import FoodEnhancer
from menu_parser.enrichment.grapes import GrapeVarietyIdentifier
from menu_parser.enrichment.models import (
    BeverageAnalysis,
    DietaryTags,
    FoodEnhancement,
    GrapeIdentification,
)
from menu_parser.enrichment.orchestrator import EnrichmentOrchestrator

__all__ = [
    "EnrichmentOrchestrator",
    "GrapeVarietyIdentifier",
    "FoodEnhancer",
    "BeverageEnhancer",
    # Models
    "GrapeIdentification",
    "DietaryTags",
    "FoodEnhancement",
    "BeverageAnalysis",
]
