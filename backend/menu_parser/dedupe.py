"""Deduplication of items merged from overlapping chunks."""

import logging

from menu_parser.types import CleanMenuItem

logger = logging.getLogger(__name__)


def item_key(item: CleanMenuItem) -> tuple[str, str, float]:
    """Identity key: (lowercased trimmed name, item type, price or 0)."""
    return (item.name.lower().strip(), item.item_type, item.price or 0)


def dedupe_items(items: list[CleanMenuItem]) -> list[CleanMenuItem]:
    """Remove duplicate items, keeping the first occurrence of each key."""
    seen: set[tuple[str, str, float]] = set()
    unique: list[CleanMenuItem] = []

    for item in items:
        key = item_key(item)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)

    if len(unique) < len(items):
        logger.info("Removed %d duplicate items", len(items) - len(unique))
    return unique
