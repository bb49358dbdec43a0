"""Tests for item deduplication."""

from menu_parser.dedupe import dedupe_items, item_key
from menu_parser.types import CleanMenuItem


def item(name, item_type="food", price=None, **extra):
    return CleanMenuItem(
        name=name, category="Mains", item_type=item_type, confidence=90, price=price, **extra
    )


class TestDedupe:
    """Tests for dedupe_items."""

    def test_key_normalizes_name_and_price(self):
        """Test the key lowercases the name and treats no price as 0."""
        assert item_key(item(" Soup ")) == ("soup", "food", 0)
        assert item_key(item("Soup", price=6.0)) == ("soup", "food", 6.0)

    def test_keeps_first_occurrence_in_order(self):
        """Test duplicates from overlapping chunks are removed."""
        first = item("Caesar Salad", price=9.5, original_text="chunk 1")
        second = item("caesar salad ", price=9.5, original_text="chunk 2")
        other = item("Steak", price=24)

        assert dedupe_items([first, other, second]) == [first, other]

    def test_different_type_or_price_kept(self):
        """Test same name with different type or price are distinct."""
        items = [
            item("Negroni", item_type="beverage", price=11),
            item("Negroni", item_type="food", price=11),
            item("Negroni", item_type="beverage", price=12),
        ]
        assert dedupe_items(items) == items

    def test_idempotent(self):
        """Test deduplicating twice gives the same result."""
        items = [item("Soup"), item("soup"), item("Bread", price=3), item("BREAD", price=3)]
        once = dedupe_items(items)
        assert dedupe_items(once) == once
        assert len(once) == 2

    def test_empty(self):
        """Test an empty list stays empty."""
        assert dedupe_items([]) == []
