"""Tests for raw item validation and cleanup."""

import pytest
from conftest import raw_item

from menu_parser.validator import (
    coerce_confidence,
    coerce_number,
    coerce_vintage,
    map_wine_color,
    map_wine_style,
    validate_item,
    validate_items,
)


class TestCoercion:
    """Tests for scalar coercion helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12, 12.0),
            (9.5, 9.5),
            ("£9.50", 9.5),
            ("1,250.00", 1250.0),
            ("MP", None),
            (-4, None),
            (float("nan"), None),
            (float("inf"), None),
            (True, None),
            (None, None),
        ],
    )
    def test_coerce_number(self, value, expected):
        """Test prices become finite non-negative floats or None."""
        assert coerce_number(value) == expected

    def test_coerce_confidence_clamps(self):
        """Test confidence is clamped into [0, 100]."""
        assert coerce_confidence(150) == 100
        assert coerce_confidence(-5) == 0
        assert coerce_confidence("85") == 85.0
        assert coerce_confidence(None) is None
        assert coerce_confidence("high") is None

    @pytest.mark.parametrize(
        "value,expected",
        [(2019, 2019), ("2019", 2019), ("Vintage 2015", 2015), (2015.0, 2015), ("NV", None), (12, None)],
    )
    def test_coerce_vintage(self, value, expected):
        """Test vintages become plausible four-digit years."""
        assert coerce_vintage(value) == expected


class TestWineVocabulary:
    """Tests for wine style and colour mapping."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "still"),
            ("Still", "still"),
            ("Prosecco DOC", "sparkling"),
            ("Champagne", "champagne"),
            ("Late Harvest", "dessert"),
            ("Tawny Port", "fortified"),
            ("Fino Sherry", "fortified"),
            ("something odd", "still"),
        ],
    )
    def test_map_wine_style(self, value, expected):
        """Test free-text styles map to the closed vocabulary."""
        assert map_wine_style(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, "other"),
            ("Red", "red"),
            ("Blanc", "white"),
            ("Rosato", "rosé"),
            ("Chiaretto", "rosé"),
            ("Provence pink", "rosé"),
            ("Crémant", "sparkling"),
            ("Skin contact", "orange"),
            ("unknown", "other"),
        ],
    )
    def test_map_wine_color(self, value, expected):
        """Test free-text colours map to the closed vocabulary."""
        assert map_wine_color(value) == expected


class TestValidateItem:
    """Tests for validate_item drop rules and cleanup."""

    def test_confidence_boundary(self):
        """Test 30 is kept, 29 dropped, 150 clamped to 100."""
        assert validate_item(raw_item("Soup", confidence=30)).confidence == 30
        assert validate_item(raw_item("Soup", confidence=29)) is None
        assert validate_item(raw_item("Soup", confidence=150)).confidence == 100

    def test_missing_confidence_dropped(self):
        """Test an item without confidence is dropped."""
        item = raw_item("Soup")
        del item["confidence"]
        assert validate_item(item) is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "A"},
            {"name": "  "},
            {"name": None},
            {"category": ""},
            {"category": None},
            {"itemType": "dessert"},
        ],
    )
    def test_invalid_items_dropped(self, overrides):
        """Test name, category and item type drop rules."""
        item = raw_item("Soup")
        item.update(overrides)
        assert validate_item(item) is None

    def test_non_dict_dropped(self):
        """Test non-object entries are dropped."""
        assert validate_item("Soup") is None

    def test_mip_rose_inferred(self):
        """Test a Provence rosé with no colour is inferred as rosé."""
        item = validate_item(
            raw_item("2022 MiP Classic Rosé, Côtes de Provence", item_type="wine", category="Wine")
        )

        assert item.wine_color == "rosé"
        assert item.wine_style == "still"

    def test_wine_defaults(self):
        """Test wines always receive a style and colour."""
        item = validate_item(raw_item("House Red", item_type="wine", category="Wine"))

        assert item.wine_style == "still"
        assert item.wine_color == "other"

    def test_non_wine_has_no_wine_fields(self):
        """Test food items carry no wine style or colour."""
        item = validate_item(raw_item("Soup", wineStyle="Sparkling"))

        assert item.wine_style is None
        assert item.wine_color is None

    def test_cleans_fields(self):
        """Test strings are trimmed and numbers coerced."""
        item = validate_item(
            raw_item(
                "  Barolo Riserva ",
                item_type="wine",
                category=" Red Wine ",
                price="£120",
                vintage="2016",
                grapeVariety=["Nebbiolo", " ", ""],
                servingOptions=[
                    {"size": "Glass", "price": "15"},
                    {"size": "", "price": 10},
                    {"size": "Bottle", "price": "n/a"},
                ],
                isVegan="yes",
            )
        )

        assert item.name == "Barolo Riserva"
        assert item.category == "Red Wine"
        assert item.price == 120.0
        assert item.vintage == 2016
        assert item.grape_variety == ["Nebbiolo"]
        assert [(o.size, o.price) for o in item.serving_options] == [("Glass", 15.0)]
        assert item.is_vegan is None

    def test_to_dict_uses_wire_keys(self):
        """Test serialized items use camelCase keys and omit absent fields."""
        item = validate_item(raw_item("Soup", price=6, isVegetarian=True))
        data = item.to_dict()

        assert data["itemType"] == "food"
        assert data["isVegetarian"] is True
        assert data["originalText"] == "Soup"
        assert "vintage" not in data
        assert "wineColor" not in data


class TestValidateItems:
    """Tests for batch validation."""

    def test_summary_note(self):
        """Test the summary counts raw and valid items."""
        items, note = validate_items([raw_item("Soup"), raw_item("X"), raw_item("Bread", confidence=10)])

        assert [i.name for i in items] == ["Soup"]
        assert note == "Validation: 3 raw items → 1 valid items"
