"""Tests for extraction response parsing and truncation recovery."""

import json

import pytest

from menu_parser.repair import (
    TRUNCATION_NOTE,
    clean_json_candidate,
    load_json_object,
    parse_response,
    salvage_truncated_json,
    strip_code_fences,
)

ITEM_A = {"name": "Caesar Salad", "category": "Starters", "itemType": "food", "confidence": 90}
ITEM_B = {"name": "Steak Frites", "category": "Mains", "itemType": "food", "confidence": 85}
ITEM_C = {
    "name": "House Red",
    "category": "Wine",
    "itemType": "wine",
    "servingOptions": [{"size": "Glass", "price": 7}, {"size": "Bottle", "price": 28}],
    "confidence": 80,
}


def full_reply(items, **extra):
    payload = {"menuName": "Bistro", "items": items, "totalItemsFound": len(items)}
    payload.update(extra)
    return json.dumps(payload)


class TestHelpers:
    """Tests for fence stripping and candidate cleanup."""

    def test_strip_json_fence(self):
        """Test ```json fences are removed."""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_plain_fence(self):
        """Test bare ``` fences are removed."""
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_clean_candidate_cuts_outer_object(self):
        """Test chatter around the object is dropped."""
        assert clean_json_candidate('Here you go: {"a": 1} Enjoy!') == '{"a": 1}'

    def test_clean_candidate_drops_trailing_commas(self):
        """Test trailing commas before closers are removed."""
        assert json.loads(clean_json_candidate('{"a": [1, 2,],\n"b": 3,}')) == {"a": [1, 2], "b": 3}

    def test_load_json_object(self):
        """Test a fenced object with chatter is loaded."""
        assert load_json_object('```json\nSure! {"beverages": []}\n```') == {"beverages": []}

    def test_load_json_object_invalid_raises(self):
        """Test unparseable text raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            load_json_object("no json here")


class TestSalvage:
    """Tests for salvage_truncated_json."""

    def test_no_items_marker(self):
        """Test text without an items array cannot be salvaged."""
        assert salvage_truncated_json('{"menuName": "Bistro"') is None

    def test_no_complete_item(self):
        """Test truncation inside the first item recovers nothing."""
        assert salvage_truncated_json('{"items": [{"name": "Caesar') is None

    def test_brackets_inside_strings_ignored(self):
        """Test braces in string values do not confuse the scanner."""
        text = '{"items": [{"name": "Soup {of} the [day]"}, {"name": "Bre'
        result = salvage_truncated_json(text)

        assert result.recovered == 1
        assert result.discarded == 1
        assert json.loads(result.text)["items"] == [{"name": "Soup {of} the [day]"}]


class TestParseResponse:
    """Tests for parse_response."""

    def test_parses_complete_reply(self):
        """Test a well-formed reply is parsed as-is."""
        result = parse_response(full_reply([ITEM_A, ITEM_B], processingNotes=["Two sections"]))

        assert result.menu_name == "Bistro"
        assert result.items == [ITEM_A, ITEM_B]
        assert result.total_items_found == 2
        assert result.processing_notes == ["Two sections"]
        assert not result.truncated

    def test_parses_fenced_reply_with_trailing_commas(self):
        """Test markdown fences and trailing commas are repaired."""
        raw = '```json\n{"menuName": "Bistro", "items": [{"name": "Soup",},],}\n```'
        result = parse_response(raw)

        assert result.items == [{"name": "Soup"}]

    def test_truncated_in_third_item_recovers_two(self):
        """Test a reply cut inside the third item keeps the first two."""
        complete = full_reply([ITEM_A, ITEM_B, ITEM_C])
        cut = complete.index('"House Red"') + 5
        truncated = complete[:cut]

        result = parse_response(truncated)

        assert [item["name"] for item in result.items] == ["Caesar Salad", "Steak Frites"]
        assert result.truncated
        assert result.recovered_items == 2
        assert result.discarded_items == 1
        assert result.processing_notes
        assert TRUNCATION_NOTE in result.processing_notes
        assert any("Recovered 2 items" in note for note in result.processing_notes)

    def test_truncated_inside_nested_array(self):
        """Test truncation inside serving options still discards the open item."""
        complete = full_reply([ITEM_A, ITEM_C])
        truncated = complete[: complete.index('"Bottle"')]

        result = parse_response(truncated)

        assert [item["name"] for item in result.items] == ["Caesar Salad"]
        assert result.discarded_items == 1

    def test_cut_at_any_offset_keeps_complete_items_in_order(self):
        """Test every truncation of a reply yields a prefix of its items."""
        items = [
            dict(ITEM_A, description="Romaine, parmesan {house} dressing", price=9.5),
            dict(ITEM_B, description="Steak, frites [rare] with a \"bistro\" sauce", price=24.0),
            dict(ITEM_C, grapeVariety=["Merlot", "Cabernet Sauvignon"]),
            {"name": "Tiramisu", "category": "Desserts", "itemType": "food", "price": 8},
        ]
        complete = json.dumps(
            {
                "menuName": "Bistro",
                "items": items,
                "totalItemsFound": len(items),
                "processingNotes": ["ok"],
            },
            indent=2,
        )

        for cut in range(len(complete)):
            result = parse_response(complete[:cut])
            assert result.items == items[: len(result.items)], cut
            if result.items:
                assert result.truncated, cut

        assert parse_response(complete).items == items

    def test_unparseable_reply_never_raises(self):
        """Test garbage yields no items and a diagnostic note."""
        result = parse_response("I'm sorry, I can't read this menu.")

        assert result.items == []
        assert result.processing_notes[0].startswith("Failed to parse AI response")

    def test_empty_reply(self):
        """Test an empty reply is handled."""
        assert parse_response("").items == []

    def test_missing_items_array(self):
        """Test a valid object without items is reported."""
        result = parse_response('{"menuName": "Bistro", "items": "none"}')

        assert result.items == []
        assert result.processing_notes == ["Invalid response structure: missing items array"]

    def test_blank_menu_name_is_none(self):
        """Test a blank menu name is treated as missing."""
        assert parse_response('{"menuName": "  ", "items": []}').menu_name is None

    def test_total_falls_back_to_item_count(self):
        """Test a missing or zero total uses the item count."""
        result = parse_response(full_reply([ITEM_A], totalItemsFound=0))
        assert result.total_items_found == 1

    def test_large_menu_notes(self):
        """Test large item counts add review notes."""
        items = [dict(ITEM_A, name=f"Dish {i}") for i in range(46)]
        result = parse_response(full_reply(items))

        assert "Successfully extracted 46 items (large menu)" in result.processing_notes
        assert any(note.startswith("Large wine list detected") for note in result.processing_notes)
