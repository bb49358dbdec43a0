"""Tests for menu text normalization."""

from menu_parser.normalizer import normalize_text


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_collapses_inline_whitespace(self):
        """Test runs of spaces and tabs collapse to one space."""
        assert normalize_text("Caesar   Salad\t\t- 9") == "Caesar Salad - 9"

    def test_collapses_blank_lines(self):
        """Test blank-line runs collapse to a single newline."""
        assert normalize_text("Starters\n\n\n\nSoup\n \n\nBread") == "Starters\nSoup\nBread"

    def test_form_feed_becomes_newline(self):
        """Test page breaks from PDF extraction become line breaks."""
        assert normalize_text("Page one\fPage two") == "Page one\nPage two"

    def test_strips_control_characters(self):
        """Test control characters are removed but newlines survive."""
        assert normalize_text("Soup\x00\x07 of the day\x1b\nBread\x85") == "Soup of the day\nBread"

    def test_canonical_currency(self):
        """Test dollar and euro signs map to the canonical symbol."""
        assert normalize_text("Soup $6, Wine €30, Beer £5") == "Soup £6, Wine £30, Beer £5"

    def test_trims(self):
        """Test leading and trailing whitespace is removed."""
        assert normalize_text("  \n Menu \n  ") == "Menu"

    def test_idempotent(self):
        """Test normalizing twice changes nothing."""
        text = "  Starters\n\n\tSoup   $6\x00\n\n\nMains\fSteak €24  "
        once = normalize_text(text)
        assert normalize_text(once) == once
