"""Tests for the menu chunker."""

from config import Settings
from menu_parser.chunker import MenuChunker


def wine_lines(count: int) -> str:
    return "\n".join(
        f"Chateau Example {i:04d} Bordeaux 2015 - £{40 + i % 60}" for i in range(count)
    )


class TestMenuChunker:
    """Tests for MenuChunker."""

    def setup_method(self):
        """Set up test fixtures."""
        self.settings = Settings(_env_file=None, anthropic_api_key="test-anthropic-key")
        self.chunker = MenuChunker(self.settings)

    def test_chunk_empty_text(self):
        """Test chunking empty text returns empty list."""
        assert self.chunker.chunk_text("") == []

    def test_chunk_whitespace_only(self):
        """Test chunking whitespace-only text returns empty list."""
        assert self.chunker.chunk_text("   \n\n   ") == []

    def test_chunk_short_menu_single_chunk(self):
        """Test a short menu without page markers is one chunk."""
        text = "Starters\n" + "\n".join(f"Dish number {i} - £{i + 5}" for i in range(10))

        result = self.chunker.chunk_text(text)

        assert len(result) == 1
        assert result[0].text == text
        assert result[0].chunk_index == 0
        assert result[0].start_char == 0
        assert result[0].end_char == len(text)

    def test_chunk_tiny_text_discarded(self):
        """Test page sections under the minimum are skipped as noise."""
        assert self.chunker.chunk_text("Soup - £5\nBread - £3") == []

    def test_chunk_by_page_markers(self):
        """Test each page section becomes its own chunk."""
        page_one = "\n".join(f"Starter dish {i} with garnish - £{i + 6}" for i in range(8))
        page_two = "\n".join(f"Main course {i} with sides - £{i + 15}" for i in range(8))
        text = f"Page 1\n{page_one}\nPage 2\n{page_two}"

        result = self.chunker.chunk_text(text)

        assert [c.text for c in result] == [page_one, page_two]
        assert result[1].start_char > result[0].end_char

    def test_oversized_page_split_on_entries(self):
        """Test a page larger than the page chunk size is split at entry headings."""
        entries = [
            f"Dish {i}\nSlow roasted with seasonal vegetables and a rich jus, served warm - £{i}"
            for i in range(40)
        ]
        text = "\n\n".join(entries)
        assert self.settings.page_chunk_size < len(text) < self.settings.large_document_threshold

        result = self.chunker.chunk_text(text)

        assert len(result) >= 2
        for chunk in result:
            assert len(chunk.text) <= self.settings.page_chunk_size
            assert chunk.text.startswith("Dish ")

    def test_large_document_coverage(self):
        """Test long text yields several bounded, non-empty, ordered chunks."""
        text = wine_lines(500)
        assert len(text) > 20000

        result = self.chunker.chunk_text(text)

        assert len(result) >= 2
        for i, chunk in enumerate(result):
            assert chunk.chunk_index == i
            assert chunk.text.strip()
            assert len(chunk.text) <= self.settings.forced_chunk_size
            assert text[chunk.start_char : chunk.end_char] == chunk.text
        starts = [c.start_char for c in result]
        assert starts == sorted(starts)

    def test_large_document_splits_on_newlines(self):
        """Test forced splits end at a line boundary, not mid-entry."""
        text = wine_lines(500)

        result = self.chunker.chunk_text(text)

        for chunk in result[:-1]:
            assert text[chunk.end_char] == "\n"

    def test_large_document_sections_packed(self):
        """Test blank-line sections are packed greedily below the size cap."""
        sections = [
            f"Section {s}\n" + "\n".join(f"Item {s}-{i} braised and glazed - £{i}" for i in range(12))
            for s in range(12)
        ]
        text = "\n\n".join(sections)
        assert len(text) > self.settings.large_document_threshold

        result = self.chunker.chunk_text(text)

        assert len(result) >= 2
        for chunk in result:
            assert len(chunk.text) <= self.settings.forced_chunk_size
            assert chunk.text.startswith("Section ")

    def test_force_split_without_newlines(self):
        """Test text with no line breaks is still cut to size."""
        text = "x" * 5000

        pieces = self.chunker._force_split(text, 1800)

        assert [len(p) for p in pieces] == [1800, 1800, 1400]
        assert "".join(pieces) == text
