"""Text chunking for large or dense menus.

Splits normalized menu text into bounded chunks without breaking menu
entries. Strategy, in priority order:
1. Large documents: blank-line sections packed greedily up to the forced
   chunk size, falling back to equal-size splits that end on a newline
   found in the tail of each slice.
2. Otherwise: "Page N" markers. Pages that fit are kept whole; oversized
   pages are split where a blank line is followed by a capitalized line
   (a new entry heading) and packed the same way.

Chunks shorter than the minimum after trimming are discarded as noise.
"""

import logging
import re

from config import Settings, get_settings
from menu_parser.types import TextChunk

logger = logging.getLogger(__name__)

SECTION_SPLIT = re.compile(r"\n\s*\n\s*")
PAGE_SPLIT = re.compile(r"Page\s*\d+", re.IGNORECASE)
ENTRY_SPLIT = re.compile(r"\n\s*\n\s*(?=[A-Z])")

# Prefix length used to locate a chunk in the source text
LOCATE_PREFIX_CHARS = 50


class MenuChunker:
    """Chunks menu text at section, page and entry boundaries."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize chunker with settings."""
        settings = settings or get_settings()
        self.large_document_threshold = settings.large_document_threshold
        self.forced_chunk_size = settings.forced_chunk_size
        self.page_chunk_size = settings.page_chunk_size
        self.min_chunk_chars = settings.min_chunk_chars
        self.min_page_chars = settings.min_page_chars
        self.boundary_search_ratio = settings.boundary_search_ratio

    def chunk_text(self, text: str) -> list[TextChunk]:
        """Split text into ordered, non-empty chunks.

        Args:
            text: Normalized menu text.

        Returns:
            List of TextChunk objects with position metadata.
        """
        if not text or not text.strip():
            return []

        if len(text) > self.large_document_threshold:
            pieces = self._chunk_large_document(text)
            strategy = "forced"
        else:
            pieces = self._chunk_by_pages(text)
            strategy = "page"

        pieces = [p.strip() for p in pieces if len(p.strip()) >= self.min_chunk_chars]

        chunks: list[TextChunk] = []
        cursor = 0
        for piece in pieces:
            start = text.find(piece, cursor)
            if start == -1:
                start = text.find(piece[:LOCATE_PREFIX_CHARS], cursor)
            if start == -1:
                start = cursor
            end = start + len(piece)
            cursor = max(cursor, end)

            chunks.append(
                TextChunk(
                    text=piece,
                    chunk_index=len(chunks),
                    start_char=start,
                    end_char=end,
                )
            )

        logger.info(
            "Chunking complete: %d chars -> %d chunks (strategy: %s)",
            len(text),
            len(chunks),
            strategy,
        )
        return chunks

    def _chunk_large_document(self, text: str) -> list[str]:
        """Pack blank-line sections, forcing equal splits when packing fails."""
        sections = [
            s for s in SECTION_SPLIT.split(text) if len(s.strip()) > self.min_chunk_chars
        ]
        pieces = self._pack(sections, self.forced_chunk_size)

        if len(pieces) <= 1 or any(len(p) > self.forced_chunk_size for p in pieces):
            source = pieces[0] if len(pieces) == 1 else text
            logger.debug("Section packing insufficient, forcing equal-size chunks")
            pieces = self._force_split(source, self.forced_chunk_size)

        return pieces

    def _chunk_by_pages(self, text: str) -> list[str]:
        """Split on page markers, breaking oversized pages at entry headings."""
        pieces: list[str] = []

        for page_num, page in enumerate(PAGE_SPLIT.split(text), start=1):
            page = page.strip()
            if len(page) < self.min_page_chars:
                continue

            if len(page) <= self.page_chunk_size:
                pieces.append(page)
                continue

            logger.debug("Page section %d is %d chars, splitting", page_num, len(page))
            for packed in self._pack(ENTRY_SPLIT.split(page), self.page_chunk_size):
                if len(packed) > self.page_chunk_size:
                    pieces.extend(self._force_split(packed, self.page_chunk_size))
                else:
                    pieces.append(packed)

        return pieces

    def _pack(self, sections: list[str], max_size: int) -> list[str]:
        """Greedily pack sections into chunks of at most max_size characters.

        A single section longer than max_size becomes its own chunk.
        """
        packed: list[str] = []
        current = ""

        for section in sections:
            if len(current) + len(section) > max_size:
                if current.strip():
                    packed.append(current.strip())
                current = section + "\n\n"
            else:
                current += section + "\n\n"

        if current.strip():
            packed.append(current.strip())

        return packed

    def _force_split(self, text: str, size: int) -> list[str]:
        """Split text into slices of at most size characters.

        Each slice ends on the last newline in its tail (past
        boundary_search_ratio of the slice) when one exists, and the next
        slice starts exactly where the previous one was cut.
        """
        pieces: list[str] = []
        start = 0

        while start < len(text):
            end = min(start + size, len(text))

            if end < len(text):
                last_newline = text.rfind("\n", start, end)
                if last_newline - start > size * self.boundary_search_ratio:
                    end = last_newline

            pieces.append(text[start:end])
            start = end

        return pieces
