"""Menu parser module.

Turns uploaded menu documents into structured menu items:
- Document text extraction (PDF, spreadsheets, Word, CSV, JSON, text)
- Normalization, density scoring and chunking
- Extraction calls with retry, response repair and validation
- Deduplication and enrichment (grapes, food, beverages)

Usage:
    from menu_parser import MenuParserPipeline

    pipeline = MenuParserPipeline()
    outcome = await pipeline.parse_menu(content, "dinner.pdf")
"""

from menu_parser.chunker import MenuChunker
from menu_parser.dedupe import dedupe_items
from menu_parser.document import (
    DocumentParseError,
    DocumentParser,
    EmptyDocumentError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from menu_parser.extraction import ExtractionClient, PipelineCancelledError
from menu_parser.normalizer import normalize_text
from menu_parser.pipeline import MenuParserPipeline
from menu_parser.repair import parse_response
from menu_parser.types import (
    CleanMenuItem,
    ParsedMenuData,
    ParseOutcome,
    RawDocument,
    TextChunk,
)
from menu_parser.validator import validate_item, validate_items

__all__ = [
    "MenuParserPipeline",
    # Stages
    "DocumentParser",
    "MenuChunker",
    "ExtractionClient",
    "normalize_text",
    "parse_response",
    "validate_item",
    "validate_items",
    "dedupe_items",
    # Errors
    "DocumentParseError",
    "EmptyDocumentError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    "PipelineCancelledError",
    # Types
    "CleanMenuItem",
    "ParsedMenuData",
    "ParseOutcome",
    "RawDocument",
    "TextChunk",
]
