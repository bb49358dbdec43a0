"""Document parsing service for uploaded menu files.

Handles:
- File validation (extension, size)
- Text extraction from PDF (PyMuPDF), Word (python-docx), Excel (openpyxl /
  xlrd), CSV, JSON and plain text
- Filename sanitization (used to derive the default menu name)

Files arrive as raw bytes; all blocking parsing is wrapped with
asyncio.to_thread for proper async handling.
"""

import asyncio
import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF
import openpyxl
import xlrd
from docx import Document as DocxDocument

from config import Settings, get_settings
from menu_parser.types import ExtractedText, RawDocument
from utils import format_file_size

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset(
    {".pdf", ".csv", ".xls", ".xlsx", ".doc", ".docx", ".json", ".txt"}
)

# Header words that mark a CSV as structured item rows
CSV_NAME_COLUMN_HINTS = ("name", "item", "dish")

# JSON item fields emitted first, in this order
JSON_LEADING_FIELDS = ("name", "description", "price", "category")


class DocumentParseError(Exception):
    """Raised when document parsing fails."""

    pass


class UnsupportedFileTypeError(Exception):
    """Raised when file type is not supported."""

    pass


class FileTooLargeError(Exception):
    """Raised when file exceeds size limit."""

    pass


class EmptyDocumentError(Exception):
    """Raised when document contains too little text to be a menu."""

    pass


class DocumentParser:
    """Service for extracting plain text from menu documents."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize document parser."""
        self.settings = settings or get_settings()

    def sanitize_filename(self, filename: str) -> str:
        """Sanitize filename to prevent path traversal and other issues."""
        filename = Path(filename).name if filename else ""
        filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", filename)

        max_length = 255
        if len(filename) > max_length:
            name, ext = Path(filename).stem, Path(filename).suffix
            filename = name[: max_length - len(ext)] + ext

        if not filename or filename.startswith("."):
            filename = "menu" + Path(filename).suffix

        return filename

    def validate_file(self, filename: str, file_size: int) -> str:
        """Validate an uploaded file and return its extension."""
        if not filename:
            raise ValueError("Filename cannot be empty")

        if file_size <= 0:
            raise ValueError("File size must be positive")

        if file_size > self.settings.max_file_size_bytes:
            raise FileTooLargeError(
                f"File size {format_file_size(file_size)} exceeds limit of "
                f"{self.settings.max_file_size_mb}MB"
            )

        ext = Path(filename).suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFileTypeError(
                f"Unsupported file format: '{ext or filename}'. "
                f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
            )

        return ext

    async def extract_text(self, document: RawDocument) -> ExtractedText:
        """Extract plain text from a raw document.

        Raises:
            UnsupportedFileTypeError: Extension is not supported.
            FileTooLargeError: Content exceeds the configured size limit.
            EmptyDocumentError: Extracted text is too short to be a menu.
            DocumentParseError: The file could not be read.
        """
        ext = self.validate_file(document.filename, len(document.content))
        logger.info(
            "Extracting text from %s (%s)",
            document.filename,
            format_file_size(len(document.content)),
        )

        try:
            if ext == ".pdf":
                text, page_count = await asyncio.to_thread(
                    self._parse_pdf_sync, document.content
                )
            elif ext == ".csv":
                text = await asyncio.to_thread(self._parse_csv_sync, document.content)
                page_count = None
            elif ext == ".xlsx":
                text = await asyncio.to_thread(self._parse_xlsx_sync, document.content)
                page_count = None
            elif ext == ".xls":
                text = await asyncio.to_thread(self._parse_xls_sync, document.content)
                page_count = None
            elif ext in (".doc", ".docx"):
                text = await asyncio.to_thread(self._parse_docx_sync, document.content)
                page_count = None
            elif ext == ".json":
                text = await asyncio.to_thread(self._parse_json_sync, document.content)
                page_count = None
            else:
                text = self._decode(document.content)
                page_count = None

        except (DocumentParseError, EmptyDocumentError):
            raise
        except Exception as e:
            logger.error("Failed to parse document %s: %s", document.filename, e)
            raise DocumentParseError(f"Failed to parse document: {e}") from e

        text = text.strip()
        if len(text) < self.settings.min_text_chars:
            raise EmptyDocumentError(
                f"No readable menu text found in {ext.lstrip('.').upper()} file"
            )

        logger.info("Extracted %d characters from %s", len(text), document.filename)
        return ExtractedText(
            text=text, document_type=ext.lstrip("."), page_count=page_count
        )

    def _decode(self, data: bytes) -> str:
        """Decode bytes as UTF-8 (BOM tolerant), falling back to latin-1."""
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError:
            return data.decode("latin-1")

    def _parse_pdf_sync(self, data: bytes) -> tuple[str, int]:
        """Parse PDF bytes using PyMuPDF (synchronous)."""
        doc = None
        try:
            doc = fitz.open(stream=data, filetype="pdf")
            text_parts = []
            page_count = len(doc)

            for page_num, page in enumerate(doc, start=1):
                try:
                    page_text = page.get_text()
                    if page_text:
                        text_parts.append(page_text)
                except Exception as e:
                    logger.warning(
                        "Failed to extract text from page %d: %s", page_num, e
                    )

            return "\n\n".join(text_parts), page_count

        except Exception as e:
            raise DocumentParseError(f"PDF extraction failed: {e}") from e
        finally:
            if doc is not None:
                doc.close()

    def _parse_csv_sync(self, data: bytes) -> str:
        """Convert CSV rows into readable lines for the extraction service."""
        rows = [
            [cell.strip() for cell in row]
            for row in csv.reader(io.StringIO(self._decode(data)))
            if any(cell.strip() for cell in row)
        ]
        if not rows:
            raise EmptyDocumentError("Empty CSV file")

        header = rows[0]
        has_name_column = any(
            hint in col.lower() for col in header for hint in CSV_NAME_COLUMN_HINTS
        )

        if not has_name_column:
            return "\n".join(" | ".join(row) for row in rows)

        lines = []
        for values in rows[1:]:
            item_data = ", ".join(
                f"{col}: {values[idx] if idx < len(values) else ''}"
                for idx, col in enumerate(header)
            )
            lines.append(f"Menu Item: {item_data}")
        return "\n".join(lines)

    def _parse_xlsx_sync(self, data: bytes) -> str:
        """Serialize every worksheet of an XLSX workbook."""
        wb = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            if not wb.worksheets:
                raise EmptyDocumentError("No worksheets found in Excel file")
            sheets = [
                (ws.title, ws.iter_rows(values_only=True)) for ws in wb.worksheets
            ]
            return self._sheets_to_text(sheets)
        finally:
            wb.close()

    def _parse_xls_sync(self, data: bytes) -> str:
        """Serialize every worksheet of a legacy XLS workbook."""
        book = xlrd.open_workbook(file_contents=data)
        if book.nsheets == 0:
            raise EmptyDocumentError("No worksheets found in Excel file")
        sheets = [
            (sheet.name, (sheet.row_values(i) for i in range(sheet.nrows)))
            for sheet in book.sheets()
        ]
        return self._sheets_to_text(sheets)

    def _sheets_to_text(self, sheets) -> str:
        """Render (sheet name, rows) pairs as pipe-joined lines per row."""
        parts: list[str] = []
        for title, rows in sheets:
            lines = []
            for row in rows:
                cells = [
                    self._format_cell(cell)
                    for cell in row or ()
                    if cell is not None and str(cell).strip()
                ]
                if cells:
                    lines.append(" | ".join(cells))
            if lines:
                parts.append(f"=== {title} ===")
                parts.extend(lines)
        return "\n".join(parts)

    def _format_cell(self, cell: Any) -> str:
        # xlrd returns every number as float
        if isinstance(cell, float) and cell.is_integer():
            return str(int(cell))
        return str(cell).strip()

    def _parse_docx_sync(self, data: bytes) -> str:
        """Parse Word document using python-docx (synchronous)."""
        try:
            doc = DocxDocument(io.BytesIO(data))
        except Exception as e:
            raise DocumentParseError(f"Word document extraction failed: {e}") from e

        text_parts = [p.text for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            for row in table.rows:
                row_text = " | ".join(cell.text.strip() for cell in row.cells)
                if row_text.strip(" |"):
                    text_parts.append(row_text)

        return "\n".join(text_parts)

    def _parse_json_sync(self, data: bytes) -> str:
        """Flatten a JSON menu export into readable lines."""
        try:
            payload = json.loads(self._decode(data))
        except json.JSONDecodeError as e:
            raise DocumentParseError(f"JSON extraction failed: {e}") from e

        if isinstance(payload, list):
            return "\n".join(self._json_item_to_text(item) for item in payload)

        if isinstance(payload, dict) and isinstance(payload.get("items"), list):
            menu_name = payload.get("name") or payload.get("menuName") or "Unknown"
            lines = [f"Menu: {menu_name}", ""]
            lines.extend(self._json_item_to_text(item) for item in payload["items"])
            return "\n".join(lines)

        if isinstance(payload, dict):
            return self._json_item_to_text(payload)

        return json.dumps(payload, indent=2)

    def _json_item_to_text(self, item: Any) -> str:
        """Flatten one JSON value to "Key: value | key: value" text."""
        if isinstance(item, str):
            return item
        if not isinstance(item, dict):
            return str(item)

        parts = [
            f"{key.capitalize()}: {item[key]}"
            for key in JSON_LEADING_FIELDS
            if item.get(key) not in (None, "")
        ]

        for key, value in item.items():
            if key in JSON_LEADING_FIELDS or value is None:
                continue
            if isinstance(value, list):
                parts.append(f"{key}: {', '.join(str(v) for v in value)}")
            else:
                parts.append(f"{key}: {value}")

        return " | ".join(parts)
