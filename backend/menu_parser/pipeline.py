"""Menu parsing pipeline.

End-to-end flow for one document:
1. Extract text from the uploaded file
2. Normalize whitespace, control characters and currency symbols
3. Score density and decide whether to chunk
4. Chunked pass (when needed): extract -> repair -> validate per chunk
5. Single pass over the whole text unless the chunked result is preferred
6. Deduplicate, enrich, and assemble ParsedMenuData

Chunks are processed strictly in order with a fixed delay between calls.
A document fails only when no items survive; partial failures are reported
as errors alongside a successful result.
"""

import asyncio
import logging
from pathlib import Path

from config import Settings, get_settings
from llm import BaseLLMService, LLMError, LLMService, ServiceUnavailableError
from menu_parser.chunker import MenuChunker
from menu_parser.dedupe import dedupe_items
from menu_parser.density import assess_density
from menu_parser.document import (
    DocumentParseError,
    DocumentParser,
    EmptyDocumentError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from menu_parser.enrichment import EnrichmentOrchestrator
from menu_parser.extraction import ExtractionClient, PipelineCancelledError
from menu_parser.normalizer import normalize_text
from menu_parser.repair import parse_response
from menu_parser.types import (
    ParsedMenuData,
    ParseOutcome,
    PipelineState,
    RawDocument,
)
from menu_parser.validator import validate_items
from responses import ResponseCode
from utils import unique_in_order

logger = logging.getLogger(__name__)

DEFAULT_MENU_NAME = "Unknown Menu"


class MenuParserPipeline:
    """Turns an uploaded menu file into validated, enriched menu items.

    The pipeline holds no per-document state; one instance can parse any
    number of documents, one at a time or concurrently.
    """

    def __init__(
        self,
        llm_service: BaseLLMService | None = None,
        settings: Settings | None = None,
        document_parser: DocumentParser | None = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            llm_service: Extraction/enrichment provider. Defaults to Claude.
            settings: Application settings.
            document_parser: Format extractor.
        """
        self.settings = settings or get_settings()
        self.llm = llm_service or LLMService(settings=self.settings)
        self.document_parser = document_parser or DocumentParser(self.settings)
        self.chunker = MenuChunker(self.settings)

    async def parse_menu(
        self,
        content: bytes,
        filename: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> ParseOutcome:
        """Parse an uploaded menu file.

        Args:
            content: Raw file bytes.
            filename: Declared filename; its extension selects the extractor.
            cancel_event: Set to stop before the next external call.

        Returns:
            ParseOutcome. Document errors are mapped to result codes rather
            than raised.
        """
        safe_name = self.document_parser.sanitize_filename(filename)
        logger.info("Parsing menu %s (%d bytes)", safe_name, len(content))

        try:
            extracted = await self.document_parser.extract_text(
                RawDocument(content=content, filename=safe_name)
            )
        except UnsupportedFileTypeError as e:
            return _failure(ResponseCode.UNSUPPORTED_FILE_TYPE, str(e))
        except FileTooLargeError as e:
            return _failure(ResponseCode.FILE_TOO_LARGE, str(e))
        except EmptyDocumentError as e:
            return _failure(ResponseCode.EMPTY_DOCUMENT, str(e))
        except DocumentParseError as e:
            return _failure(ResponseCode.CORRUPTED_FILE, str(e))
        except ValueError as e:
            return _failure(ResponseCode.VALIDATION_ERROR, str(e))

        return await self.parse_text(
            extracted.text,
            menu_name=Path(safe_name).stem or None,
            cancel_event=cancel_event,
        )

    async def parse_text(
        self,
        text: str,
        menu_name: str | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> ParseOutcome:
        """Parse already-extracted menu text.

        Args:
            text: Menu text.
            menu_name: Fallback name when the service does not report one.
            cancel_event: Set to stop before the next external call.

        Returns:
            ParseOutcome with MENU_PARSED on success.
        """
        client = ExtractionClient(self.llm, self.settings, cancel_event)
        label = menu_name or DEFAULT_MENU_NAME

        try:
            state = await self._extract(client, normalize_text(text), label)
            if isinstance(state, ParseOutcome):
                return state

            state = state.with_items(dedupe_items(list(state.items)))
            if not state.items:
                logger.warning("No menu items extracted from %s", label)
                return _failure(
                    ResponseCode.NO_ITEMS_FOUND,
                    *(state.errors or state.notes),
                )

            orchestrator = EnrichmentOrchestrator(self.llm, self.settings, cancel_event)
            state = await orchestrator.enrich(state)

        except PipelineCancelledError as e:
            logger.info("Menu parsing cancelled: %s", e)
            return _failure(ResponseCode.CANCELLED, str(e))

        data = ParsedMenuData(
            menu_name=state.menu_name or menu_name or DEFAULT_MENU_NAME,
            items=list(state.items),
            total_items_found=len(state.items),
            processing_notes=unique_in_order(state.notes),
        )
        logger.info(
            "Parsed %s: %d items (wine=%d food=%d beverage=%d), %d errors",
            data.menu_name,
            len(data.items),
            state.count("wine"),
            state.count("food"),
            state.count("beverage"),
            len(state.errors),
        )
        return ParseOutcome(
            success=True,
            code=ResponseCode.MENU_PARSED,
            data=data,
            errors=list(state.errors),
        )

    async def _extract(
        self, client: ExtractionClient, text: str, label: str
    ) -> PipelineState | ParseOutcome:
        """Choose between the chunked and single-pass results.

        Returns:
            The chosen state, or a failure outcome when the single pass
            failed and there is no chunked result to fall back on.
        """
        density = assess_density(text, self.settings)

        chunked: PipelineState | None = None
        if density.needs_chunking:
            chunked = await self._extract_chunked(client, text, label)
            if self._prefer_chunked(chunked):
                logger.info("Using chunked result (%d items)", len(chunked.items))
                return chunked

        try:
            single = await self._extract_single_pass(client, text, label)
        except ServiceUnavailableError as e:
            if chunked is not None and chunked.items:
                return chunked.with_notes(f"Single-pass extraction failed: {e}")
            return _failure(ResponseCode.LLM_UNAVAILABLE, str(e))
        except LLMError as e:
            logger.error("Single-pass extraction failed: %s", e)
            if chunked is not None and chunked.items:
                return chunked.with_notes(f"Single-pass extraction failed: {e}")
            return _failure(ResponseCode.LLM_ERROR, str(e))

        if not single.items and chunked is not None and chunked.items:
            logger.info("Single pass found no items, using chunked result")
            return chunked
        return single

    async def _extract_single_pass(
        self, client: ExtractionClient, text: str, label: str
    ) -> PipelineState:
        """One extraction call over the whole text."""
        raw = parse_response(await client.extract(text, label))
        items, validation_note = validate_items(raw.items, self.settings.min_item_confidence)

        return PipelineState(menu_name=raw.menu_name).with_items(items).with_notes(
            *raw.processing_notes, validation_note
        )

    async def _extract_chunked(
        self, client: ExtractionClient, text: str, label: str
    ) -> PipelineState:
        """Extract chunk by chunk, collecting per-chunk failures as errors."""
        chunks = self.chunker.chunk_text(text)
        logger.info("Processing %d chunks for %s", len(chunks), label)

        state = PipelineState()
        failed = 0

        for i, chunk in enumerate(chunks, start=1):
            chunk_label = f"{label} (part {i} of {len(chunks)})"
            try:
                raw = parse_response(await client.extract(chunk.text, chunk_label, chunked=True))
                items, _ = validate_items(raw.items, self.settings.min_item_confidence)
                state = state.merge(
                    PipelineState(menu_name=raw.menu_name)
                    .with_items(items)
                    .with_notes(*raw.processing_notes)
                )
                logger.info("Chunk %d/%d: %d valid items", i, len(chunks), len(items))
            except PipelineCancelledError:
                raise
            except Exception as e:
                failed += 1
                logger.error("Chunk %d/%d failed: %s", i, len(chunks), e)
                state = state.with_errors(f"Chunk {i} failed: {e}")

            if i < len(chunks):
                await asyncio.sleep(self.settings.inter_chunk_delay)

        state = state.with_items(dedupe_items(list(state.items)))
        state = state.with_notes(
            f"Processed {len(chunks)} chunks",
            f"Found {len(state.items)} unique items",
        )
        if failed:
            state = state.with_notes(f"Errors: {failed} chunks failed")
        return state

    def _prefer_chunked(self, state: PipelineState) -> bool:
        """Whether the chunked result is large enough to skip the single pass."""
        return (
            state.count("wine") >= self.settings.prefer_chunked_min_wines
            or state.count("food") >= self.settings.prefer_chunked_min_foods
            or state.count("beverage") >= self.settings.prefer_chunked_min_beverages
            or len(state.items) >= self.settings.prefer_chunked_min_total
        )


def _failure(code: ResponseCode, *errors: str) -> ParseOutcome:
    logger.warning("Menu parsing failed (%s): %s", code.name, "; ".join(errors))
    return ParseOutcome(success=False, code=code, errors=list(errors))
