"""Response repair: parse extraction replies, salvaging truncated JSON.

parse_response never raises. A reply that cannot be parsed or salvaged
yields an empty item list plus a diagnostic note, so one bad chunk does
not fail the whole document.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

from menu_parser.types import RawExtractionData
from utils import truncate_text

logger = logging.getLogger(__name__)

TRUNCATION_NOTE = "Parsing completed with potential truncation"
SALVAGE_CLOSING = (
    '], "totalItemsFound": 0, "processingNotes": ["' + TRUNCATION_NOTE + '"]}'
)

LARGE_MENU_ITEM_COUNT = 30
VERIFY_ITEM_COUNT = 45

_JSON_FENCE_OPEN = re.compile(r"^```json\s*")
_FENCE_OPEN = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")
_ITEMS_MARKER = re.compile(r'"items"\s*:\s*\[')


@dataclass(frozen=True)
class SalvageResult:
    """Valid JSON rebuilt from the complete prefix of a truncated reply."""

    text: str
    recovered: int
    discarded: int


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```json"):
        text = _FENCE_CLOSE.sub("", _JSON_FENCE_OPEN.sub("", text))
    elif text.startswith("```"):
        text = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text))
    return text


def clean_json_candidate(text: str, trim_end: bool = True) -> str:
    """Cut the outermost {...} span and apply conservative textual repairs.

    With trim_end=False only the leading junk is cut, so a truncated tail
    stays visible to the salvage scanner.
    """
    start = text.find("{")
    end = text.rfind("}") if trim_end else len(text) - 1
    if start != -1 and end > start:
        text = text[start : end + 1]

    text = re.sub(r"[\n\r\t]", " ", text)
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r",(\s*[}\]])", r"\1", text)
    text = re.sub(r",\s*$", "", text)
    return text.strip()


def load_json_object(text: str) -> Any:
    """Parse the outermost {...} span of a fenced or chatty reply.

    Raises:
        json.JSONDecodeError: If the span is not valid JSON.
    """
    text = strip_code_fences(text or "")
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        text = text[start : end + 1]
    return json.loads(text)


def salvage_truncated_json(text: str) -> SalvageResult | None:
    """Rebuild a truncated reply around its last complete item.

    Scans forward from the "items": [ marker tracking bracket depth
    (ignoring brackets inside strings), keeps everything through the last
    item object closed at array level and appends a valid closing.

    Returns:
        SalvageResult, or None if no complete item was found.
    """
    marker = _ITEMS_MARKER.search(text)
    if marker is None:
        return None

    depth = 0
    in_string = False
    escaped = False
    item_open = False
    last_end = -1
    recovered = 0

    for pos in range(marker.end(), len(text)):
        ch = text[pos]

        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in "{[":
            if depth == 0 and ch == "{":
                item_open = True
            depth += 1
        elif ch in "}]":
            if depth == 0:
                # items array closed
                break
            depth -= 1
            if depth == 0 and ch == "}":
                last_end = pos
                recovered += 1
                item_open = False

    if recovered == 0:
        return None

    return SalvageResult(
        text=text[: last_end + 1] + SALVAGE_CLOSING,
        recovered=recovered,
        discarded=1 if item_open else 0,
    )


def parse_response(raw_text: str) -> RawExtractionData:
    """Parse an extraction reply into RawExtractionData.

    Args:
        raw_text: Raw text returned by the extraction service.

    Returns:
        Parsed data. Never raises; failures are reported in
        processing_notes with an empty item list.
    """
    logger.debug("Extraction response length: %d characters", len(raw_text or ""))

    unfenced = strip_code_fences(raw_text or "")
    candidate = clean_json_candidate(unfenced)
    salvage: SalvageResult | None = None

    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as e:
        salvage = salvage_truncated_json(
            clean_json_candidate(unfenced, trim_end=False)
        )
        if salvage is None:
            logger.error("Failed to parse extraction response: %s", e)
            logger.debug("Response preview: %s", truncate_text(raw_text or "", 500))
            return _failed(f"Failed to parse AI response: {e}")

        try:
            payload = json.loads(salvage.text)
        except json.JSONDecodeError as salvage_error:
            logger.error("Truncation recovery failed: %s", salvage_error)
            return _failed(f"Failed to parse AI response: {e}")

        logger.warning(
            "Detected truncated response, recovered %d items (%d discarded)",
            salvage.recovered,
            salvage.discarded,
        )

    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        logger.error("Invalid response structure: missing items array")
        return _failed("Invalid response structure: missing items array")

    items = [item for item in payload["items"] if isinstance(item, dict)]
    raw_notes = payload.get("processingNotes")
    notes = [n for n in raw_notes if isinstance(n, str)] if isinstance(raw_notes, list) else []

    if salvage is not None:
        notes.append(
            f"Recovered {salvage.recovered} items from truncated response "
            f"({salvage.discarded} incomplete item discarded)"
        )

    if len(items) > LARGE_MENU_ITEM_COUNT:
        notes.append(f"Successfully extracted {len(items)} items (large menu)")
    if len(items) >= VERIFY_ITEM_COUNT:
        notes.append(
            f"Large wine list detected ({len(items)} items) - "
            "verify all wines were captured"
        )

    menu_name = payload.get("menuName")
    total = payload.get("totalItemsFound")

    logger.info("Parsed %d items from extraction response", len(items))
    return RawExtractionData(
        menu_name=menu_name if isinstance(menu_name, str) and menu_name.strip() else None,
        items=items,
        total_items_found=total if isinstance(total, int) and total > 0 else len(items),
        processing_notes=notes,
        truncated=salvage is not None,
        recovered_items=salvage.recovered if salvage else 0,
        discarded_items=salvage.discarded if salvage else 0,
    )


def _failed(note: str) -> RawExtractionData:
    return RawExtractionData(menu_name=None, items=[], processing_notes=[note])

