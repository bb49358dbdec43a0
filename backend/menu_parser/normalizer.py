"""Deterministic cleanup of extracted menu text."""

import re

CANONICAL_CURRENCY = "£"

_FORM_FEED = re.compile(r"\f")
_INLINE_WHITESPACE = re.compile(r"[ \t]+")
_BLANK_LINES = re.compile(r"\n\s*\n")
# C0 controls except newline, plus DEL and C1 controls
_CONTROL_CHARS = re.compile(r"[\x00-\x09\x0b-\x1f\x7f-\x9f]")
_CURRENCY = re.compile(r"[£$€]")


def normalize_text(text: str) -> str:
    """Normalize raw extracted text before density scoring and chunking.

    Form feeds become newlines, runs of spaces/tabs collapse to a single
    space, blank-line runs collapse to one newline, control characters are
    removed and all currency symbols are mapped to one canonical symbol.
    """
    text = _FORM_FEED.sub("\n", text)
    text = _INLINE_WHITESPACE.sub(" ", text)
    text = _BLANK_LINES.sub("\n", text)
    text = _CONTROL_CHARS.sub("", text)
    text = _CURRENCY.sub(CANONICAL_CURRENCY, text)
    return text.strip()
