"""Small helpers shared across the menu parser."""

from collections.abc import Hashable, Iterable
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


def truncate_text(text: str, max_length: int = 100) -> str:
    """Shorten text for log previews, ending with an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB")
    """
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def unique_in_order(values: Iterable[T]) -> list[T]:
    """Drop repeated values, keeping the first occurrence of each."""
    return list(dict.fromkeys(values))
