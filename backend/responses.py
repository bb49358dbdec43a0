"""Standardized result envelope for menu parsing.

Provides a consistent result format with structured codes and messages.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ResponseCode(str, Enum):
    """Result codes for menu parsing.

    Ranges: 0xxx=Success, 1xxx=Document Error, 2xxx=Pipeline Error, 3xxx=External Service
    """

    # Success codes
    SUCCESS = "0000"
    MENU_PARSED = "0001"

    # Document errors
    VALIDATION_ERROR = "1000"
    UNSUPPORTED_FILE_TYPE = "1001"
    FILE_TOO_LARGE = "1002"
    EMPTY_DOCUMENT = "1004"
    CORRUPTED_FILE = "1005"

    # Pipeline errors
    INTERNAL_ERROR = "2000"
    NO_ITEMS_FOUND = "2001"
    CANCELLED = "2002"

    # External service errors
    LLM_UNAVAILABLE = "3001"
    LLM_ERROR = "3002"


# Messages mapped to codes
RESPONSE_MESSAGES: dict[ResponseCode, str] = {
    ResponseCode.SUCCESS: "Operation completed successfully",
    ResponseCode.MENU_PARSED: "Menu parsed successfully",
    ResponseCode.VALIDATION_ERROR: "Request validation failed",
    ResponseCode.UNSUPPORTED_FILE_TYPE: (
        "Unsupported file type. Supported: PDF, CSV, XLS, XLSX, DOC, DOCX, JSON, TXT"
    ),
    ResponseCode.FILE_TOO_LARGE: "File exceeds maximum allowed size",
    ResponseCode.EMPTY_DOCUMENT: "Document contains no readable menu text",
    ResponseCode.CORRUPTED_FILE: "File appears corrupted",
    ResponseCode.INTERNAL_ERROR: "An internal error occurred",
    ResponseCode.NO_ITEMS_FOUND: "No menu items could be extracted",
    ResponseCode.CANCELLED: "Menu parsing was cancelled",
    ResponseCode.LLM_UNAVAILABLE: "Extraction service unavailable. Please wait and retry",
    ResponseCode.LLM_ERROR: "Extraction service error",
}


def get_message(code: ResponseCode) -> str:
    """Get the message for a response code."""
    return RESPONSE_MESSAGES.get(code, "Unknown error")


def success_dict(
    code: ResponseCode,
    data: Any = None,
    custom_message: str | None = None,
    errors: list[str] | None = None,
) -> dict[str, Any]:
    """Build a standardized success result dictionary.

    Partial successes carry the per-chunk errors alongside the data.
    """
    return {
        "code": code.value,
        "success": True,
        "message": custom_message or get_message(code),
        "timestamp": datetime.now(UTC).isoformat(),
        "data": data,
        "errors": errors or [],
    }


def error_dict(
    code: ResponseCode,
    errors: list[str] | None = None,
    custom_message: str | None = None,
) -> dict[str, Any]:
    """Build a standardized error result dictionary."""
    return {
        "code": code.value,
        "success": False,
        "message": custom_message or get_message(code),
        "timestamp": datetime.now(UTC).isoformat(),
        "data": None,
        "errors": errors or [get_message(code)],
    }
