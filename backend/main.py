"""Command-line entry point for the menu parser.

Usage:
    python main.py path/to/menu.pdf [--log-level DEBUG]

Prints the result envelope as JSON on stdout and exits non-zero when no
items could be extracted.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from config import get_settings, setup_logging
from dependencies import get_menu_parser
from menu_parser import ParseOutcome

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract structured menu items from a menu document."
    )
    parser.add_argument("file", type=Path, help="Menu file (.pdf, .csv, .xlsx, ...)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL from the environment",
    )
    return parser


async def run(path: Path) -> ParseOutcome:
    """Parse one file and return the outcome."""
    content = await asyncio.to_thread(path.read_bytes)
    return await get_menu_parser().parse_menu(content, path.name)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    if not args.file.is_file():
        logger.error("File not found: %s", args.file)
        return 2

    outcome = asyncio.run(run(args.file))
    print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
