"""Text rendering of pages for tool responses."""

from datetime import datetime
from typing import Iterable

from .types import PageContent

PAGE_SEPARATOR = "\n\n---\n\n"
INVALID_DATE = "Invalid Date"


def format_timestamp(unix_seconds: int) -> str:
    try:
        return datetime.fromtimestamp(unix_seconds).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        # Upstream timestamps outside the platform's representable range
        return INVALID_DATE


def format_content(content: PageContent) -> str:
    """Render a page as an ``Updated:`` header followed by its text."""
    return f"Updated: {format_timestamp(content.date_updated_unix)}\n\n{content.text}"


def format_pages(pages: Iterable[PageContent]) -> str:
    return PAGE_SEPARATOR.join(format_content(page) for page in pages)
