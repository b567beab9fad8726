"""
texttv-mcp

Swedish Text TV pages from texttv.nu as MCP tools.
"""

from .client import TextTVClient
from .config import AppConfig, get_current_config
from .exceptions import FetchFailureError, InvalidArgumentError, TextTVError
from .page_store import PageStore, normalize_page, validate_page_number
from .types import CacheStats, PageContent, PageResponse

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "CacheStats",
    "FetchFailureError",
    "InvalidArgumentError",
    "PageContent",
    "PageResponse",
    "PageStore",
    "TextTVClient",
    "TextTVError",
    "get_current_config",
    "normalize_page",
    "validate_page_number",
]
