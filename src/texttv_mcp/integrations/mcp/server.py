"""MCP server exposing the Text TV page store as tools."""

import logging
from typing import Annotated, Any, List, Optional

from fastmcp import Context, FastMCP
from pydantic import Field

from texttv_mcp.exceptions import InvalidArgumentError
from texttv_mcp.formatting import format_content, format_pages
from texttv_mcp.integrations.mcp.descriptions import (
    SEARCH_END_PAGE,
    SEARCH_START_PAGE,
    get_page_range_tool_description,
    get_page_tool_description,
    get_pages_tool_description,
    get_search_tool_description,
)
from texttv_mcp.page_store import PageStore, validate_page_number
from texttv_mcp.types import MAX_PAGE_NUMBER, MIN_PAGE_NUMBER

logger = logging.getLogger(__name__)

SERVER_NAME = "swedish-text-tv-mcp"

PageNumber = Annotated[
    int,
    Field(
        description=f"Page number ({MIN_PAGE_NUMBER}-{MAX_PAGE_NUMBER})",
        ge=MIN_PAGE_NUMBER,
        le=MAX_PAGE_NUMBER,
    ),
]


def create_mcp_server(
    store: PageStore,
    name: str = SERVER_NAME,
    **kwargs: Any,
) -> FastMCP:  # type: ignore[type-arg]
    """Create a FastMCP server that exposes PageStore functionality.

    Args:
        store: PageStore used to serve pages
        name: Name of the MCP server
        **kwargs: Additional arguments passed to FastMCP constructor

    Returns:
        Configured FastMCP server instance
    """
    mcp: FastMCP = FastMCP(name, **kwargs)  # type: ignore[type-arg]
    setup_mcp_tools(mcp, store)
    return mcp


def _check_page_number(value: Any, field: str) -> int:
    try:
        return validate_page_number(value)
    except InvalidArgumentError:
        raise InvalidArgumentError(
            f"{field} must be an integer between {MIN_PAGE_NUMBER} and {MAX_PAGE_NUMBER}"
        ) from None


def _tool_error(tool_name: str, error: Exception) -> RuntimeError:
    return RuntimeError(f"Error executing tool {tool_name}: {error}")


def setup_mcp_tools(
    mcp: FastMCP,  # type: ignore[type-arg]
    store: PageStore,
) -> None:
    """Register the Text TV tools on an MCP server.

    Args:
        mcp: FastMCP server instance
        store: PageStore that serves the tool calls
    """

    @mcp.tool(description=get_page_tool_description())
    async def get_text_tv_page(
        page_number: PageNumber, ctx: Optional[Context] = None
    ) -> str:
        """Get a single Text TV page."""
        try:
            _check_page_number(page_number, "page_number")
            if ctx:
                await ctx.info(f"Getting page {page_number}")
            page = await store.get_page(page_number)
            return format_content(page)
        except Exception as e:
            if ctx:
                await ctx.error(str(e))
            if isinstance(e, InvalidArgumentError):
                raise
            raise _tool_error("get_text_tv_page", e) from e

    @mcp.tool(description=get_pages_tool_description())
    async def get_text_tv_pages(
        page_numbers: Annotated[
            List[PageNumber], Field(description="Page numbers to retrieve")
        ],
        ctx: Optional[Context] = None,
    ) -> str:
        """Get several Text TV pages."""
        try:
            if not isinstance(page_numbers, list):
                raise InvalidArgumentError("page_numbers must be an array")
            if not page_numbers:
                raise InvalidArgumentError("page_numbers array cannot be empty")
            for page_number in page_numbers:
                try:
                    validate_page_number(page_number)
                except InvalidArgumentError:
                    raise InvalidArgumentError(
                        f"Invalid page number: {page_number}. All page numbers must "
                        f"be between {MIN_PAGE_NUMBER} and {MAX_PAGE_NUMBER}."
                    ) from None

            if ctx:
                await ctx.info(f"Getting {len(page_numbers)} pages: {page_numbers}")
            pages = await store.get_pages(page_numbers)
            return format_pages(pages)
        except Exception as e:
            if ctx:
                await ctx.error(str(e))
            if isinstance(e, InvalidArgumentError):
                raise
            raise _tool_error("get_text_tv_pages", e) from e

    @mcp.tool(description=get_page_range_tool_description())
    async def get_text_tv_page_range(
        start_page: PageNumber,
        end_page: PageNumber,
        ctx: Optional[Context] = None,
    ) -> str:
        """Get an inclusive range of Text TV pages."""
        try:
            _check_page_number(start_page, "start_page")
            _check_page_number(end_page, "end_page")
            if start_page > end_page:
                raise InvalidArgumentError(
                    "start_page must be less than or equal to end_page"
                )

            if ctx:
                await ctx.info(f"Getting pages {start_page}-{end_page}")
            pages = await store.get_page_range(start_page, end_page)
            return format_pages(pages)
        except Exception as e:
            if ctx:
                await ctx.error(str(e))
            if isinstance(e, InvalidArgumentError):
                raise
            raise _tool_error("get_text_tv_page_range", e) from e

    @mcp.tool(description=get_search_tool_description())
    async def search_text_tv(
        query: Annotated[
            str, Field(description="Search query to look for in page content")
        ],
        ctx: Optional[Context] = None,
    ) -> str:
        """Search the default page range for a query."""
        try:
            if not isinstance(query, str):
                raise InvalidArgumentError("query must be a string")
            if not query.strip():
                raise InvalidArgumentError("query cannot be empty")

            if ctx:
                await ctx.info(f"Searching for: {query}")
            page_numbers = list(range(SEARCH_START_PAGE, SEARCH_END_PAGE + 1))
            pages = await store.search_pages(query, page_numbers)
            if ctx:
                await ctx.info(f"Found {len(pages)} results")

            if not pages:
                return (
                    f'No results found for query: "{query}" in pages '
                    f"{SEARCH_START_PAGE}-{SEARCH_END_PAGE}"
                )
            return format_pages(pages)
        except Exception as e:
            if ctx:
                await ctx.error(str(e))
            if isinstance(e, InvalidArgumentError):
                raise
            raise _tool_error("search_text_tv", e) from e
