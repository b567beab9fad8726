"""Description templates for MCP tools."""

from texttv_mcp.types import MAX_PAGE_NUMBER, MIN_PAGE_NUMBER

SEARCH_START_PAGE = 100
SEARCH_END_PAGE = 700

_RANGE = f"{MIN_PAGE_NUMBER}-{MAX_PAGE_NUMBER}"


def get_page_tool_description() -> str:
    return f"""Get a specific page from Swedish Text TV.

Parameters:
- page_number: The page number to retrieve ({_RANGE}), e.g. 100 for news, 377 for sports

Returns the page text preceded by its last update time.
"""


def get_pages_tool_description() -> str:
    return f"""Get multiple pages from Swedish Text TV.

Parameters:
- page_numbers: Non-empty list of page numbers to retrieve ({_RANGE})

Pages are returned in the requested order, separated by '---'.
Pages that could not be retrieved are reported inline with an error message.
"""


def get_page_range_tool_description() -> str:
    return f"""Get a range of pages from Swedish Text TV.

Parameters:
- start_page: Starting page number ({_RANGE})
- end_page: Ending page number ({_RANGE}), inclusive, not less than start_page

Pages are returned in order, separated by '---'.
"""


def get_search_tool_description() -> str:
    return f"""Search for content in Swedish Text TV pages (searches pages {SEARCH_START_PAGE}-{SEARCH_END_PAGE}).

Parameters:
- query: Text to look for in page content (case-insensitive, required)

Examples:
- "väder"
- "allsvenskan"
"""
