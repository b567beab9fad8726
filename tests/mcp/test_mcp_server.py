"""Integration tests for the Text TV MCP server."""

from unittest.mock import AsyncMock, patch

import pytest
from fastmcp import Context

from texttv_mcp.config import AppConfig
from texttv_mcp.exceptions import FetchFailureError, InvalidArgumentError
from texttv_mcp.formatting import PAGE_SEPARATOR
from texttv_mcp.integrations.mcp import SERVER_NAME, create_mcp_server
from texttv_mcp.mcp_server import build_server, main, parse_args
from texttv_mcp.page_store import PageStore

from ..conftest import make_payload


class TestMCPServer:
    """Test MCP server integration."""

    @pytest.fixture
    def mcp_server(self, store):
        """Create MCP server from the page store."""
        return create_mcp_server(store)

    async def test_mcp_server_creation(self, mcp_server):
        assert mcp_server is not None
        assert mcp_server.name == SERVER_NAME == "swedish-text-tv-mcp"

    async def test_tool_registration(self, mcp_server):
        """Test that all tools are registered correctly."""
        tools = await mcp_server.get_tools()
        tool_names = [tool for tool in tools]

        assert sorted(tool_names) == [
            "get_text_tv_page",
            "get_text_tv_page_range",
            "get_text_tv_pages",
            "search_text_tv",
        ]

    async def test_get_page_tool(self, mcp_server, fake_client):
        tool = await mcp_server.get_tool("get_text_tv_page")

        result = await tool.fn(page_number=100)

        assert result.startswith("Updated: ")
        assert result.endswith("\n\nNyheter sida 100\nInrikes och utrikes")
        assert fake_client.calls == [100]

    async def test_get_page_tool_logs_to_context(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_page")
        ctx = AsyncMock(spec=Context)

        await tool.fn(page_number=101, ctx=ctx)

        ctx.info.assert_awaited_once_with("Getting page 101")

    @pytest.mark.parametrize("page_number", [99, 1000, True, "100"])
    async def test_get_page_tool_rejects_invalid_numbers(
        self, mcp_server, fake_client, page_number
    ):
        tool = await mcp_server.get_tool("get_text_tv_page")

        with pytest.raises(InvalidArgumentError) as exc_info:
            await tool.fn(page_number=page_number)

        assert "page_number must be an integer between 100 and 999" in str(
            exc_info.value
        )
        assert exc_info.value.__cause__ is None
        assert fake_client.calls == []

    async def test_get_page_tool_wraps_fetch_failure(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_page")
        ctx = AsyncMock(spec=Context)

        with pytest.raises(RuntimeError) as exc_info:
            await tool.fn(page_number=500, ctx=ctx)

        message = str(exc_info.value)
        assert message.startswith("Error executing tool get_text_tv_page: ")
        assert "Failed to fetch page 500" in message
        assert isinstance(exc_info.value.__cause__, FetchFailureError)
        ctx.error.assert_awaited_once()

    async def test_get_pages_tool(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_pages")

        result = await tool.fn(page_numbers=[102, 100, 600])

        sections = result.split(PAGE_SEPARATOR)
        assert len(sections) == 3
        assert "Nyheter sida 102" in sections[0]
        assert "Nyheter sida 100" in sections[1]
        assert "Error: Page 600 could not be retrieved" in sections[2]

    async def test_get_pages_tool_rejects_empty_list(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_pages")

        with pytest.raises(InvalidArgumentError, match="cannot be empty") as exc_info:
            await tool.fn(page_numbers=[])

        assert exc_info.value.__cause__ is not exc_info.value
        assert exc_info.value.__cause__ is None

    async def test_get_pages_tool_rejects_non_list(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_pages")

        with pytest.raises(InvalidArgumentError, match="must be an array"):
            await tool.fn(page_numbers=100)

    async def test_get_pages_tool_rejects_any_invalid_number(
        self, mcp_server, fake_client
    ):
        tool = await mcp_server.get_tool("get_text_tv_pages")

        with pytest.raises(InvalidArgumentError, match="Invalid page number: 1000"):
            await tool.fn(page_numbers=[100, 1000])

        assert fake_client.calls == []

    async def test_get_pages_tool_survives_unrepresentable_timestamp(
        self, mcp_server, fake_client
    ):
        fake_client.payloads[101] = make_payload("ok", 10**13)
        tool = await mcp_server.get_tool("get_text_tv_pages")

        result = await tool.fn(page_numbers=[100, 101])

        sections = result.split(PAGE_SEPARATOR)
        assert len(sections) == 2
        assert "Nyheter sida 100" in sections[0]
        assert sections[1] == "Updated: Invalid Date\n\nok"

    async def test_get_page_range_tool(self, mcp_server, fake_client):
        tool = await mcp_server.get_tool("get_text_tv_page_range")

        result = await tool.fn(start_page=100, end_page=102)

        sections = result.split(PAGE_SEPARATOR)
        assert [s.splitlines()[2] for s in sections] == [
            "Nyheter sida 100",
            "Nyheter sida 101",
            "Nyheter sida 102",
        ]

    async def test_get_page_range_tool_rejects_reversed_range(
        self, mcp_server, fake_client
    ):
        tool = await mcp_server.get_tool("get_text_tv_page_range")

        with pytest.raises(InvalidArgumentError, match="less than or equal"):
            await tool.fn(start_page=200, end_page=100)

        assert fake_client.calls == []

    async def test_get_page_range_tool_rejects_out_of_range_bounds(self, mcp_server):
        tool = await mcp_server.get_tool("get_text_tv_page_range")

        with pytest.raises(InvalidArgumentError, match="end_page"):
            await tool.fn(start_page=100, end_page=1000)

    async def test_search_tool_finds_matches(self, mcp_server, fake_client):
        fake_client.payloads[377] = make_payload("Allsvenskan: AIK-Hammarby 2-1")
        tool = await mcp_server.get_tool("search_text_tv")

        result = await tool.fn(query="hammarby")

        assert "Allsvenskan: AIK-Hammarby 2-1" in result
        assert PAGE_SEPARATOR not in result
        assert len(fake_client.calls) == 601

    async def test_search_tool_no_results(self):
        search_store = AsyncMock(spec=PageStore)
        search_store.search_pages.return_value = []
        mcp_server = create_mcp_server(search_store)
        tool = await mcp_server.get_tool("search_text_tv")

        result = await tool.fn(query="xyz-improbable")

        assert result == 'No results found for query: "xyz-improbable" in pages 100-700'
        query, page_numbers = search_store.search_pages.call_args.args
        assert query == "xyz-improbable"
        assert page_numbers[0] == 100
        assert page_numbers[-1] == 700

    @pytest.mark.parametrize("query", ["", "   "])
    async def test_search_tool_rejects_blank_query(self, mcp_server, query):
        tool = await mcp_server.get_tool("search_text_tv")

        with pytest.raises(InvalidArgumentError, match="cannot be empty"):
            await tool.fn(query=query)


class TestEntryPoint:
    async def test_build_server_registers_tools(self):
        mcp_server = build_server(AppConfig())

        tools = await mcp_server.get_tools()

        assert len(tools) == 4

    def test_parse_args_defaults(self):
        args = parse_args([])

        assert args.transport == "stdio"
        assert args.verbose is False

    def test_parse_args_http(self):
        args = parse_args(["-v", "--transport", "http", "--port", "9000"])

        assert args.transport == "http"
        assert args.port == 9000
        assert args.verbose is True

    @patch("texttv_mcp.mcp_server.get_current_config", return_value=AppConfig())
    @patch("texttv_mcp.mcp_server.build_server")
    def test_main_maps_http_to_streamable_http(self, mock_build_server, mock_config):
        main(["--transport", "http", "--port", "9000"])

        mock_build_server.return_value.run.assert_called_once_with(
            transport="streamable-http", host="127.0.0.1", port=9000
        )

    @patch("texttv_mcp.mcp_server.get_current_config", return_value=AppConfig())
    @patch("texttv_mcp.mcp_server.build_server")
    def test_main_runs_stdio_by_default(self, mock_build_server, mock_config):
        main([])

        mock_build_server.return_value.run.assert_called_once_with(transport="stdio")
