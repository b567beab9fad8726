"""MCP (Model Context Protocol) integration for Text TV."""

from texttv_mcp.integrations.mcp.server import (
    SERVER_NAME,
    create_mcp_server,
    setup_mcp_tools,
)

__all__ = ["SERVER_NAME", "create_mcp_server", "setup_mcp_tools"]
