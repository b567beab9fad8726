#!/usr/bin/env python3
"""MCP Server for Swedish Text TV."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

from fastmcp import FastMCP

from texttv_mcp.client import TextTVClient
from texttv_mcp.config import AppConfig, get_current_config
from texttv_mcp.integrations.mcp import create_mcp_server
from texttv_mcp.page_store import PageStore

logger = logging.getLogger(__name__)

# CLI names mapped to the transport identifiers fastmcp accepts
TRANSPORTS = {"stdio": "stdio", "http": "streamable-http", "sse": "sse"}


def build_server(config: AppConfig) -> FastMCP:  # type: ignore[type-arg]
    """Wire client, store and MCP server together from configuration."""
    client = TextTVClient.from_config(config)
    store = PageStore(
        client, cache_duration_ms=config.cache_duration_seconds * 1000
    )

    @asynccontextmanager
    async def lifespan(server: Any) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await client.close()

    return create_mcp_server(store, lifespan=lifespan)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Swedish Text TV MCP server (texttv.nu)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--transport",
        choices=sorted(TRANSPORTS),
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host for http/sse")
    parser.add_argument("--port", type=int, default=8000, help="Port for http/sse")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Console entry point."""
    args = parse_args(argv)
    config = get_current_config()

    # stdout carries the stdio transport, so log to stderr
    logging.basicConfig(level=getattr(logging, config.log_level), stream=sys.stderr)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    mcp = build_server(config)
    logger.info(f"Swedish Text TV MCP server running on {args.transport}")
    try:
        if args.transport == "stdio":
            mcp.run(transport="stdio")
        else:
            mcp.run(
                transport=TRANSPORTS[args.transport], host=args.host, port=args.port
            )
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.error(f"Fatal error running server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
