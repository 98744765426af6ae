"""MCP stdio transport built on the ``mcp`` SDK's low-level server."""

from __future__ import annotations

import logging
from typing import Any, List

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from plasma_mcp.errors import PlasmaMcpError
from plasma_mcp.mcp import MCP_SERVER_NAME, MCP_SERVER_VERSION, TOOL_REGISTRY, run_tool, wrap_tool_result
from plasma_mcp.rpc import default_client

logger = logging.getLogger(__name__)

server = Server(MCP_SERVER_NAME, version=MCP_SERVER_VERSION)


@server.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
        for tool in TOOL_REGISTRY.values()
    ]


@server.call_tool()
async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    """
    Run a registered tool and return its single text block.

    Error results are raised so the SDK reports them with ``isError`` set.
    """
    if arguments is not None and not isinstance(arguments, dict):
        raise PlasmaMcpError("Invalid arguments. Expected an object.")
    wrapped = wrap_tool_result(await run_tool(name, arguments or {}))
    text = wrapped["content"][0]["text"]
    if wrapped.get("isError"):
        raise PlasmaMcpError(text)
    return [TextContent(type="text", text=text)]


async def serve() -> None:
    """Serve until stdin closes. Logs go to stderr; stdout carries protocol only."""
    logger.info("Plasma MCP stdio transport ready")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await default_client.aclose()
