"""MCP Server — the agent-facing stdio server exposing the orchestrator tools.

Invariants:
    - The only module in services/ that imports MCP SDK server types
    - Every call_tool returns a CallToolResult; dispatch errors never escape as exceptions
    - stdout carries MCP frames only (logging goes to stderr)
"""

import logging
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from codemode.core.format_outcome import ToolReply
from codemode.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)

SERVER_NAME = "codemode-mcp-server"


def to_call_tool_result(reply: ToolReply) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text) for text in reply.texts],
        isError=reply.is_error,
    )


def build_mcp_server(
    dispatch: ToolDispatch, tool_definitions: list[dict[str, Any]],
) -> Server:
    """Wire list_tools/call_tool handlers onto a fresh SDK Server."""
    server = Server(SERVER_NAME)
    tools = [Tool(**definition) for definition in tool_definitions]

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        reply = await dispatch.execute(name, arguments)
        return to_call_tool_result(reply)

    return server


async def run_stdio_server(server: Server) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        logger.info(f"{SERVER_NAME} listening on stdio")
        await server.run(
            read_stream, write_stream, server.create_initialization_options(),
        )
