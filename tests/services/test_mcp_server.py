"""MCP Server — tests for tool definitions and the SDK wiring.

Tests cover:
    - Tool definitions: names, required code, proxy URL and timeout in the description
    - No tool schema exposes a permission knob
    - ToolReply → CallToolResult conversion keeps every text block and the error flag
    - The SDK server lists the three tools and routes calls through dispatch
"""

import pytest
from mcp import types

from codemode.core.format_outcome import ToolReply
from codemode.services.define_orchestrator_tools import build_orchestrator_tools
from codemode.services.mcp_server import SERVER_NAME, build_mcp_server, to_call_tool_result
from codemode.services.tool_dispatch import ToolDispatch
from tests.services.fakes import PROXY_BASE, FakeExecutor


def test_tool_definitions():
    tools = build_orchestrator_tools(PROXY_BASE, 30_000)
    assert [t["name"] for t in tools] == [
        "execute_code", "check_runtime_version", "list_services_with_tools",
    ]
    execute = tools[0]
    assert execute["inputSchema"]["required"] == ["code"]
    assert execute["inputSchema"]["properties"]["typescript"]["default"] is True
    assert f"GET {PROXY_BASE}/mcp/servers" in execute["description"]
    assert f"POST {PROXY_BASE}/mcp/call" in execute["description"]
    assert "30-second timeout" in execute["description"]


def test_no_tool_exposes_permissions():
    for tool in build_orchestrator_tools(PROXY_BASE, 30_000):
        properties = tool["inputSchema"]["properties"]
        assert not any("allow" in name or "permission" in name for name in properties)


def test_to_call_tool_result():
    result = to_call_tool_result(ToolReply(["Output:\nok", "Errors/Warnings:\nw"]))
    assert [c.text for c in result.content] == ["Output:\nok", "Errors/Warnings:\nw"]
    assert result.isError is False
    assert to_call_tool_result(ToolReply(["bad"], is_error=True)).isError is True


@pytest.fixture
def server(make_handlers, installed_probe):
    dispatch = ToolDispatch(make_handlers(FakeExecutor()), installed_probe)
    return build_mcp_server(dispatch, build_orchestrator_tools(PROXY_BASE, 30_000))


@pytest.mark.asyncio
async def test_server_lists_tools(server):
    assert server.name == SERVER_NAME
    handler = server.request_handlers[types.ListToolsRequest]
    response = await handler(types.ListToolsRequest(method="tools/list"))
    names = [t.name for t in response.root.tools]
    assert names == ["execute_code", "check_runtime_version", "list_services_with_tools"]


@pytest.mark.asyncio
async def test_server_routes_calls_to_dispatch(server):
    handler = server.request_handlers[types.CallToolRequest]
    response = await handler(types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="check_runtime_version", arguments={}),
    ))
    result = response.root
    assert result.isError is False
    assert result.content[0].text == "Deno Version Information:\ndeno 2.1.4"
