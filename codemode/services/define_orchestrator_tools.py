"""Orchestrator Tool Schemas — MCP tool definitions exposed to the calling agent.

Invariants:
    - Tool names come from OrchestratorTool; tool_dispatch maps the same names
    - execute_code description carries the live proxy URL and timeout, so the agent
      learns the endpoints from the tool listing alone
    - No schema exposes a permission or flag knob: the capability grant is fixed

Design Decisions:
    - Plain dicts in MCP shape (inputSchema): mcp_server.py converts them to
      types.Tool without re-declaring anything
"""

from typing import Any

from codemode.core.domain_types import OrchestratorTool


def _execute_code_description(proxy_base: str, timeout_ms: int) -> str:
    return (
        "Execute TypeScript/JavaScript code with access to other MCP servers via "
        "HTTP proxy. Write code that makes fetch() requests to interact with "
        "available MCP servers. Excellent for chaining multiple operations, "
        "processing data, and building complex workflows.\n\n"
        "MCP Proxy endpoints:\n"
        f"- GET {proxy_base}/mcp/servers - List available servers\n"
        f"- GET {proxy_base}/mcp/{{server}}/tools - List tools for server\n"
        f"- POST {proxy_base}/mcp/call - Call tool (body: {{server, tool, args}})\n\n"
        "Use when you need to: combine multiple MCP operations, process/transform "
        "data between calls, implement loops or conditional logic, or build "
        "multi-step workflows. Network access only, "
        f"{timeout_ms / 1000:g}-second timeout."
    )


def build_orchestrator_tools(proxy_base: str, timeout_ms: int) -> list[dict[str, Any]]:
    return [
        {
            "name": OrchestratorTool.EXECUTE_CODE.value,
            "description": _execute_code_description(proxy_base, timeout_ms),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "code": {
                        "type": "string",
                        "description": (
                            "Complete TypeScript/JavaScript code to execute. Use "
                            "fetch() to call MCP proxy endpoints. Use console.log() "
                            "for output. Can import from https:// URLs."
                        ),
                    },
                    "typescript": {
                        "type": "boolean",
                        "description": (
                            "Whether code is TypeScript (true) or JavaScript "
                            "(false). TypeScript recommended for type safety."
                        ),
                        "default": True,
                    },
                    "unstable": {
                        "type": "boolean",
                        "description": "Enable the runtime's unstable APIs.",
                        "default": False,
                    },
                },
                "required": ["code"],
                "additionalProperties": False,
            },
        },
        {
            "name": OrchestratorTool.CHECK_RUNTIME_VERSION.value,
            "description": (
                "Check Deno installation and version info. Use for troubleshooting "
                "code execution issues or verifying runtime capabilities."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {},
                "additionalProperties": False,
            },
        },
        {
            "name": OrchestratorTool.LIST_SERVICES_WITH_TOOLS.value,
            "description": (
                "Get a comprehensive overview of all available MCP servers and "
                "their tools. Returns a structured list showing each server and "
                "all its available tools with descriptions."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {},
                "additionalProperties": False,
            },
        },
    ]
