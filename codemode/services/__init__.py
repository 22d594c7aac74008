"""Services Layer — orchestrator tool definitions, handlers, dispatch and the MCP server.

Invariants:
    - Tool dispatch uses explicit dict mapping (no auto-discovery)
    - Handlers return ToolReply values; only mcp_server.py touches SDK types
"""
