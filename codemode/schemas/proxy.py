"""Proxy Schemas — the tool-call envelope accepted by POST /mcp/call.

Invariants:
    - server and tool are non-empty strings
    - args is a JSON object (MCP tools/call requires one); missing means {}
    - args contents are never inspected: the downstream service owns its schema
"""

from typing import Any

from pydantic import BaseModel, Field


class ToolCallEnvelope(BaseModel):
    """Opaque (server, tool, args) triple forwarded to a downstream service."""
    server: str = Field(min_length=1)
    tool: str = Field(min_length=1)
    args: dict[str, Any] = Field(default_factory=dict)
