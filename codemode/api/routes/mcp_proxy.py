"""MCP Proxy — HTTP surface sandboxed code uses to reach downstream services.

Invariants:
    - GET /mcp/servers never fails: unreadable config yields []
    - GET /mcp/{server}/tools and POST /mcp/call connect lazily on first use
    - Results are forwarded unchanged; errors propagate to the global handlers
      (404 SERVICE_NOT_FOUND, 500 SERVICE_COMMUNICATION_ERROR, 400 MALFORMED_REQUEST)

Design Decisions:
    - ConnectionManager injected via Depends: tests override it with fakes
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from codemode.infrastructure.connection_manager import (
    ConnectionManager,
    get_connection_manager,
)
from codemode.schemas.proxy import ToolCallEnvelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/mcp", tags=["mcp-proxy"])


@router.get("/servers")
async def list_servers(
    manager: ConnectionManager = Depends(get_connection_manager),
) -> list[str]:
    """Names of every configured service across all config directories."""
    return manager.resolver.list_all()


@router.get("/{server}/tools")
async def list_tools(
    server: str,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    """Tool catalogue of one service, connecting on first use."""
    tools = await manager.list_tools(server)
    return {"tools": tools}


@router.post("/call")
async def call_tool(
    body: ToolCallEnvelope,
    manager: ConnectionManager = Depends(get_connection_manager),
) -> Any:
    """Forward one tool call; the downstream result is returned as-is."""
    logger.info(
        f"Proxying {body.server}.{body.tool}",
        extra={"service_name": body.server, "tool_name": body.tool},
    )
    return await manager.call_tool(body.server, body.tool, body.args)
