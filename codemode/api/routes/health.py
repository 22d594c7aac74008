"""Health Probe — liveness endpoint for the proxy process.

Invariants:
    - GET /health always returns 200 while the process is up
    - Reports which downstream services currently hold a live connection
"""

from fastapi import APIRouter, Depends, status

from codemode.infrastructure.connection_manager import (
    ConnectionManager,
    get_connection_manager,
)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(
    manager: ConnectionManager = Depends(get_connection_manager),
):
    """Basic liveness probe."""
    return {
        "status": "healthy",
        "service": "codemode-mcp-proxy",
        "connected_services": manager.connected_services(),
    }
