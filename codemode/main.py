"""Codemode Proxy API — FastAPI application sandboxed code calls back into.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CodemodeError → structured JSON responses
    - CORS configured from settings (not hardcoded); any origin by default
    - ConnectionManager initialized on startup and every connection closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: one place for startup and cleanup
    - Logging configured by the process entry point, not here: stdout is shared
      with the MCP stdio transport and must be set up before either server starts
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codemode.api.error_handlers import register_error_handlers
from codemode.api.routes import health, mcp_proxy
from codemode.config import get_settings
from codemode.infrastructure.config_resolver import ConfigResolver
from codemode.infrastructure.connection_manager import init_connection_manager
from codemode.infrastructure.service_connection import service_connector

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    resolver = ConfigResolver(settings.config_directories)
    manager = init_connection_manager(
        resolver, service_connector(settings.service_request_timeout_seconds),
    )
    logger.info(
        f"Codemode proxy started; config directories: "
        f"{[str(d) for d in resolver.directories]}",
    )
    yield
    logger.info("Codemode proxy shutting down")
    await manager.close_all()


app = FastAPI(
    title="Codemode MCP Proxy", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(mcp_proxy.router)

register_error_handlers(app)
