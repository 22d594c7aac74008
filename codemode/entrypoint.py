"""Process Entry Point — runs the HTTP proxy and the MCP stdio server side by side.

Invariants:
    - Logging configured before either server starts, always to stderr
    - The proxy listens before the MCP server accepts its first tool call, so
      sandboxed code never races the proxy's startup
    - When the stdio client disconnects, uvicorn is asked to exit and awaited;
      its lifespan closes every downstream connection

Design Decisions:
    - uvicorn.Server driven programmatically over uvicorn.run(): both servers share
      one event loop, which the ConnectionManager and executor rely on
    - uvicorn's own log config disabled (log_config=None): our handler already
      routes everything to stderr
"""

import asyncio
import logging
from functools import partial

import uvicorn

from codemode.config import Settings, get_settings
from codemode.core.inventory_script import proxy_base_url
from codemode.infrastructure.observability import setup_logging
from codemode.infrastructure.runtime_probe import probe_runtime
from codemode.infrastructure.sandbox_executor import SandboxExecutor
from codemode.main import app
from codemode.services.define_orchestrator_tools import build_orchestrator_tools
from codemode.services.handle_execution import ExecutionHandlers
from codemode.services.mcp_server import build_mcp_server, run_stdio_server
from codemode.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)


def create_tool_dispatch(settings: Settings) -> tuple[ToolDispatch, list[dict]]:
    """Assemble executor, handlers and dispatch from settings."""
    proxy_base = proxy_base_url(settings.proxy_host, settings.proxy_port)
    probe = partial(probe_runtime, settings.runtime_command)
    handlers = ExecutionHandlers(
        executor=SandboxExecutor(settings.runtime_command),
        proxy_base=proxy_base,
        timeout_ms=settings.execution_timeout_ms,
    )
    tools = build_orchestrator_tools(proxy_base, settings.execution_timeout_ms)
    return ToolDispatch(handlers, probe), tools


async def serve(settings: Settings) -> None:
    """Run the proxy and the stdio server until the MCP client disconnects."""
    proxy = uvicorn.Server(uvicorn.Config(
        app, host=settings.proxy_host, port=settings.proxy_port,
        log_config=None, log_level=settings.log_level.lower(),
    ))
    proxy_task = asyncio.create_task(proxy.serve(), name="codemode-proxy")
    while not proxy.started:
        if proxy_task.done():
            # Bind failure: surface uvicorn's exit instead of serving tools
            await proxy_task
            raise RuntimeError(
                f"Proxy failed to start on {settings.proxy_host}:{settings.proxy_port}",
            )
        await asyncio.sleep(0.05)
    logger.info(
        f"MCP proxy running on {proxy_base_url(settings.proxy_host, settings.proxy_port)}",
    )

    dispatch, tools = create_tool_dispatch(settings)
    try:
        await run_stdio_server(build_mcp_server(dispatch, tools))
    finally:
        proxy.should_exit = True
        await proxy_task


def main() -> None:
    """Console script: codemode."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
