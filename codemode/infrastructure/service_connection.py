"""Service Connection — one long-lived MCP stdio session to a downstream service.

Invariants:
    - One owner task per connection enters AND exits the SDK's stdio/session contexts
    - start() returns only after the initialize handshake succeeded, or raises
      ServiceCommunicationError; a failed start leaves no child process behind
    - close() is a signal to the owner task, then waits for it; safe from any task
    - Every SDK/transport failure surfaces as ServiceCommunicationError;
      connection_lost=False only for a JSON-RPC error answered by a live service

Design Decisions:
    - Dedicated owner task over AsyncExitStack held by the manager: the SDK's anyio
      task groups must be exited by the task that entered them
    - Results dumped by alias (inputSchema, isError): the proxy forwards them opaquely
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

import anyio
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError
from pydantic import ValidationError

from codemode.core.errors import ErrorContext, ServiceCommunicationError
from codemode.core.service_config import ServiceConfig

logger = logging.getLogger(__name__)

# JSON-RPC codes the SDK uses when the stream closed or a response never came
CONNECTION_CLOSED_CODE = -32000
REQUEST_TIMEOUT_CODE = 408
_CONNECTION_LOST_CODES = frozenset({CONNECTION_CLOSED_CODE, REQUEST_TIMEOUT_CODE})

_TRANSPORT_ERRORS = (
    anyio.ClosedResourceError,
    anyio.BrokenResourceError,
    anyio.EndOfStream,
    OSError,
    ValidationError,
)

DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0


def _root_cause(exc: BaseException) -> BaseException:
    """Unwrap single-member exception groups raised by anyio task groups."""
    while isinstance(exc, BaseExceptionGroup) and len(exc.exceptions) == 1:
        exc = exc.exceptions[0]
    return exc


def _describe(exc: BaseException) -> str:
    cause = _root_cause(exc)
    return f"{type(cause).__name__}: {cause}" if str(cause) else type(cause).__name__


class ServiceConnection:
    """Live MCP client session held open by a dedicated owner task."""

    def __init__(
        self,
        config: ServiceConfig,
        request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ):
        self.config = config
        self.name = config.name
        self.capabilities: Any = None
        self.server_info: Any = None
        self._request_timeout = timedelta(seconds=request_timeout_seconds)
        self._session: ClientSession | None = None
        self._ready: asyncio.Future[None] | None = None
        self._closing = asyncio.Event()
        self._owner: asyncio.Task | None = None

    @property
    def is_open(self) -> bool:
        return (
            self._session is not None
            and self._owner is not None
            and not self._owner.done()
        )

    async def start(self) -> None:
        """Launch the child process and complete the MCP handshake."""
        self._ready = asyncio.get_running_loop().create_future()
        self._owner = asyncio.create_task(
            self._hold_session(), name=f"mcp-connection:{self.name}",
        )
        try:
            await self._ready
        except asyncio.CancelledError:
            self._closing.set()
            raise

    async def _hold_session(self) -> None:
        assert self._ready is not None
        params = StdioServerParameters(
            command=self.config.launch_command,
            args=list(self.config.launch_args),
            env=dict(self.config.environment) or None,
        )
        try:
            async with stdio_client(params) as (read_stream, write_stream):
                async with ClientSession(
                    read_stream, write_stream,
                    read_timeout_seconds=self._request_timeout,
                ) as session:
                    result = await session.initialize()
                    self.capabilities = result.capabilities
                    self.server_info = result.serverInfo
                    self._session = session
                    self._ready.set_result(None)
                    logger.info(
                        f"Connected to MCP service '{self.name}'",
                        extra={"service_name": self.name},
                    )
                    await self._closing.wait()
        except Exception as e:
            if not self._ready.done():
                self._ready.set_exception(ServiceCommunicationError(
                    self.name, f"failed to start: {_describe(e)}",
                ))
            else:
                logger.warning(
                    f"MCP service '{self.name}' session ended: {_describe(e)}",
                    extra={"service_name": self.name},
                )
        finally:
            self._session = None
            if not self._ready.done():
                self._ready.set_exception(ServiceCommunicationError(
                    self.name, "connection closed before handshake completed",
                ))

    async def _request(
        self,
        tool_name: str | None,
        call: Callable[[ClientSession], Awaitable[Any]],
    ) -> Any:
        context = ErrorContext(tool_name=tool_name)
        session = self._session
        if session is None or self._closing.is_set():
            raise ServiceCommunicationError(
                self.name, "connection is not open", context=context,
            )
        try:
            return await call(session)
        except McpError as e:
            raise ServiceCommunicationError(
                self.name, e.error.message,
                connection_lost=e.error.code in _CONNECTION_LOST_CODES,
                context=context,
            ) from e
        except _TRANSPORT_ERRORS as e:
            raise ServiceCommunicationError(
                self.name, _describe(e), context=context,
            ) from e

    async def list_tools(self) -> list[dict[str, Any]]:
        """Tool catalogue advertised by the service."""
        result = await self._request(None, lambda s: s.list_tools())
        return [
            tool.model_dump(by_alias=True, exclude_none=True, mode="json")
            for tool in result.tools
        ]

    async def call_tool(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Invoke one tool; the CallToolResult is returned as a plain dict."""
        result = await self._request(
            tool_name, lambda s: s.call_tool(tool_name, arguments),
        )
        return result.model_dump(by_alias=True, exclude_none=True, mode="json")

    async def close(self) -> None:
        """Stop the session and wait for the child process to be reaped."""
        self._closing.set()
        if self._owner is not None:
            await self._owner
        logger.info(
            f"Closed MCP service '{self.name}'",
            extra={"service_name": self.name},
        )


def service_connector(
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
) -> Callable[[ServiceConfig], Awaitable[ServiceConnection]]:
    """Factory used by ConnectionManager to launch and handshake a service."""

    async def open_connection(config: ServiceConfig) -> ServiceConnection:
        connection = ServiceConnection(config, request_timeout_seconds)
        await connection.start()
        return connection

    return open_connection
