"""Connection Manager — one cached, lazily created connection per downstream service.

Invariants:
    - At most one live connection per service name at any time
    - Cache hit performs no I/O
    - Concurrent misses for one name coalesce into ONE creation task (single-flight);
      every caller awaits the same result
    - A failed creation is never cached: the next call retries
    - ServiceCommunicationError with connection_lost=True evicts and closes the cached
      connection; the error still propagates to the caller
    - Nothing persisted: the cache lives and dies with the process

Design Decisions:
    - In-flight creation stored as an asyncio.Task per name: check-and-insert happens
      with no await in between, so a single event loop needs no lock
    - Callers await the task through asyncio.shield: one cancelled caller cannot
      cancel a launch other callers are waiting on
    - Singleton manager initialized on startup, FastAPI dependency for routes
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from codemode.core.domain_types import ServiceName
from codemode.core.errors import ServiceCommunicationError, ServiceNotFoundError
from codemode.core.service_config import ServiceConfig
from codemode.infrastructure.config_resolver import ConfigResolver

logger = logging.getLogger(__name__)


class Connection(Protocol):
    name: ServiceName

    async def list_tools(self) -> list[dict[str, Any]]: ...

    async def call_tool(self, tool_name: str, arguments: dict[str, Any]) -> Any: ...

    async def close(self) -> None: ...


Connector = Callable[[ServiceConfig], Awaitable[Connection]]


class ConnectionManager:
    """Owns the service-name → connection cache."""

    def __init__(self, resolver: ConfigResolver, connector: Connector):
        self._resolver = resolver
        self._connector = connector
        self._connections: dict[ServiceName, Connection] = {}
        self._pending: dict[str, asyncio.Task] = {}

    @property
    def resolver(self) -> ConfigResolver:
        return self._resolver

    def connected_services(self) -> list[ServiceName]:
        return list(self._connections)

    async def get_or_create(self, name: str) -> Connection:
        """Cached connection for name, creating it on first use."""
        connection = self._connections.get(name)
        if connection is not None:
            return connection

        task = self._pending.get(name)
        if task is None:
            task = asyncio.create_task(self._create(name), name=f"connect:{name}")
            self._pending[name] = task
            task.add_done_callback(
                lambda done, key=name: self._clear_pending(key, done),
            )
        return await asyncio.shield(task)

    def _clear_pending(self, name: str, task: asyncio.Task) -> None:
        if self._pending.get(name) is task:
            del self._pending[name]

    async def _create(self, name: str) -> Connection:
        config = self._resolver.find(name)
        if config is None:
            raise ServiceNotFoundError(name)
        logger.info(
            f"Launching MCP service '{name}': {config.launch_command}",
            extra={"service_name": name},
        )
        connection = await self._connector(config)
        self._connections[config.name] = connection
        return connection

    async def list_tools(self, name: str) -> list[dict[str, Any]]:
        connection = await self.get_or_create(name)
        try:
            return await connection.list_tools()
        except ServiceCommunicationError as e:
            await self._evict_on_loss(name, connection, e)
            raise

    async def call_tool(
        self, name: str, tool_name: str, arguments: dict[str, Any],
    ) -> Any:
        connection = await self.get_or_create(name)
        try:
            return await connection.call_tool(tool_name, arguments)
        except ServiceCommunicationError as e:
            await self._evict_on_loss(name, connection, e)
            raise

    async def _evict_on_loss(
        self, name: str, connection: Connection, error: ServiceCommunicationError,
    ) -> None:
        if not error.connection_lost:
            return
        logger.warning(
            f"Evicting connection to '{name}': {error.message}",
            extra={"service_name": name, "error_code": error.code},
        )
        await self.evict(name, connection)

    async def evict(self, name: str, connection: Connection | None = None) -> bool:
        """Drop the cached connection for name and close it.

        When connection is given, only that exact instance is evicted, so a
        stale failure cannot remove a newer replacement.
        """
        cached = self._connections.get(name)
        if cached is None or (connection is not None and cached is not connection):
            return False
        del self._connections[name]
        await self._close_quietly(cached)
        return True

    async def close_all(self) -> None:
        """Close every cached connection. Called on shutdown."""
        pending = list(self._pending.values())
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        connections = list(self._connections.values())
        self._connections.clear()
        for connection in connections:
            await self._close_quietly(connection)

    async def _close_quietly(self, connection: Connection) -> None:
        try:
            await connection.close()
        except Exception as e:
            logger.warning(
                f"Error closing connection to '{connection.name}': {e}",
                extra={"service_name": connection.name},
            )


# Singleton (initialized on startup)
connection_manager: ConnectionManager | None = None


def init_connection_manager(resolver: ConfigResolver, connector: Connector) -> ConnectionManager:
    global connection_manager
    connection_manager = ConnectionManager(resolver, connector)
    return connection_manager


def get_connection_manager() -> ConnectionManager:
    """FastAPI dependency for the connection manager."""
    if not connection_manager:
        raise RuntimeError("Connection manager not initialized")
    return connection_manager
