"""Tool Dispatch — explicit routing from orchestrator tool name to handler.

Invariants:
    - Every tool->handler mapping is visible: no getattr magic
    - The runtime is probed exactly once per dispatch; when it is missing, every tool
      answers with installation guidance instead of running
    - The probe result is passed to the handler, which never probes again
    - Unknown tools return an UNKNOWN_TOOL error reply (never raises)
    - Every call is logged with tool_name and outcome

Design Decisions:
    - Probe per call over probe-once: installing the runtime while the server is
      up takes effect without a restart
"""

import logging
from collections.abc import Awaitable, Callable

from codemode.core.domain_types import OrchestratorTool
from codemode.core.format_outcome import (
    ToolReply,
    runtime_missing_reply,
    unknown_tool_reply,
)
from codemode.infrastructure.runtime_probe import RuntimeProbe
from codemode.services.handle_execution import ExecutionHandlers

logger = logging.getLogger(__name__)

RuntimeProber = Callable[[], Awaitable[RuntimeProbe]]


class ToolDispatch:
    """Routes tool_name -> handler. Explicit registration, no auto-discovery."""

    def __init__(self, handlers: ExecutionHandlers, probe: RuntimeProber):
        self._probe = probe

        # Adding a tool requires editing this dict and define_orchestrator_tools
        self._handlers = {
            OrchestratorTool.EXECUTE_CODE.value: handlers.execute_code,
            OrchestratorTool.CHECK_RUNTIME_VERSION.value: handlers.check_runtime_version,
            OrchestratorTool.LIST_SERVICES_WITH_TOOLS.value: handlers.list_services_with_tools,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def execute(self, tool_name: str, input_data: dict | None) -> ToolReply:
        """Route tool_name to its handler. Logs every call."""
        probe = await self._probe()
        if not probe.installed:
            logger.warning(
                f"Runtime unavailable, refusing '{tool_name}': {probe.error}",
                extra={"tool_name": tool_name},
            )
            return runtime_missing_reply()

        handler = self._handlers.get(tool_name)
        if not handler:
            logger.warning(
                f"Unknown tool '{tool_name}'",
                extra={"tool_name": tool_name, "error_code": "UNKNOWN_TOOL"},
            )
            return unknown_tool_reply(tool_name)

        reply = await handler(probe, input_data or {})
        logger.info(
            f"Tool '{tool_name}' finished (is_error={reply.is_error})",
            extra={"tool_name": tool_name},
        )
        return reply
