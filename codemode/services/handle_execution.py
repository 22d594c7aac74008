"""Execution Handlers — execute_code, check_runtime_version, list_services_with_tools.

Invariants:
    - Handlers never raise for bad input or failed runs: every path returns a ToolReply
    - execute_code validates only `code`; `typescript` and `unstable` fall back to defaults
    - list_services_with_tools runs generated code through the SAME executor as agent
      code, so it sees the proxy exactly as sandboxed programs do
    - The timeout applied to every run comes from settings, not from tool input

Design Decisions:
    - Executor injected: tests substitute fakes without patching modules
    - Every handler takes (runtime, input_data): the dispatch probes once per call and
      hands the same RuntimeProbe to whichever handler runs
"""

import json
import logging

from codemode.core.execution import ExecutionFailure, ExecutionRequest
from codemode.core.format_outcome import (
    ToolReply,
    format_execution_reply,
    invalid_code_type_reply,
    missing_code_reply,
    runtime_version_error_reply,
    runtime_version_reply,
)
from codemode.core.inventory_script import render_inventory_script
from codemode.infrastructure.runtime_probe import RuntimeProbe
from codemode.infrastructure.sandbox_executor import SandboxExecutor

logger = logging.getLogger(__name__)


class ExecutionHandlers:
    """Sandbox-backed orchestrator tool handlers."""

    def __init__(
        self,
        executor: SandboxExecutor,
        proxy_base: str,
        timeout_ms: int,
    ):
        self.executor = executor
        self.proxy_base = proxy_base
        self.timeout_ms = timeout_ms

    async def execute_code(self, runtime: RuntimeProbe, input_data: dict) -> ToolReply:
        """Run agent-supplied code under the fixed capability grant."""
        code = input_data.get("code")
        if code is None or code == "":
            return missing_code_reply()
        if not isinstance(code, str):
            return invalid_code_type_reply()

        request = ExecutionRequest(
            source_code=code,
            is_typed_variant=bool(input_data.get("typescript", True)),
            timeout_ms=self.timeout_ms,
            allow_unstable_features=bool(input_data.get("unstable", False)),
        )
        outcome = await self.executor.execute(request)
        return format_execution_reply(outcome, self.timeout_ms)

    async def check_runtime_version(self, runtime: RuntimeProbe, input_data: dict) -> ToolReply:
        if not runtime.installed:
            return runtime_version_error_reply(runtime.error or "runtime not found")
        return runtime_version_reply(runtime.version_text)

    async def list_services_with_tools(self, runtime: RuntimeProbe, input_data: dict) -> ToolReply:
        """Walk the proxy from inside the sandbox and return one JSON inventory."""
        request = ExecutionRequest(
            source_code=render_inventory_script(self.proxy_base),
            is_typed_variant=True,
            timeout_ms=self.timeout_ms,
        )
        outcome = await self.executor.execute(request)
        if isinstance(outcome, ExecutionFailure):
            logger.warning(
                f"Inventory script failed: {outcome.message}",
                extra={"failure_kind": outcome.kind.value},
            )
            return format_execution_reply(outcome, self.timeout_ms)

        try:
            inventory = json.loads(outcome.stdout)
        except json.JSONDecodeError:
            logger.warning("Inventory script produced no JSON document")
            return format_execution_reply(outcome, self.timeout_ms)
        return ToolReply([json.dumps(inventory, indent=2)])
