"""Sandbox Executor — runs untrusted source in a capability-restricted child process.

Invariants:
    - Every call returns an ExecutionOutcome; execute() never raises for user code
    - Capability flags come from build_runtime_command() only, never from the request
    - On timeout the child is killed AND awaited before the outcome is returned
    - The materialized source file is removed best-effort; a failed removal is logged
      and never changes the outcome
    - Concurrent executions share nothing: one file, one process, one id per run

Design Decisions:
    - asyncio subprocess + wait_for over a thread pool: the event loop also serves
      the proxy that sandboxed code calls back into, so it must never block
    - stdin is DEVNULL: sandboxed code cannot wait on input that will never come
"""

import asyncio
import logging
import tempfile
import time
from pathlib import Path
from uuid import uuid4

from codemode.core.classify_failure import (
    classify_exit,
    setup_failure,
    timeout_failure,
)
from codemode.core.domain_types import ExecutionId
from codemode.core.execution import (
    ExecutionOutcome,
    ExecutionRequest,
    build_runtime_command,
    source_filename,
)

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 1)


class SandboxExecutor:
    """Materializes source to a temp file and runs it under the sandbox runtime."""

    def __init__(self, runtime_command: str = "deno", temp_dir: str | Path | None = None):
        self.runtime_command = runtime_command
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        execution_id = ExecutionId(uuid4().hex)
        source_path = self._temp_dir / source_filename(execution_id, request.language)
        log_extra = {"execution_id": execution_id}

        try:
            source_path.write_text(request.source_code, encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write source file {source_path}: {e}", extra=log_extra)
            self._remove(source_path, execution_id)
            return setup_failure(f"Could not write source file: {e}", execution_id)

        try:
            return await self._run(request, source_path, execution_id)
        finally:
            self._remove(source_path, execution_id)

    async def _run(
        self, request: ExecutionRequest, source_path: Path, execution_id: ExecutionId,
    ) -> ExecutionOutcome:
        command = build_runtime_command(
            self.runtime_command, str(source_path), request.allow_unstable_features,
        )
        started = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(
                f"Could not start runtime '{self.runtime_command}': {e}",
                extra={"execution_id": execution_id},
            )
            return setup_failure(
                f"Could not start runtime '{self.runtime_command}': {e}", execution_id,
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=request.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            if process.returncode is None:
                process.kill()
            await process.wait()
            duration_ms = _elapsed_ms(started)
            logger.warning(
                f"Execution killed after {request.timeout_ms}ms",
                extra={
                    "execution_id": execution_id,
                    "failure_kind": "timeout",
                    "duration_ms": duration_ms,
                },
            )
            return timeout_failure(
                request.timeout_ms, execution_id=execution_id, duration_ms=duration_ms,
            )

        outcome = classify_exit(
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
            execution_id=execution_id,
            duration_ms=_elapsed_ms(started),
        )
        logger.info(
            f"Execution finished with exit code {process.returncode}",
            extra={
                "execution_id": execution_id,
                "failure_kind": None if outcome.succeeded else outcome.kind.value,
                "duration_ms": outcome.duration_ms,
            },
        )
        return outcome

    def _remove(self, source_path: Path, execution_id: ExecutionId) -> None:
        try:
            source_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                f"Could not remove source file {source_path}: {e}",
                extra={"execution_id": execution_id},
            )
