"""Failure Classification — maps a finished child process to an ExecutionOutcome.

Invariants:
    - classify_exit is PURE: exit status + captured streams in, outcome out
    - Precedence: permission markers > module markers > any non-zero exit
    - Zero exit is always ExecutionSuccess, even with stderr output (warnings)
    - Timeout and setup failures never reach here (decided before/around the child)

Design Decisions:
    - Marker tuples cover both runtime generations: "PermissionDenied" (1.x)
      and "NotCapable" (2.x) for permissions, "Module not found" and
      "Cannot resolve module" for imports
    - Matching is case-insensitive on stderr only; stdout is user-controlled output
"""

from codemode.core.domain_types import ExecutionId, FailureKind
from codemode.core.execution import (
    ExecutionFailure,
    ExecutionOutcome,
    ExecutionSuccess,
)

PERMISSION_MARKERS: tuple[str, ...] = ("permission", "notcapable")
MODULE_RESOLUTION_MARKERS: tuple[str, ...] = (
    "module not found",
    "cannot resolve module",
    "relative import path",
)


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def classify_exit(
    returncode: int,
    stdout: str,
    stderr: str,
    execution_id: ExecutionId | None = None,
    duration_ms: float = 0.0,
) -> ExecutionOutcome:
    """Classify a child that exited on its own."""
    if returncode == 0:
        return ExecutionSuccess(
            stdout=stdout, stderr=stderr,
            execution_id=execution_id, duration_ms=duration_ms,
        )

    if _contains_any(stderr, PERMISSION_MARKERS):
        kind = FailureKind.PERMISSION_DENIED
        message = "Code attempted an operation outside the network-only grant."
    elif _contains_any(stderr, MODULE_RESOLUTION_MARKERS):
        kind = FailureKind.MODULE_RESOLUTION_FAILURE
        message = "A module import could not be resolved."
    else:
        kind = FailureKind.GENERIC_RUNTIME_ERROR
        message = f"Process exited with code {returncode}."

    return ExecutionFailure(
        kind=kind, message=message, raw_stderr=stderr,
        execution_id=execution_id, duration_ms=duration_ms,
    )


def timeout_failure(
    timeout_ms: int,
    stderr: str = "",
    execution_id: ExecutionId | None = None,
    duration_ms: float = 0.0,
) -> ExecutionFailure:
    return ExecutionFailure(
        kind=FailureKind.TIMEOUT,
        message=f"Execution timed out after {timeout_ms / 1000:g} seconds.",
        raw_stderr=stderr,
        execution_id=execution_id,
        duration_ms=duration_ms,
    )


def setup_failure(
    reason: str, execution_id: ExecutionId | None = None,
) -> ExecutionFailure:
    return ExecutionFailure(
        kind=FailureKind.SETUP_ERROR,
        message=reason,
        execution_id=execution_id,
    )
