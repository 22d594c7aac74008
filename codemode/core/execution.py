"""Execution Types — request/outcome values and the fixed runtime invocation.

Invariants:
    - CAPABILITY_GRANT is a module constant: network access only, never derived from input
    - build_runtime_command() output depends only on runtime, file path and the unstable flag
    - ExecutionOutcome is ExecutionSuccess | ExecutionFailure, exactly one per run
    - source_filename() embeds the execution id, so concurrent runs never share a file

Design Decisions:
    - Tuple grant over list: immutable, cannot be extended by a caller holding a reference
    - --no-prompt always set: a permission the grant lacks fails fast instead of waiting on a TTY
"""

from dataclasses import dataclass
from typing import Union

from codemode.core.domain_types import ExecutionId, FailureKind, SourceLanguage

DEFAULT_TIMEOUT_MS: int = 30_000
CAPABILITY_GRANT: tuple[str, ...] = ("net",)
SOURCE_FILE_PREFIX = "deno-"


@dataclass(frozen=True)
class ExecutionRequest:
    """One code-execution request. Transient."""
    source_code: str
    is_typed_variant: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    allow_unstable_features: bool = False

    @property
    def language(self) -> SourceLanguage:
        if self.is_typed_variant:
            return SourceLanguage.TYPESCRIPT
        return SourceLanguage.JAVASCRIPT


@dataclass(frozen=True)
class ExecutionSuccess:
    """Zero exit status. Streams are returned verbatim."""
    stdout: str
    stderr: str
    execution_id: ExecutionId | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return True


@dataclass(frozen=True)
class ExecutionFailure:
    """Classified failure: timeout, permission, module resolution, runtime or setup."""
    kind: FailureKind
    message: str
    raw_stderr: str = ""
    execution_id: ExecutionId | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return False


ExecutionOutcome = Union[ExecutionSuccess, ExecutionFailure]


def source_filename(execution_id: ExecutionId, language: SourceLanguage) -> str:
    """File name for the materialized source, e.g. deno-<id>.ts."""
    return f"{SOURCE_FILE_PREFIX}{execution_id}{language.file_extension}"


def build_runtime_command(
    runtime: str, source_path: str, allow_unstable: bool = False,
) -> list[str]:
    """Full argv for one run. Permission flags come from CAPABILITY_GRANT only."""
    command = [runtime, "run", "--no-prompt"]
    command.extend(f"--allow-{capability}" for capability in CAPABILITY_GRANT)
    if allow_unstable:
        command.append("--unstable")
    command.append(source_path)
    return command
