"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ServiceName wraps str: the identity of a downstream service in the merged config view
    - ExecutionId is a uuid4 hex string, unique per execution
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ServiceName = NewType("ServiceName", str)
ExecutionId = NewType("ExecutionId", str)


# ─── Enums ───────────────────────────────────────────────────────

class FailureKind(str, Enum):
    """Classification of a failed sandbox execution."""
    TIMEOUT = "timeout"
    PERMISSION_DENIED = "permission_denied"
    MODULE_RESOLUTION_FAILURE = "module_resolution_failure"
    GENERIC_RUNTIME_ERROR = "generic_runtime_error"
    SETUP_ERROR = "setup_error"


class SourceLanguage(str, Enum):
    """Front end the runtime picks from the materialized file's extension."""
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"

    @property
    def file_extension(self) -> str:
        return ".ts" if self is SourceLanguage.TYPESCRIPT else ".js"


class OrchestratorTool(str, Enum):
    """Tools exposed to the calling agent over the MCP stdio transport."""
    EXECUTE_CODE = "execute_code"
    CHECK_RUNTIME_VERSION = "check_runtime_version"
    LIST_SERVICES_WITH_TOOLS = "list_services_with_tools"
