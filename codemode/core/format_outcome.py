"""Outcome Formatting — user-facing text for execution results and runtime problems.

Invariants:
    - All functions are pure (no IO, no async)
    - Every failure message says what was attempted, why it plausibly failed,
      and how to resolve it; no raw stack trace beyond the child's own stderr
    - Success text is stdout verbatim behind an "Output:" header; stderr (warnings)
      goes in a separate block

Design Decisions:
    - ToolReply as a plain dataclass: the MCP shell converts it to CallToolResult,
      keeping this module free of SDK imports
"""

from dataclasses import dataclass, field

from codemode.core.domain_types import FailureKind
from codemode.core.execution import ExecutionFailure, ExecutionOutcome

RUNTIME_INSTALL_URL = "https://docs.deno.com/runtime/getting_started/installation/"


@dataclass
class ToolReply:
    """Text blocks returned to the calling agent."""
    texts: list[str] = field(default_factory=list)
    is_error: bool = False


_GUIDANCE: dict[FailureKind, str] = {
    FailureKind.TIMEOUT: (
        "The code execution timed out after {timeout_seconds:g} seconds. Consider:\n"
        "- Reducing computation complexity\n"
        "- Breaking large operations into smaller chunks\n"
        "- Avoiding infinite loops or blocking operations\n"
    ),
    FailureKind.PERMISSION_DENIED: (
        "Permission denied. Code runs with network access only (--allow-net).\n"
        "The following operations are NOT permitted:\n"
        "- File system access (reading/writing files)\n"
        "- Environment variable access\n"
        "- System command execution\n"
        "- Plugin loading\n"
    ),
    FailureKind.MODULE_RESOLUTION_FAILURE: (
        "Module import failed. Remember:\n"
        "- Use https:// URLs (or npm:/jsr: specifiers) for remote imports\n"
        "- The runtime uses ES modules, not CommonJS\n"
        "- Check module URL spelling and availability\n"
    ),
    FailureKind.GENERIC_RUNTIME_ERROR: (
        "Error: {message}\n\n"
        "Common solutions:\n"
        "- Check syntax for TypeScript/JavaScript errors\n"
        "- Verify all imports use valid URLs\n"
        "- Ensure code is complete and self-contained\n"
    ),
    FailureKind.SETUP_ERROR: (
        "System error occurred during code execution setup.\n\n"
        "Error: {message}\n\n"
        "This typically indicates:\n"
        "- Insufficient disk space for temporary files\n"
        "- Permission issues with temporary directory\n"
        "- The sandbox runtime is not installed or not on PATH\n"
        "- System resource limitations\n\n"
        "Please check system resources and try again."
    ),
}


def format_failure(failure: ExecutionFailure, timeout_ms: int) -> str:
    """Diagnostic text for one classified failure."""
    guidance = _GUIDANCE[failure.kind].format(
        timeout_seconds=timeout_ms / 1000, message=failure.message,
    )
    if failure.kind is FailureKind.SETUP_ERROR:
        return guidance
    text = "Code execution failed.\n\n"
    if failure.raw_stderr:
        text += f"Error Details:\n{failure.raw_stderr}\n\n"
    return text + guidance


def format_execution_reply(outcome: ExecutionOutcome, timeout_ms: int) -> ToolReply:
    """Convert an outcome to the execute_code tool reply."""
    if isinstance(outcome, ExecutionFailure):
        return ToolReply([format_failure(outcome, timeout_ms)], is_error=True)
    texts = [
        f"Output:\n{outcome.stdout}" if outcome.stdout
        else "Code executed successfully with no output."
    ]
    if outcome.stderr:
        texts.append(f"Errors/Warnings:\n{outcome.stderr}")
    return ToolReply(texts)


def runtime_missing_reply() -> ToolReply:
    return ToolReply(
        [
            "Error: Deno runtime is not installed or not accessible.\n\n"
            "To resolve this issue:\n"
            f"1. Install Deno from {RUNTIME_INSTALL_URL}\n"
            "2. Ensure Deno is in your system PATH (or set RUNTIME_COMMAND)\n"
            "3. Try running 'deno --version' in your terminal to verify installation\n"
            "4. Restart this MCP server after installation\n\n"
            "Quick install commands:\n"
            "- macOS/Linux: curl -fsSL https://deno.land/install.sh | sh\n"
            "- Windows: irm https://deno.land/install.ps1 | iex"
        ],
        is_error=True,
    )


def runtime_version_reply(version_text: str) -> ToolReply:
    return ToolReply([f"Deno Version Information:\n{version_text}"])


def runtime_version_error_reply(error: str) -> ToolReply:
    return ToolReply(
        [
            f"Error checking Deno version: {error}\n\n"
            "This suggests Deno is not properly installed or accessible. Please:\n"
            f"1. Install Deno from {RUNTIME_INSTALL_URL}\n"
            "2. Ensure Deno is in your system PATH\n"
            "3. Restart your terminal and this MCP server\n"
            "4. Try running 'deno --version' manually to verify installation"
        ],
        is_error=True,
    )


def missing_code_reply() -> ToolReply:
    return ToolReply(
        [
            "Error: No code provided for execution.\n\n"
            "Please provide valid TypeScript or JavaScript code in the 'code' parameter.\n\n"
            "Example usage:\n"
            "{\n  \"code\": \"console.log('Hello, World!');\"\n}"
        ],
        is_error=True,
    )


def invalid_code_type_reply() -> ToolReply:
    return ToolReply(
        [
            "Error: Invalid code parameter type.\n\n"
            "The 'code' parameter must be a string containing TypeScript or JavaScript code."
        ],
        is_error=True,
    )


def unknown_tool_reply(tool_name: str) -> ToolReply:
    return ToolReply(
        [f"UNKNOWN_TOOL: Tool '{tool_name}' does not exist."], is_error=True,
    )
