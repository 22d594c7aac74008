"""Error Hierarchy — typed, categorized exceptions for proxy and connection failures.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors are 400/404-level; downstream service failures are 500-level
    - to_response() produces the REST envelope; no stack traces leak into it
    - Sandbox failures are NOT exceptions: they are ExecutionFailure values (core/execution.py)

Design Decisions:
    - Single hierarchy with CodemodeError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    service_name: str | None = None
    tool_name: str | None = None
    debug_info: dict[str, Any] | None = None


class CodemodeError(Exception):
    """Base exception for all codemode errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "service_name": self.context.service_name,
                    "tool_name": self.context.tool_name,
                },
            }
        }


# ─── Request Errors (400-level) ──────────────────────────────────

class MalformedRequestError(CodemodeError):
    """Request body or path does not have the expected shape."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "MALFORMED_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


class ServiceNotFoundError(CodemodeError):
    """No configuration directory defines the requested service."""
    def __init__(self, service_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.service_name = service_name
        super().__init__(
            f"Server '{service_name}' not found in any config directory",
            "SERVICE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.service_name = service_name


# ─── Downstream Errors (500-level) ───────────────────────────────

class ServiceCommunicationError(CodemodeError):
    """A downstream service failed to start, respond, or stay connected.

    connection_lost=True means the cached connection is unusable and must be
    evicted; False means the service answered with a protocol-level error.
    """
    def __init__(
        self,
        service_name: str,
        message: str,
        connection_lost: bool = True,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.service_name = service_name
        super().__init__(
            f"Service '{service_name}' communication failed: {message}",
            "SERVICE_COMMUNICATION_ERROR", ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.service_name = service_name
        self.connection_lost = connection_lost
