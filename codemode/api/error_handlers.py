"""Error Handlers — global exception handlers for the proxy API.

Invariants:
    - CodemodeError → structured JSON with code, message, category, severity
    - RequestValidationError (bad JSON, wrong envelope shape) → 400 MALFORMED_REQUEST
    - Unknown routes → 404 JSON envelope, never an HTML page
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details

Design Decisions:
    - Four-layer handler: domain, validation, routing, catch-all
    - Extracted from main.py so the app module stays a list of registrations
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from codemode.core.errors import CodemodeError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_codemode_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _error_body(code: str, message: str, category: ErrorCategory, severity: ErrorSeverity) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
        },
    }


def _register_codemode_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CodemodeError)
    async def codemode_error_handler(request: Request, exc: CodemodeError):
        """Handle all proxy domain/downstream errors."""
        logger.error(
            f"CodemodeError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "service_name": exc.context.service_name,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Malformed JSON or envelope: 400 with field-level details."""
        logger.warning(
            f"Malformed request on {request.url.path}: {exc.errors()}",
            extra={"error_code": "MALFORMED_REQUEST", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Routing-level errors (unknown path, wrong method) in the same envelope."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            code, message = "NOT_FOUND", f"No route for {request.method} {request.url.path}"
            category = ErrorCategory.RESOURCE_NOT_FOUND
        else:
            code, message = "HTTP_ERROR", str(exc.detail)
            category = ErrorCategory.VALIDATION
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(code, message, category, ErrorSeverity.WARNING),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    body = _error_body(
        "MALFORMED_REQUEST", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
    )
    body["error"]["details"] = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return body
