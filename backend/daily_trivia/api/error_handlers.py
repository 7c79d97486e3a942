"""Error Handlers — every failure leaves the API in the same JSON envelope.

Invariants:
    - TriviaError → its own http_status and to_response() body
    - Request validation failures → 400 VALIDATION_ERROR with per-field details
    - Anything else → 500 INTERNAL_ERROR, message never includes exception text

Design Decisions:
    - Handlers are plain module functions registered with add_exception_handler,
      so main.py stays wiring only
    - 5xx TriviaErrors log at error level, 4xx at warning: expected outcomes
      (no question yet, bad key, exhaustion) should not page anyone
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from daily_trivia.core.errors import ErrorCategory, ErrorSeverity, TriviaError

logger = logging.getLogger(__name__)


def _envelope(code: str, message: str, category: str, severity: str, **extra) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category,
            "severity": severity,
            **extra,
        },
    }


async def handle_trivia_error(request: Request, exc: TriviaError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION.value, ErrorSeverity.WARNING.value,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL.value, ErrorSeverity.CRITICAL.value,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TriviaError, handle_trivia_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
