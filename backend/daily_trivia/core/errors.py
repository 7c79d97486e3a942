"""Error Hierarchy — typed, categorized exceptions for all Daily Trivia failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are expected outcomes; infrastructure errors (500-level) are not
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TriviaError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - MalformedResponseError subclasses ExternalServiceError: callers that retry
      unparseable replies catch it first, everything else falls through to 502
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    question_id: str | None = None
    attempt: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class TriviaError(Exception):
    """Base exception for all Daily Trivia errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "question_id": self.context.question_id,
                    "attempt": self.context.attempt,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnauthorizedError(TriviaError):
    """Admin endpoint called without a valid cron key."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Missing or invalid admin key",
            "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ResourceNotFoundError(TriviaError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class NoQuestionYetError(TriviaError):
    """Store holds no question at all — nothing to serve today."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No question yet",
            "NO_QUESTION_YET", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, context, 404,
        )


class GenerationExhaustedError(TriviaError):
    """Generation loop used every attempt without accepting a candidate."""
    def __init__(
        self, attempts: int, outcomes: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.attempt = attempts
        if outcomes:
            ctx.debug_info = {"outcomes": outcomes}
        super().__init__(
            f"Could not generate a novel question after {attempts} attempts",
            "GENERATION_EXHAUSTED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.attempts = attempts
        self.outcomes = outcomes or []


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TriviaError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ExternalServiceError(TriviaError):
    """Generator, embedder or grader call failed."""
    def __init__(
        self,
        message: str,
        service: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
        code: str = "EXTERNAL_SERVICE_ERROR",
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"{service} error ({api_error_type}): {message}",
            code, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.service = service
        self.api_error_type = api_error_type


class AnthropicAPIError(ExternalServiceError):
    """Anthropic API call failed."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "Anthropic API", api_error_type,
            retry_after_ms, context, code="ANTHROPIC_API_ERROR",
        )


class EmbeddingAPIError(ExternalServiceError):
    """Embedding API call failed or returned an empty vector."""
    def __init__(
        self, message: str, api_error_type: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "Embedding API", api_error_type,
            context=context, code="EMBEDDING_API_ERROR",
        )


class MalformedResponseError(ExternalServiceError):
    """External model replied, but the reply could not be parsed."""
    def __init__(
        self, message: str, service: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, service, "malformed_response",
            context=context, code="MALFORMED_RESPONSE",
        )
