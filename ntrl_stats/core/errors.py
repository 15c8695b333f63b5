"""Error Hierarchy — typed, categorized exceptions for every stats-engine failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; infrastructure errors (500-level)
      are recovered inside the engine and never reach the reading experience
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with NtrlStatsError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
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
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    story_id: str | None = None
    stats_range: str | None = None


class NtrlStatsError(Exception):
    """Base exception for all stats-engine errors."""

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
                    "story_id": self.context.story_id,
                    "range": self.context.stats_range,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidRangeError(NtrlStatsError):
    """Breakdown requested for a range outside day/week/month/all."""
    def __init__(self, value: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown stats range '{value}'. Expected one of: day, week, month, all.",
            "INVALID_RANGE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value


class SessionValidationError(NtrlStatsError):
    """A stored or submitted reading session is malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SESSION_VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(NtrlStatsError):
    """Key-value store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SpanSourceError(NtrlStatsError):
    """Span source request failed (network error or non-2xx response)."""
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Span source error: {message}",
            "SPAN_SOURCE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 503,
        )
        self.status_code = status_code


class SpanSourceTimeoutError(NtrlStatsError):
    """Span source did not answer within the configured timeout."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Span source timed out after {timeout_seconds}s",
            "SPAN_SOURCE_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 504,
        )
        self.timeout_seconds = timeout_seconds
