"""Error Hierarchy - typed, categorized exceptions for every Roster failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors are 4xx; dependency errors are 502/503 and never 500
    - to_response() produces the REST envelope shared by all error handlers
    - No driver messages or stack traces in user-facing messages

Design Decisions:
    - Single hierarchy with RosterError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    DEPENDENCY_UNAVAILABLE = "dependency_unavailable"
    DATABASE = "database"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    store: str | None = None
    operation: str | None = None


class RosterError(Exception):
    """Base exception for all Roster errors."""

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
                    "store": self.context.store,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class DuplicateRecordError(RosterError):
    """Store rejected the insert because of a unique constraint."""
    def __init__(self, store: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(store=store, operation="insert")
        super().__init__(
            f"A record with the same key already exists in {store}",
            "DUPLICATE_RECORD", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


# ─── Dependency Errors (500-level) ──────────────────────────────

class StoreUnavailableError(RosterError):
    """Store could not be reached (connection refused, timeout, no primary)."""
    def __init__(self, store: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(store=store, operation=operation)
        super().__init__(
            f"The {store} store is unavailable",
            "STORE_UNAVAILABLE", ErrorCategory.DEPENDENCY_UNAVAILABLE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.store = store
        self.operation = operation


class StoreQueryError(RosterError):
    """Store was reachable but the operation failed."""
    def __init__(self, store: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext(store=store, operation=operation)
        super().__init__(
            f"The {store} store failed to {operation}",
            "STORE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 502,
        )
        self.store = store
        self.operation = operation


class RequestTimeoutError(RosterError):
    """Request exceeded the configured time budget."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Request did not complete within {timeout_seconds:g}s",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
        self.timeout_seconds = timeout_seconds
