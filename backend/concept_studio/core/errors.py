"""Error Hierarchy — typed, categorized exceptions for every generation failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400/429) are raised before any collaborator is called
    - Generation errors (500) abort the whole request — no partial success
    - to_response() always carries a human-readable "error" string

Design Decisions:
    - Single hierarchy with StudioError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    QUOTA = "quota"
    GENERATION = "generation"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    branch: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class StudioError(Exception):
    """Base exception for all concept studio errors."""

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
        """Convert to the REST error body."""
        return {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "branch": self.context.branch,
        }


# ─── Request Errors (400/429) ───────────────────────────────────

class ValidationError(StudioError):
    """Identity email or a branch-required field is missing or malformed."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class InvalidPayloadError(StudioError):
    """Payload carries no (or more than one) branch discriminator."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_PAYLOAD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class QuotaExceededError(StudioError):
    """Identity already used every free generation."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"You have reached the limit of {limit} free generations. "
            "Please contact our team to continue designing.",
            "QUOTA_EXCEEDED", ErrorCategory.QUOTA,
            ErrorSeverity.WARNING, context, 429,
        )
        self.limit = limit


# ─── Generation Errors (500) ────────────────────────────────────

class GenerationFailedError(StudioError):
    """Concept drafting produced nothing usable."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "GENERATION_FAILED", ErrorCategory.GENERATION,
            ErrorSeverity.ERROR, context, 500,
        )


class InsufficientResultsError(StudioError):
    """Fewer usable images than the branch minimum."""
    def __init__(self, produced: int, dispatched: int, context: ErrorContext | None = None):
        super().__init__(
            f"Image generation only generated {produced} out of {dispatched} "
            "images. Please try again.",
            "INSUFFICIENT_RESULTS", ErrorCategory.GENERATION,
            ErrorSeverity.ERROR, context, 500,
        )
        self.produced = produced
        self.dispatched = dispatched


# ─── Infrastructure Errors ──────────────────────────────────────

class ExternalServiceError(StudioError):
    """A text or image generation collaborator call failed."""
    def __init__(
        self,
        message: str,
        service: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"{service} error: {message}",
            "EXTERNAL_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.service = service


class DatabaseError(StudioError):
    """Counter store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
