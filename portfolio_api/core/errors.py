"""Error Hierarchy — typed, categorized exceptions for every Portfolio API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/401/404) are recoverable; BackendError (500) is critical
    - to_response() produces the same envelope shape as successful responses (success=False)
    - BackendError carries a generic message; the raw underlying text goes in `errors`

Design Decisions:
    - Single hierarchy with PortfolioError base: one FastAPI handler renders all of them
      (ADR: uniform error shape)
    - ErrorContext as dataclass: resource/id/operation travel with the error into logs
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
    CONFLICT = "conflict"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    UPLOAD = "upload"
    BACKEND = "backend"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str | None = None
    resource_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class PortfolioError(Exception):
    """Base exception for all Portfolio API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        errors: dict[str, str] | str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.errors = errors

    def to_response(self) -> dict:
        """Convert to the standard response envelope."""
        response = {
            "success": False,
            "message": self.message,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.errors:
            response["errors"] = self.errors
        return response


# ─── Client Errors (400-level) ──────────────────────────────────

class FieldValidationError(PortfolioError):
    """Malformed, missing or out-of-range input. `errors` maps field path to message."""
    def __init__(
        self,
        errors: dict[str, str],
        message: str = "Validation failed",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, errors,
        )


class ConflictError(PortfolioError):
    """Natural-key collision with an existing record."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 400,
        )


class ResourceNotFoundError(PortfolioError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str | int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource = resource_type
        ctx.resource_id = None if resource_id is None else str(resource_id)
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class AuthError(PortfolioError):
    """Missing, invalid or expired bearer credential."""
    def __init__(self, message: str = "Access token required", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTH_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class UploadError(PortfolioError):
    """Image rejected (type, size, count) or blob store refused it."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UPLOAD_ERROR", ErrorCategory.UPLOAD,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class BackendError(PortfolioError):
    """Unexpected failure from the resource store or blob store."""
    def __init__(
        self,
        message: str,
        detail: str | None = None,
        operation: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation or ctx.operation
        super().__init__(
            message, "BACKEND_ERROR", ErrorCategory.BACKEND,
            ErrorSeverity.CRITICAL, ctx, 500, detail,
        )
        self.detail = detail
