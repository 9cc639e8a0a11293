"""Error Hierarchy — typed, categorized exceptions for all VidTube failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope {success, message, errors}
    - No internal details leaked in user-facing messages (debug_info stays in logs)

Design Decisions:
    - Single hierarchy with VidTubeError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Ownership-gate misses raise NotFoundOrForbiddenError: never reveals whether the
      resource exists to a non-owner
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
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND_OR_FORBIDDEN = "not_found_or_forbidden"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    resource_type: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class VidTubeError(Exception):
    """Base exception for all VidTube errors."""

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

    def error_details(self) -> list[dict]:
        """Entries for the envelope's `errors` array."""
        return [{
            "code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }]

    def to_response(self) -> dict:
        """Convert to standardized REST error envelope."""
        return {
            "success": False,
            "message": self.message,
            "errors": self.error_details(),
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(VidTubeError):
    """Malformed or missing input."""
    def __init__(
        self, message: str, fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields or []

    def error_details(self) -> list[dict]:
        details = super().error_details()
        if self.fields:
            details[0]["fields"] = self.fields
        return details


class ConflictError(VidTubeError):
    """Unique field already taken."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.field = field


class UnauthorizedError(VidTubeError):
    """Missing, invalid, expired or stale credential, or wrong password.

    `reason` is the internal cause. It is kept in context.debug_info for
    logs and never rendered into the response.
    """
    def __init__(
        self, message: str = "Unauthorized request",
        reason: str | None = None, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if reason:
            ctx.debug_info = {**(ctx.debug_info or {}), "reason": reason}
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.UNAUTHORIZED,
            ErrorSeverity.WARNING, ctx, 401,
        )
        self.reason = reason


class NotFoundOrForbiddenError(VidTubeError):
    """Ownership gate matched nothing: absent, or owned by someone else."""
    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found or not authorized",
            "NOT_FOUND_OR_FORBIDDEN", ErrorCategory.NOT_FOUND_OR_FORBIDDEN,
            ErrorSeverity.WARNING, ctx, 404,
        )


class ResourceNotFoundError(VidTubeError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(VidTubeError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class BlobStorageError(VidTubeError):
    """Blob store rejected or failed an upload."""
    def __init__(self, hint_name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to store {hint_name}",
            "BLOB_STORAGE_ERROR", ErrorCategory.EXTERNAL_SERVICE,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.hint_name = hint_name
