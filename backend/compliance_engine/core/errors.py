"""Error Hierarchy — typed, categorized exceptions for compliance-engine failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ConfigurationError is a programming error, never a business outcome
    - DataUnavailableError escapes only when even the statutory computation fails
    - ExternalAPIError and NotificationDispatchError are recovered or isolated by services
    - to_response() produces the REST envelope route handlers return

Design Decisions:
    - Single hierarchy with ComplianceError base: callers catch one type (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    DATA_UNAVAILABLE = "data_unavailable"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    NOTIFICATION = "notification"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    state: str | None = None
    donor_id: str | None = None
    congress: int | None = None
    debug_info: dict[str, Any] | None = None


class ComplianceError(Exception):
    """Base exception for all compliance-engine errors."""

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
                    "state": self.context.state,
                    "donor_id": self.context.donor_id,
                    "congress": self.context.congress,
                },
            }
        }


# ─── Configuration Errors (400-level) ───────────────────────────

class ConfigurationError(ComplianceError):
    """Calculator invoked with inputs no tier policy can satisfy."""
    def __init__(
        self, message: str, code: str = "CONFIGURATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context, 400,
        )


class UnknownComplianceTierError(ConfigurationError):
    """Tier value is not one of the configured compliance tiers."""
    def __init__(self, tier: object, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid compliance tier: {tier}",
            "UNKNOWN_COMPLIANCE_TIER", context,
        )
        self.tier = tier


class MissingStateError(ConfigurationError):
    """Election-cycle tier requested without a state."""
    def __init__(self, tier: str, context: ErrorContext | None = None):
        super().__init__(
            f"State is required for {tier} tier election cycle limits",
            "STATE_REQUIRED", context,
        )
        self.tier = tier


# ─── Data & Infrastructure Errors (500-level) ───────────────────

class DataUnavailableError(ComplianceError):
    """No election boundary could be resolved, not even statutorily."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DATA_UNAVAILABLE", ErrorCategory.DATA_UNAVAILABLE,
            ErrorSeverity.WARNING, context, 503,
        )


class ExternalAPIError(ComplianceError):
    """Upstream data API call failed (timeout, non-2xx, missing key)."""
    def __init__(
        self,
        message: str,
        api_name: str,
        status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{api_name} API error: {message}",
            "EXTERNAL_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.WARNING, context, 503,
        )
        self.api_name = api_name
        self.status_code = status_code


class CongressAPIError(ExternalAPIError):
    """Congress.gov session lookup failed."""
    def __init__(
        self, message: str, status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "Congress.gov", status_code, context)


class FecAPIError(ExternalAPIError):
    """OpenFEC election-dates lookup failed."""
    def __init__(
        self, message: str, status_code: int | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(message, "OpenFEC", status_code, context)


class NotificationDispatchError(ComplianceError):
    """A single donor's email could not be sent."""
    def __init__(
        self, message: str, template: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Failed to send {template}: {message}",
            "NOTIFICATION_DISPATCH_FAILED", ErrorCategory.NOTIFICATION,
            ErrorSeverity.ERROR, context, 502,
        )
        self.template = template


class DatabaseError(ComplianceError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
