"""Error Hierarchy — typed, categorized exceptions for all marketplace failure modes.

Invariants:
    - Each subclass fixes its code, category, severity and http_status as class
      attributes; instances only add a message and context
    - 4xx errors are caller mistakes or normal refusals; 5xx are store, identity
      provider or partial-write failures
    - to_response() produces the REST envelope used by every error handler
    - The envelope context exposes model_id and purchased only; caller ids and
      debug_info stay in logs

Design Decisions:
    - Single hierarchy with MarketplaceError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - AlreadyPurchasedError answers 400 (not 409): existing clients branch on 400 for
      "invalid id or prior purchase"; the category still says conflict
    - PurchasePartialFailureError is its own class: the counter moved but the ledger
      did not, which is neither a success nor a clean failure
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PARTIAL_FAILURE = "partial_failure"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Who and what an error concerns; filled in by the raising layer."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    model_id: str | None = None
    caller_id: str | None = None
    purchased: int | None = None
    debug_info: dict[str, Any] | None = None


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL
    severity = ErrorSeverity.ERROR
    http_status = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

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
                    "model_id": self.context.model_id,
                    "purchased": self.context.purchased,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidIdError(MarketplaceError):
    """Identifier is not a syntactically valid record id."""
    code = "INVALID_ID"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(self, raw_id: Any, context: ErrorContext | None = None):
        super().__init__("Invalid Model ID format.", context)
        self.raw_id = raw_id


class UnauthorizedError(MarketplaceError):
    """Bearer credential missing, malformed, expired or rejected."""
    code = "UNAUTHORIZED"
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.WARNING
    http_status = 401

    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(f"Unauthorized Access: {reason}", context)


class ForbiddenError(MarketplaceError):
    """Caller is authenticated but not allowed to perform the action."""
    code = "FORBIDDEN"
    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.WARNING
    http_status = 403

    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(f"Forbidden: {reason}", context)


class ResourceNotFoundError(MarketplaceError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)


class AlreadyPurchasedError(MarketplaceError):
    """Buyer already holds a ledger entry for this model."""
    code = "ALREADY_PURCHASED"
    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.WARNING
    http_status = 400

    def __init__(self, model_id: str, context: ErrorContext | None = None):
        super().__init__("You have already purchased this model.", context)
        self.context.model_id = model_id


# ─── Server Errors (500-level) ──────────────────────────────────

class PurchasePartialFailureError(MarketplaceError):
    """Counter incremented but the ledger entry could not be written."""
    code = "PURCHASE_PARTIAL_FAILURE"
    category = ErrorCategory.PARTIAL_FAILURE
    severity = ErrorSeverity.CRITICAL

    def __init__(
        self, model_id: str, purchased: int | None, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Purchase counted but the transaction could not be logged. "
            "Support has been notified; do not retry this purchase.",
            context,
        )
        self.context.model_id = model_id
        self.context.purchased = purchased


class DatabaseError(MarketplaceError):
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Database {operation} failed: {message}", context)
        self.operation = operation


class DuplicateEntryError(DatabaseError):
    """Store-level uniqueness constraint rejected an insert."""
    code = "DUPLICATE_ENTRY"
    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.WARNING
    http_status = 409

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "insert", context)


class IdentityNotConfiguredError(MarketplaceError):
    """No identity verifier available to check bearer credentials."""
    code = "AUTH_NOT_CONFIGURED"
    severity = ErrorSeverity.CRITICAL

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Server Error: identity verification is not configured.", context,
        )


class IdentityServiceError(MarketplaceError):
    """Signing-keys endpoint unreachable or returned garbage."""
    code = "IDENTITY_SERVICE_ERROR"
    category = ErrorCategory.EXTERNAL_API
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(f"Identity service error: {reason}", context)
