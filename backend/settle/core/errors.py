"""Error Hierarchy — typed, categorized exceptions for all settle failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Input validation codes are stable, lowercase and machine-readable (price_invalid, ...)
    - Every InputValidationError carries the offending raw input and echoes it under `details`
    - to_response() produces the REST envelope; no internal details in user-facing messages

Design Decisions:
    - Single hierarchy with SettleError base: FastAPI global handler catches all (ADR: uniform error shape)
    - One subclass per validator: callers branch on type, clients branch on code
    - UniqueConstraintViolationError keeps the driver error as `cause` for logs only
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
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_token: str | None = None
    username: str | None = None
    debug_info: dict[str, Any] | None = None


class SettleError(Exception):
    """Base exception for all settle errors."""

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
            }
        }


# ─── Input Validation Errors (400-level) ────────────────────────

# Echoed raw values are cut to this many characters
MAX_ECHOED_VALUE: int = 128


class InputValidationError(SettleError):
    """A raw boundary value failed syntactic or numeric validation.

    `param` names the request parameter the value arrived in; the response
    envelope echoes it with the (truncated) raw value under `details`.
    """
    param: str = "input"

    def __init__(
        self,
        message: str,
        code: str,
        raw: object,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.raw = raw
        self.cause = cause

    def details(self) -> list[dict[str, Any]]:
        value = str(self.raw)
        if len(value) > MAX_ECHOED_VALUE:
            value = value[:MAX_ECHOED_VALUE] + "..."
        return [{"field": self.param, "value": value}]

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details()
        return response


class RequestInvalidError(InputValidationError):
    """Request body or parameters rejected by schema validation."""
    param = "body"

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__("Invalid request data", "request_invalid", errors)
        self.errors = errors

    def details(self) -> list[dict[str, Any]]:
        return [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in self.errors
        ]


class IdentifierInvalidError(InputValidationError):
    """Identifier does not match owner@mint[kind_token]."""
    param = "id"

    def __init__(self, raw: str):
        super().__init__(
            f"The identifier is invalid: {raw}. Identifiers must have the "
            "form owner@mint[kind_token].",
            "identifier_invalid", raw,
        )


class PriceInvalidError(InputValidationError):
    """Price is malformed, or one of its sides is out of bounds."""
    param = "price"

    def __init__(self, raw: str, side: str | None = None):
        if side is None:
            message = (
                f"The offer price you provided is invalid: {raw}. Prices must "
                "have the form 'pB/pQ' where pB is the base asset price and pQ "
                "is the quote asset price."
            )
        else:
            message = (
                f"The {side} asset price you provided is invalid: {raw}. "
                "Asset prices must be integers between 0 and 2^128."
            )
        super().__init__(message, "price_invalid", raw)
        self.side = side
        if side is not None:
            self.param = f"price.{side}"


class AmountInvalidError(InputValidationError):
    param = "amount"

    def __init__(self, raw: str):
        super().__init__(
            f"The amount you provided is invalid: {raw}. Amounts must be "
            "integers between 0 and 2^128.",
            "amount_invalid", raw,
        )


class AssetPairInvalidError(InputValidationError):
    param = "pair"

    def __init__(self, raw: str, cause: BaseException | None = None):
        super().__init__(
            f"The asset pair you provided is invalid: {raw}.",
            "pair_invalid", raw, cause,
        )


class PathInvalidError(InputValidationError):
    """One element of an offer path is not a valid offer id."""
    param = "path"

    def __init__(self, raw: str, cause: BaseException | None = None):
        super().__init__(
            f"The offer id you provided in `path[]` is invalid: {raw}. Offer "
            "ids must have the form kgodel@princeton.edu[offer_*].",
            "path_invalid", raw, cause,
        )


class IdInvalidError(InputValidationError):
    param = "id"

    def __init__(self, raw: str, cause: BaseException | None = None):
        super().__init__(
            f"The id you provided is invalid: {raw}. Ids must have the form "
            "kgodel@princeton.edu[xxxx_*].",
            "id_invalid", raw, cause,
        )


class SecretInvalidError(InputValidationError):
    param = "secret"

    def __init__(self, raw: str):
        super().__init__(
            f"The secret you provided is structurally invalid: {raw}.",
            "secret_invalid", raw,
        )


class HopInvalidError(InputValidationError):
    param = "hop"

    def __init__(self, raw: str, cause: BaseException | None = None):
        super().__init__(
            f"The transaction hop provided is invalid: {raw}. Transaction "
            "hops must be 8 bits positive integers.",
            "hop_invalid", raw, cause,
        )


# ─── Domain Errors ──────────────────────────────────────────────

class UniqueConstraintViolationError(SettleError):
    """Username or email is already registered."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            "The username or email you provided is already registered.",
            "unique_constraint_violation", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.cause = cause


class ResourceNotFoundError(SettleError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "resource_not_found", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class CredentialsMismatchError(SettleError):
    """Presented secret does not match the stored one."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "The credentials you provided do not match.",
            "credentials_mismatch", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(SettleError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "database_error", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class CredentialDerivationError(SettleError):
    """Key derivation primitive failed; no partial user is surfaced."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            "Credential derivation failed",
            "credential_derivation_failed", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.cause = cause


class InternalError(SettleError):
    """Unexpected failure; the user-facing message never carries details."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "internal_error", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
