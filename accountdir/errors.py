"""Error hierarchy for the account directory.

All directory errors inherit from AccountDirectoryError, which provides
status_code and error_code attributes used by the API exception handler
to render a consistent ErrorResponse. Store backends wrap their own
failures in StoreUnavailableError.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes for directory failures."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """A required account field is missing or empty."""

    MALFORMED_IDENTIFIER = "MALFORMED_IDENTIFIER"
    """A primary id token is not a valid identifier."""

    MISSING_IDENTIFIER = "MISSING_IDENTIFIER"
    """An external id was required but not supplied."""

    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    """No account matched the external id."""

    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    """The document store could not be reached or failed internally."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request body could not be parsed."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class AccountDirectoryError(Exception):
    """Base exception for all directory errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AccountDirectoryError):
    """Raised when required fields are missing at creation."""

    status_code = 400
    error_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class MalformedIdentifierError(AccountDirectoryError):
    """Raised when a primary id cannot be parsed."""

    status_code = 400
    error_code = ErrorCode.MALFORMED_IDENTIFIER

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


class MissingIdentifierError(AccountDirectoryError):
    """Raised when an external-id update has no external id."""

    status_code = 400
    error_code = ErrorCode.MISSING_IDENTIFIER


class NotFoundError(AccountDirectoryError):
    """Raised when an external-id update matches no account."""

    status_code = 404
    error_code = ErrorCode.ACCOUNT_NOT_FOUND


class StoreUnavailableError(AccountDirectoryError):
    """Raised when the document store fails.

    Examples:
        - Database connection refused or timed out
        - Query failed inside the backend
    """

    status_code = 503
    error_code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
