"""Error response models for consistent API error handling."""

from pydantic import BaseModel

from accountdir.errors import ErrorCode


class ErrorDetail(BaseModel):
    """Field-level error information."""

    field: str | None = None
    """The field that caused the error, if applicable."""

    message: str
    """Human-readable error description."""


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "ACCOUNT_NOT_FOUND",
                "message": "No account found with external id SF-1"
            }
        }
    """

    error: ErrorBody
