"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes returned by every endpoint."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, missing fields, etc.)."""

    RUN_NOT_FOUND = "RUN_NOT_FOUND"
    """No run owns the given thread id."""

    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    """The participant is not part of the run."""

    RUN_START_FAILED = "RUN_START_FAILED"
    """The standup thread could not be opened."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level detail for validation failures."""

    field: str | None = None
    message: str


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
                "code": "RUN_NOT_FOUND",
                "message": "No run for thread abc"
            }
        }
    """

    error: ErrorBody
