"""API exception hierarchy for consistent error handling.

All API exceptions inherit from HuddleAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from huddle.api.models.errors import ErrorCode


class HuddleAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(HuddleAPIError):
    """Raised when a request is well-formed but cannot be honoured."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class RunNotFoundError(HuddleAPIError):
    """Raised when no run owns the thread id."""

    status_code = 404
    error_code = ErrorCode.RUN_NOT_FOUND


class ParticipantNotFoundError(HuddleAPIError):
    """Raised when the participant is not part of the run."""

    status_code = 404
    error_code = ErrorCode.PARTICIPANT_NOT_FOUND


class RunStartError(HuddleAPIError):
    """Raised when the chat transport could not open the thread."""

    status_code = 502
    error_code = ErrorCode.RUN_START_FAILED
