"""API request and response models."""

from huddle.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from huddle.api.models.health import HealthResponse
from huddle.api.models.runs import (
    MessageEventResponse,
    RunResponse,
    SessionView,
    SkipParticipantRequest,
    StartRunRequest,
)

__all__ = [
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "MessageEventResponse",
    "RunResponse",
    "SessionView",
    "SkipParticipantRequest",
    "StartRunRequest",
]
